"""Audio encoding through the ffmpeg command line tools."""

import asyncio
import logging
import math
from pathlib import Path, PurePosixPath

from lexicast.application.podcast.use_cases.dtos import MediaProbe

logger = logging.getLogger(__name__)

DOCKER_WORKSPACE = "/workspace"
STDERR_TAIL_CHARS = 500


class FfmpegAudioEncoder:
    """
    Runs ffmpeg and ffprobe as subprocesses.

    With use_docker the tools run inside a container that mounts the media
    root at /workspace, so every path handed in must live under that root.
    """

    def __init__(
        self,
        ffmpeg_path: str = "ffmpeg",
        ffprobe_path: str = "ffprobe",
        use_docker: bool = False,
        docker_image: str = "jrottenberg/ffmpeg:latest",
        public_root: Path | None = None,
    ) -> None:
        if use_docker and public_root is None:
            raise ValueError("public_root is required when running ffmpeg in docker")
        self.ffmpeg_path = ffmpeg_path
        self.ffprobe_path = ffprobe_path
        self.use_docker = use_docker
        self.docker_image = docker_image
        self.public_root = Path(public_root).resolve() if public_root else None

    async def probe(self, source: Path) -> MediaProbe:
        """
        Read duration and size of an audio file.

        A duration ffprobe cannot report comes back as 0.

        Raises:
            FileNotFoundError: If the source file does not exist
        """
        if not source.is_file():
            raise FileNotFoundError(f"Audio file not found: {source}")

        file_size = source.stat().st_size
        returncode, stdout, stderr = await self._run(
            self.ffprobe_path,
            [
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                self._container_path(source),
            ],
        )
        if returncode != 0:
            logger.warning(f"ffprobe failed for {source}: {stderr[-STDERR_TAIL_CHARS:]}")
            return MediaProbe(duration_seconds=0, file_size=file_size)

        return MediaProbe(duration_seconds=_parse_duration(stdout), file_size=file_size)

    async def transcode(self, source: Path, output: Path, bitrate_kbps: int) -> bool:
        """
        Encode source to an MP3 at the given bitrate.

        Returns:
            True if ffmpeg exited cleanly, False otherwise
        """
        output.parent.mkdir(parents=True, exist_ok=True)
        returncode, _, stderr = await self._run(
            self.ffmpeg_path,
            [
                "-i",
                self._container_path(source),
                "-codec:a",
                "libmp3lame",
                "-b:a",
                f"{bitrate_kbps}k",
                "-y",
                self._container_path(output),
            ],
        )
        if returncode != 0:
            logger.warning(
                f"ffmpeg exited with {returncode} encoding {output.name}: "
                f"{stderr[-STDERR_TAIL_CHARS:]}"
            )
            return False

        logger.info(f"Encoded {output} at {bitrate_kbps}k")
        return True

    def build_command(self, tool: str, args: list[str]) -> list[str]:
        if not self.use_docker:
            return [tool, *args]
        return [
            "docker",
            "run",
            "--rm",
            "-v",
            f"{self.public_root}:{DOCKER_WORKSPACE}",
            self.docker_image,
            PurePosixPath(tool).name,
            *args,
        ]

    async def _run(self, tool: str, args: list[str]) -> tuple[int, str, str]:
        command = self.build_command(tool, args)
        logger.debug(f"Running {' '.join(command)}")
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            logger.error(f"Executable not found: {command[0]}")
            return 127, "", f"{command[0]} not found"

        stdout, stderr = await process.communicate()
        return (
            process.returncode if process.returncode is not None else -1,
            stdout.decode(errors="replace"),
            stderr.decode(errors="replace"),
        )

    def _container_path(self, path: Path) -> str:
        if not self.use_docker or self.public_root is None:
            return str(path)
        relative = path.resolve().relative_to(self.public_root)
        return str(PurePosixPath(DOCKER_WORKSPACE) / relative.as_posix())


def _parse_duration(output: str) -> int:
    """Whole seconds from ffprobe's duration output, 0 if unreadable."""
    try:
        seconds = float(output.strip().splitlines()[0])
    except (IndexError, ValueError):
        return 0
    if not math.isfinite(seconds) or seconds < 0:
        return 0
    return int(seconds)
