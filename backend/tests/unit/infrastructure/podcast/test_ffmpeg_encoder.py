"""Tests for FfmpegAudioEncoder command handling."""

from pathlib import Path

import pytest

from lexicast.infrastructure.podcast.encoding.ffmpeg_encoder import (
    FfmpegAudioEncoder,
    _parse_duration,
)

MISSING_TOOL = "/nonexistent/bin/ffmpeg-tool"


class TestBuildCommand:
    def test_local_command(self) -> None:
        encoder = FfmpegAudioEncoder(ffmpeg_path="/usr/bin/ffmpeg")

        assert encoder.build_command("/usr/bin/ffmpeg", ["-i", "a.mp3"]) == [
            "/usr/bin/ffmpeg",
            "-i",
            "a.mp3",
        ]

    def test_docker_command_mounts_media_root(self, tmp_path: Path) -> None:
        encoder = FfmpegAudioEncoder(
            ffmpeg_path="/usr/local/bin/ffmpeg",
            use_docker=True,
            docker_image="ffmpeg-image:6",
            public_root=tmp_path,
        )

        command = encoder.build_command("/usr/local/bin/ffmpeg", ["-version"])

        assert command == [
            "docker",
            "run",
            "--rm",
            "-v",
            f"{tmp_path.resolve()}:/workspace",
            "ffmpeg-image:6",
            "ffmpeg",
            "-version",
        ]

    def test_docker_paths_are_mapped_into_workspace(self, tmp_path: Path) -> None:
        encoder = FfmpegAudioEncoder(use_docker=True, public_root=tmp_path)

        mapped = encoder._container_path(tmp_path / "podcasts" / "1" / "2" / "3" / "64k.mp3")

        assert mapped == "/workspace/podcasts/1/2/3/64k.mp3"

    def test_docker_requires_public_root(self) -> None:
        with pytest.raises(ValueError):
            FfmpegAudioEncoder(use_docker=True)


class TestParseDuration:
    def test_rounds_down_to_seconds(self) -> None:
        assert _parse_duration("754.912000\n") == 754

    def test_unreadable_output(self) -> None:
        assert _parse_duration("") == 0
        assert _parse_duration("N/A\n") == 0
        assert _parse_duration("-3.0") == 0
        assert _parse_duration("nan") == 0


class TestRunFailures:
    async def test_probe_missing_file(self, tmp_path: Path) -> None:
        encoder = FfmpegAudioEncoder()

        with pytest.raises(FileNotFoundError):
            await encoder.probe(tmp_path / "missing.mp3")

    async def test_probe_without_ffprobe_reports_zero_duration(self, tmp_path: Path) -> None:
        source = tmp_path / "lesson.mp3"
        source.write_bytes(b"ID3" * 100)
        encoder = FfmpegAudioEncoder(ffprobe_path=MISSING_TOOL)

        probe = await encoder.probe(source)

        assert probe.duration_seconds == 0
        assert probe.file_size == 300

    async def test_transcode_without_ffmpeg_fails(self, tmp_path: Path) -> None:
        source = tmp_path / "lesson.mp3"
        source.write_bytes(b"ID3")
        output = tmp_path / "out" / "128k.mp3"
        encoder = FfmpegAudioEncoder(ffmpeg_path=MISSING_TOOL)

        assert await encoder.transcode(source, output, 128) is False
        assert output.parent.is_dir()
        assert not output.exists()
