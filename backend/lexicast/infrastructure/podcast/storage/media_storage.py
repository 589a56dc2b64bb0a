"""Local filesystem storage for podcast audio and thumbnails."""

import logging
import shutil
from collections.abc import Callable
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.exceptions import InvalidMediaFileError
from lexicast.utils import utc_now

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = frozenset({".mp3"})
AUDIO_CONTENT_TYPES = frozenset({"audio/mpeg", "audio/mp3"})
IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp"})
IMAGE_CONTENT_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})

AUDIO_ROOT = "podcasts"
THUMBNAIL_ROOT = "thumbnails"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
BYTES_PER_MB = 1024 * 1024
COPY_CHUNK_SIZE = BYTES_PER_MB


class LocalMediaStorage:
    """
    Stores media under a public root that is served at /media.

    Stored paths are relative, forward-slash separated, and always resolve
    inside the public root.
    """

    def __init__(
        self,
        public_root: Path,
        max_audio_mb: int = 500,
        max_image_mb: int = 10,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.public_root = Path(public_root).resolve()
        self.max_audio_bytes = max_audio_mb * BYTES_PER_MB
        self.max_image_bytes = max_image_mb * BYTES_PER_MB
        self.clock = clock

    def validate_audio(self, file_name: str | None, content_type: str | None, size: int) -> str:
        """
        Check an uploaded audio file before anything is written.

        Returns:
            The file's base name

        Raises:
            InvalidMediaFileError: If the file is missing, empty, too large or not MP3
        """
        return self._validate(
            file_name,
            content_type,
            size,
            extensions=AUDIO_EXTENSIONS,
            content_types=AUDIO_CONTENT_TYPES,
            max_bytes=self.max_audio_bytes,
            media_type="audio",
        )

    def validate_image(self, file_name: str | None, content_type: str | None, size: int) -> str:
        return self._validate(
            file_name,
            content_type,
            size,
            extensions=IMAGE_EXTENSIONS,
            content_types=IMAGE_CONTENT_TYPES,
            max_bytes=self.max_image_bytes,
            media_type="image",
        )

    def save_audio(self, episode: PodcastEpisode, file_name: str, stream: BinaryIO) -> str:
        timestamp = self.clock().strftime(TIMESTAMP_FORMAT)
        relative = self._episode_dir(AUDIO_ROOT, episode) / f"original_{timestamp}.mp3"
        return self._write(relative, stream)

    def save_thumbnail(self, episode: PodcastEpisode, file_name: str, stream: BinaryIO) -> str:
        timestamp = self.clock().strftime(TIMESTAMP_FORMAT)
        extension = PurePosixPath(file_name).suffix.lower()
        relative = self._episode_dir(THUMBNAIL_ROOT, episode) / f"thumbnail_{timestamp}{extension}"
        return self._write(relative, stream)

    def rendition_path(self, episode: PodcastEpisode, quality: str) -> str:
        return str(self._episode_dir(AUDIO_ROOT, episode) / f"{quality}.mp3")

    def resolve(self, relative_path: str) -> Path:
        """
        Absolute path of a stored file.

        Raises:
            ValueError: If the path points outside the public root
        """
        path = (self.public_root / relative_path).resolve()
        if not path.is_relative_to(self.public_root):
            raise ValueError(f"Path escapes media root: {relative_path}")
        return path

    def delete(self, relative_path: str) -> bool:
        """
        Delete a stored file.

        Returns:
            True if a file was deleted, False if it did not exist or could not be removed
        """
        path = self.resolve(relative_path)
        if not path.is_file():
            logger.info(f"No media file to delete at {relative_path}")
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete media file {path}: {e!s}")
            return False
        logger.info(f"Deleted media file: {relative_path}")
        return True

    def _write(self, relative: PurePosixPath, stream: BinaryIO) -> str:
        path = self.resolve(str(relative))
        path.parent.mkdir(parents=True, exist_ok=True)
        stream.seek(0)
        with path.open("wb") as destination:
            shutil.copyfileobj(stream, destination, COPY_CHUNK_SIZE)
        logger.info(f"Saved media file: {relative} ({path.stat().st_size} bytes)")
        return str(relative)

    @staticmethod
    def _episode_dir(root: str, episode: PodcastEpisode) -> PurePosixPath:
        return PurePosixPath(
            root,
            str(episode.series_id.value),
            str(episode.season_id.value),
            str(episode.id.value),
        )

    @staticmethod
    def _validate(
        file_name: str | None,
        content_type: str | None,
        size: int,
        *,
        extensions: frozenset[str],
        content_types: frozenset[str],
        max_bytes: int,
        media_type: str,
    ) -> str:
        if not file_name:
            raise InvalidMediaFileError("no file provided", media_type)
        base_name = PurePosixPath(file_name.replace("\\", "/")).name
        if size <= 0:
            raise InvalidMediaFileError("file is empty", media_type)

        extension = PurePosixPath(base_name).suffix.lower()
        if extension not in extensions:
            allowed = ", ".join(sorted(extensions))
            raise InvalidMediaFileError(f"extension must be one of {allowed}", media_type)

        mime = (content_type or "").split(";")[0].strip().lower()
        if mime not in content_types:
            raise InvalidMediaFileError(
                f"content type {mime or 'unknown'} is not allowed", media_type
            )

        if size > max_bytes:
            raise InvalidMediaFileError(
                f"file exceeds {max_bytes // BYTES_PER_MB} MB limit", media_type
            )
        return base_name
