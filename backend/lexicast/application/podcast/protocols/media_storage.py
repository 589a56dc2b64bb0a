from pathlib import Path
from typing import BinaryIO, Protocol

from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode


class MediaStorageProtocol(Protocol):
    def validate_audio(self, file_name: str | None, content_type: str | None, size: int) -> str: ...

    def validate_image(self, file_name: str | None, content_type: str | None, size: int) -> str: ...

    def save_audio(self, episode: PodcastEpisode, file_name: str, stream: BinaryIO) -> str: ...

    def save_thumbnail(self, episode: PodcastEpisode, file_name: str, stream: BinaryIO) -> str: ...

    def rendition_path(self, episode: PodcastEpisode, quality: str) -> str: ...

    def resolve(self, relative_path: str) -> Path: ...

    def delete(self, relative_path: str) -> bool: ...
