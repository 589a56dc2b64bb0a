"""Use case for uploading episode audio and thumbnails."""

import asyncio
from typing import BinaryIO

import structlog

from lexicast.application.podcast.protocols.episode_repository import (
    PodcastEpisodeRepositoryProtocol,
)
from lexicast.application.podcast.protocols.job_publisher import AudioJobPublisherProtocol
from lexicast.application.podcast.protocols.media_storage import MediaStorageProtocol
from lexicast.application.podcast.use_cases.dtos import AudioProcessingJob, QualityLevelJob
from lexicast.domain.common.value_objects.ids import EpisodeId
from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.domain.podcast.exceptions import EpisodeBusyError, EpisodeNotFoundError
from lexicast.domain.podcast.value_objects.audio_quality import (
    DEFAULT_QUALITY_LEVELS,
    QualityLevel,
)
from lexicast.exceptions import QueueUnavailableError
from lexicast.utils import utc_now

logger = structlog.get_logger(__name__)


class EpisodeMediaUploadUseCase:
    """Accept media for an episode and hand audio off to the transcoding worker."""

    def __init__(
        self,
        episode_repository: PodcastEpisodeRepositoryProtocol,
        media_storage: MediaStorageProtocol,
        job_publisher: AudioJobPublisherProtocol,
        quality_levels: tuple[QualityLevel, ...] = DEFAULT_QUALITY_LEVELS,
    ) -> None:
        self.episode_repository = episode_repository
        self.media_storage = media_storage
        self.job_publisher = job_publisher
        self.quality_levels = quality_levels

    async def upload_audio(
        self,
        episode_id: int,
        file_name: str | None,
        content_type: str | None,
        size: int,
        stream: BinaryIO,
    ) -> PodcastEpisode:
        """
        Store new audio for an episode and queue it for transcoding.

        The episode is saved as Queued before the job is published. If the
        publish fails the episode stays Queued without a job in flight.

        Args:
            episode_id: Episode receiving the audio
            file_name: Client-supplied file name
            content_type: Client-supplied MIME type
            size: Upload size in bytes, checked before anything is read
            stream: Readable upload body, copied to storage in chunks

        Returns:
            The queued episode

        Raises:
            InvalidMediaFileError: If the file fails type or size checks
            EpisodeNotFoundError: If the episode does not exist
            EpisodeBusyError: If the episode is already queued or processing
            QueueUnavailableError: If the job could not be published
        """
        file_name = self.media_storage.validate_audio(file_name, content_type, size)

        episode = await asyncio.to_thread(self._get_episode, episode_id)
        read_status = episode.processing_status
        if not read_status.accepts_upload:
            raise EpisodeBusyError(episode_id, read_status.value)

        stored_path = await asyncio.to_thread(
            self.media_storage.save_audio, episode, file_name, stream
        )
        episode.queue_for_processing(stored_path, file_name)

        # Guarded by the status read above so two concurrent uploads cannot both queue
        saved = await asyncio.to_thread(
            self.episode_repository.save_if_status, episode, read_status
        )
        if not saved:
            await asyncio.to_thread(self.media_storage.delete, stored_path)
            current = await asyncio.to_thread(self._get_episode, episode_id)
            raise EpisodeBusyError(episode_id, current.processing_status.value)

        job = AudioProcessingJob(
            episode_id=episode.id.value,
            original_file_path=stored_path,
            original_file_name=file_name,
            queued_at=utc_now(),
            quality_levels=[
                QualityLevelJob(
                    quality=level.quality,
                    bitrate=level.bitrate,
                    output_path=self.media_storage.rendition_path(episode, level.quality),
                )
                for level in self.quality_levels
            ],
        )

        try:
            await self.job_publisher.publish(job)
        except QueueUnavailableError:
            logger.error(
                "episode_audio_publish_failed",
                episode_id=episode.id.value,
                path=stored_path,
            )
            raise

        logger.info(
            "episode_audio_queued",
            episode_id=episode.id.value,
            path=stored_path,
            qualities=[level.quality for level in self.quality_levels],
        )
        return await asyncio.to_thread(self._get_episode, episode_id)

    def upload_thumbnail(
        self,
        episode_id: int,
        file_name: str | None,
        content_type: str | None,
        size: int,
        stream: BinaryIO,
    ) -> PodcastEpisode:
        """
        Store a thumbnail image and replace the episode's previous one.

        Raises:
            InvalidMediaFileError: If the image fails type or size checks
            EpisodeNotFoundError: If the episode does not exist
        """
        file_name = self.media_storage.validate_image(file_name, content_type, size)

        episode = self._get_episode(episode_id)
        stored_path = self.media_storage.save_thumbnail(episode, file_name, stream)
        previous = episode.replace_thumbnail(stored_path)
        episode = self.episode_repository.save(episode)

        if previous and previous != stored_path:
            self.media_storage.delete(previous)

        logger.info("episode_thumbnail_uploaded", episode_id=episode_id, path=stored_path)
        return episode

    def _get_episode(self, episode_id: int) -> PodcastEpisode:
        episode = self.episode_repository.find_by_id(EpisodeId(episode_id))
        if episode is None:
            raise EpisodeNotFoundError(episode_id)
        return episode
