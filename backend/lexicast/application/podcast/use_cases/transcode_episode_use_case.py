"""Use case for turning an uploaded episode into multi-bitrate renditions."""

import asyncio
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import structlog

from lexicast.application.podcast.protocols.audio_encoder import AudioEncoderProtocol
from lexicast.application.podcast.protocols.episode_repository import (
    PodcastEpisodeRepositoryProtocol,
)
from lexicast.application.podcast.protocols.media_storage import MediaStorageProtocol
from lexicast.application.podcast.use_cases.dtos import (
    AudioProcessingJob,
    QualityLevelJob,
    TranscodeOutcome,
)
from lexicast.domain.common.value_objects.ids import EpisodeId
from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.domain.podcast.exceptions import InvalidStatusTransitionError
from lexicast.domain.podcast.value_objects.audio_quality import AudioQuality
from lexicast.domain.podcast.value_objects.processing_status import ProcessingStatus
from lexicast.utils import utc_now

logger = structlog.get_logger(__name__)


class TranscodeEpisodeUseCase:
    """Process one audio job end to end."""

    def __init__(
        self,
        episode_repository: PodcastEpisodeRepositoryProtocol,
        media_storage: MediaStorageProtocol,
        encoder: AudioEncoderProtocol,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.episode_repository = episode_repository
        self.media_storage = media_storage
        self.encoder = encoder
        self.clock = clock

    async def process(self, job: AudioProcessingJob) -> TranscodeOutcome:
        """
        Encode every requested quality of an episode's audio.

        A quality that fails to encode is recorded as unprocessed and the loop
        moves on; the episode still ends up Completed. Any other error marks the
        episode Failed. Errors raised while recording Failed propagate so the
        caller can retry the job.

        Args:
            job: The queued processing job

        Returns:
            How the job ended
        """
        episode = await asyncio.to_thread(
            self.episode_repository.find_by_id, EpisodeId(job.episode_id)
        )
        if episode is None:
            logger.warning("transcode_episode_missing", episode_id=job.episode_id)
            return TranscodeOutcome.EPISODE_MISSING

        try:
            episode.start_processing(self.clock())
        except InvalidStatusTransitionError:
            logger.warning(
                "transcode_job_skipped",
                episode_id=job.episode_id,
                status=episode.processing_status.value,
            )
            return TranscodeOutcome.SKIPPED

        try:
            episode = await asyncio.to_thread(self.episode_repository.save, episode)
            await self._encode_all(episode, job)
        except Exception as e:
            logger.error(
                "episode_processing_failed",
                episode_id=job.episode_id,
                error=str(e),
                exc_info=True,
            )
            await asyncio.to_thread(
                self._mark_failed, job.episode_id, str(e) or e.__class__.__name__
            )
            return TranscodeOutcome.FAILED

        return TranscodeOutcome.COMPLETED

    async def _encode_all(self, episode: PodcastEpisode, job: AudioProcessingJob) -> None:
        source = self.media_storage.resolve(job.original_file_path)
        probe = await self.encoder.probe(source)

        qualities = [AudioQuality.original(job.original_file_path, probe.file_size, self.clock())]
        for level_job in job.quality_levels:
            qualities.append(await self._encode_one(episode, source, level_job))

        episode.complete_processing(probe.duration_seconds, qualities, self.clock())
        await asyncio.to_thread(self.episode_repository.save, episode)

        processed = sum(1 for q in qualities if q.is_processed and not q.is_original)
        logger.info(
            "episode_processing_completed",
            episode_id=episode.id.value,
            duration_seconds=probe.duration_seconds,
            processed=processed,
            requested=len(job.quality_levels),
        )

    async def _encode_one(
        self, episode: PodcastEpisode, source: Path, level_job: QualityLevelJob
    ) -> AudioQuality:
        try:
            output = self.media_storage.resolve(level_job.output_path)
            succeeded = await self.encoder.transcode(source, output, level_job.bitrate)
            if succeeded and output.exists():
                return AudioQuality.processed(
                    level_job.level, level_job.output_path, output.stat().st_size, self.clock()
                )
        except Exception as e:
            logger.warning(
                "transcode_quality_failed",
                episode_id=episode.id.value,
                quality=level_job.quality,
                output=level_job.output_path,
                error=str(e),
                exc_info=True,
            )
            return AudioQuality.failed(level_job.level, level_job.output_path)

        logger.warning(
            "transcode_quality_failed",
            episode_id=episode.id.value,
            quality=level_job.quality,
            output=level_job.output_path,
        )
        return AudioQuality.failed(level_job.level, level_job.output_path)

    def _mark_failed(self, episode_id: int, error: str) -> None:
        # Reload so a half-applied in-memory state is not written back
        episode = self.episode_repository.find_by_id(EpisodeId(episode_id))
        if episode is None:
            return
        if episode.processing_status == ProcessingStatus.QUEUED:
            episode.start_processing(self.clock())
        episode.fail_processing(error, self.clock())
        self.episode_repository.save(episode)
