"""Long-running consumer that turns queued uploads into renditions."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import AbstractContextManager

import pydantic
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from lexicast.application.podcast.protocols.audio_encoder import AudioEncoderProtocol
from lexicast.application.podcast.protocols.media_storage import MediaStorageProtocol
from lexicast.application.podcast.use_cases.dtos import AudioProcessingJob, TranscodeOutcome
from lexicast.application.podcast.use_cases.transcode_episode_use_case import (
    TranscodeEpisodeUseCase,
)
from lexicast.database import session_scope
from lexicast.infrastructure.podcast.messaging.connection import (
    QueueConnectionManager,
    QueueDelivery,
)
from lexicast.infrastructure.podcast.messaging.messages import AudioProcessingMessage
from lexicast.infrastructure.podcast.repositories.podcast_episode_repository import (
    PodcastEpisodeRepository,
)

logger = logging.getLogger(__name__)

JobProcessor = Callable[[AudioProcessingJob], Awaitable[TranscodeOutcome]]


def build_job_processor(
    media_storage: MediaStorageProtocol,
    encoder: AudioEncoderProtocol,
    session_factory: Callable[[], AbstractContextManager[Session]] = session_scope,
) -> JobProcessor:
    """Run each job in its own database session."""

    async def process(job: AudioProcessingJob) -> TranscodeOutcome:
        with session_factory() as db:
            use_case = TranscodeEpisodeUseCase(
                episode_repository=PodcastEpisodeRepository(db),
                media_storage=media_storage,
                encoder=encoder,
            )
            return await use_case.process(job)

    return process


class TranscodingWorker:
    """
    Pulls one job at a time and settles it on the queue.

    Completed, failed and skipped jobs are acknowledged. Jobs for episodes
    that no longer exist, and payloads that cannot be decoded, go to the
    dead-letter stream. A job whose processing raised is put back on the
    stream for another attempt.
    """

    def __init__(
        self,
        connection: QueueConnectionManager,
        processor: JobProcessor,
    ) -> None:
        self.connection = connection
        self.processor = processor
        self._stop = asyncio.Event()

    @property
    def is_stopping(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        """Finish the current job, then exit the run loop."""
        self._stop.set()

    async def run(self) -> None:
        logger.info(f"Transcoding worker starting on {self.connection.stream}")
        if not await self._connect():
            return

        monitor = asyncio.create_task(self.connection.monitor(self._stop))
        try:
            while not self._stop.is_set():
                try:
                    delivery = await self.connection.read_one()
                    if delivery is not None:
                        await self.handle_delivery(delivery)
                except (RedisError, OSError) as e:
                    logger.error(f"Queue error in worker loop: {e!s}")
                    self.connection.reset_pending()
                    await self._wait(self.connection.retry_delay)
        finally:
            self._stop.set()
            await monitor
            await self.connection.close()
            logger.info("Transcoding worker stopped")

    async def handle_delivery(self, delivery: QueueDelivery) -> TranscodeOutcome | None:
        """
        Process one entry and settle it.

        Returns:
            The job outcome, or None if the entry was dead-lettered as
            undecodable or requeued after an error
        """
        if delivery.payload is None:
            await self.connection.dead_letter(delivery, "missing payload")
            return None

        try:
            job = AudioProcessingMessage.decode(delivery.payload).to_job()
        except pydantic.ValidationError as e:
            logger.warning(f"Undecodable job {delivery.message_id}: {e!s}")
            await self.connection.dead_letter(delivery, "invalid payload")
            return None

        try:
            outcome = await self.processor(job)
        except Exception as e:
            logger.error(
                f"Job {delivery.message_id} for episode {job.episode_id} raised, requeueing: {e!s}",
                exc_info=True,
            )
            await self._wait(self.connection.retry_delay)
            await self.connection.requeue(delivery)
            return None

        if outcome == TranscodeOutcome.EPISODE_MISSING:
            await self.connection.dead_letter(delivery, f"episode {job.episode_id} not found")
        else:
            await self.connection.ack(delivery)

        logger.info(f"Job {delivery.message_id} for episode {job.episode_id}: {outcome.value}")
        return outcome

    async def _connect(self) -> bool:
        while not self._stop.is_set():
            try:
                await self.connection.connect()
                return True
            except (RedisError, OSError) as e:
                logger.error(
                    f"Queue unavailable, retrying in {self.connection.retry_delay}s: {e!s}"
                )
                await self._wait(self.connection.retry_delay)
        return False

    async def _wait(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=seconds)
        except TimeoutError:
            pass
