"""Publishes audio processing jobs to the queue."""

import logging

from redis.exceptions import RedisError

from lexicast.application.podcast.use_cases.dtos import AudioProcessingJob
from lexicast.exceptions import QueueUnavailableError
from lexicast.infrastructure.podcast.messaging.connection import QueueConnectionManager
from lexicast.infrastructure.podcast.messaging.messages import AudioProcessingMessage

logger = logging.getLogger(__name__)


class RedisAudioJobPublisher:
    def __init__(self, connection: QueueConnectionManager) -> None:
        self.connection = connection

    async def publish(self, job: AudioProcessingJob) -> None:
        """
        Add a job to the processing stream.

        Raises:
            QueueUnavailableError: If Redis cannot be reached
        """
        payload = AudioProcessingMessage.from_job(job).encode()
        try:
            message_id = await self.connection.publish(payload)
        except (RedisError, OSError) as e:
            logger.error(f"Failed to publish job for episode {job.episode_id}: {e!s}")
            raise QueueUnavailableError("Audio processing queue is unavailable") from e

        logger.info(f"Published job {message_id} for episode {job.episode_id}")
