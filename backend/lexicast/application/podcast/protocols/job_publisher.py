from typing import Protocol

from lexicast.application.podcast.use_cases.dtos import AudioProcessingJob


class AudioJobPublisherProtocol(Protocol):
    async def publish(self, job: AudioProcessingJob) -> None: ...
