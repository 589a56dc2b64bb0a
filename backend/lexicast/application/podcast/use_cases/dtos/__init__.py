"""DTOs for podcast use cases."""

from lexicast.application.podcast.use_cases.dtos.audio_processing_dtos import (
    AudioProcessingJob,
    MediaProbe,
    QualityLevelJob,
    TranscodeOutcome,
)

__all__ = ["AudioProcessingJob", "MediaProbe", "QualityLevelJob", "TranscodeOutcome"]
