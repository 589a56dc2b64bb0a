"""DTOs for audio processing use cases."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from lexicast.domain.podcast.value_objects.audio_quality import QualityLevel


@dataclass(frozen=True)
class QualityLevelJob:
    """One rendition the worker should produce."""

    quality: str
    bitrate: int
    output_path: str

    @property
    def level(self) -> QualityLevel:
        return QualityLevel(self.quality, self.bitrate)


@dataclass(frozen=True)
class AudioProcessingJob:
    """Work item handed from upload intake to the transcoding worker."""

    episode_id: int
    original_file_path: str
    original_file_name: str
    queued_at: datetime
    quality_levels: list[QualityLevelJob] = field(default_factory=list)


@dataclass(frozen=True)
class MediaProbe:
    duration_seconds: int
    file_size: int


class TranscodeOutcome(str, Enum):
    """How a job ended, from the queue's point of view."""

    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"
    EPISODE_MISSING = "episode_missing"
