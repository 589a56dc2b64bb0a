"""Wire format of audio processing jobs on the queue."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lexicast.application.podcast.use_cases.dtos import AudioProcessingJob, QualityLevelJob
from lexicast.utils import ensure_utc


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QualityLevelMessage(_CamelModel):
    quality: str = Field(..., min_length=1)
    bitrate: int = Field(..., gt=0)
    output_path: str = Field(..., min_length=1)


class AudioProcessingMessage(_CamelModel):
    """
    JSON body of a queued job, with camelCase keys.

    Example:
        {"episodeId": 7, "originalFilePath": "podcasts/1/2/7/original_20240101_120000.mp3",
         "originalFileName": "lesson.mp3", "queuedAt": "2024-01-01T12:00:00Z",
         "qualityLevels": [{"quality": "64k", "bitrate": 64,
                            "outputPath": "podcasts/1/2/7/64k.mp3"}]}
    """

    episode_id: int
    original_file_path: str = Field(..., min_length=1)
    original_file_name: str
    queued_at: datetime
    quality_levels: list[QualityLevelMessage] = Field(default_factory=list)

    @classmethod
    def from_job(cls, job: AudioProcessingJob) -> "AudioProcessingMessage":
        return cls(
            episode_id=job.episode_id,
            original_file_path=job.original_file_path,
            original_file_name=job.original_file_name,
            queued_at=job.queued_at,
            quality_levels=[
                QualityLevelMessage(
                    quality=level.quality, bitrate=level.bitrate, output_path=level.output_path
                )
                for level in job.quality_levels
            ],
        )

    def to_job(self) -> AudioProcessingJob:
        return AudioProcessingJob(
            episode_id=self.episode_id,
            original_file_path=self.original_file_path,
            original_file_name=self.original_file_name,
            queued_at=ensure_utc(self.queued_at),
            quality_levels=[
                QualityLevelJob(
                    quality=level.quality, bitrate=level.bitrate, output_path=level.output_path
                )
                for level in self.quality_levels
            ],
        )

    def encode(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def decode(cls, raw: str | bytes) -> "AudioProcessingMessage":
        """
        Parse a queued payload.

        Raises:
            pydantic.ValidationError: If the payload is not a valid job
        """
        return cls.model_validate_json(raw)
