"""Audio rendition value objects."""

from dataclasses import dataclass
from datetime import datetime

from lexicast.domain.common.exceptions import ValidationError
from lexicast.domain.common.value_object import ValueObject

ORIGINAL_QUALITY = "original"


@dataclass(frozen=True)
class QualityLevel(ValueObject):
    """A requested encoding target, e.g. 128k MP3."""

    quality: str
    bitrate: int

    def __post_init__(self) -> None:
        if not self.quality:
            raise ValidationError("Quality label cannot be empty", field="quality")
        if self.bitrate <= 0:
            raise ValidationError(
                "Bitrate must be positive", field="bitrate", value=self.bitrate
            )


DEFAULT_QUALITY_LEVELS: tuple[QualityLevel, ...] = (
    QualityLevel("64k", 64),
    QualityLevel("128k", 128),
    QualityLevel("256k", 256),
)


@dataclass(frozen=True)
class AudioQuality(ValueObject):
    """One rendition of an episode's audio and its processing outcome."""

    quality: str
    url: str
    file_size: int = 0
    bitrate: int = 0
    is_processed: bool = False
    processed_at: datetime | None = None

    @property
    def is_original(self) -> bool:
        return self.quality == ORIGINAL_QUALITY

    @classmethod
    def original(cls, url: str, file_size: int, at: datetime) -> "AudioQuality":
        return cls(
            quality=ORIGINAL_QUALITY,
            url=url,
            file_size=file_size,
            bitrate=0,
            is_processed=True,
            processed_at=at,
        )

    @classmethod
    def processed(
        cls, level: QualityLevel, url: str, file_size: int, at: datetime
    ) -> "AudioQuality":
        return cls(
            quality=level.quality,
            url=url,
            file_size=file_size,
            bitrate=level.bitrate,
            is_processed=True,
            processed_at=at,
        )

    @classmethod
    def failed(cls, level: QualityLevel, url: str) -> "AudioQuality":
        return cls(quality=level.quality, url=url, bitrate=level.bitrate)
