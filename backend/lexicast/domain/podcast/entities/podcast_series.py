"""Podcast series and season entities."""

from dataclasses import dataclass
from datetime import datetime

from lexicast.domain.common.entity import Entity
from lexicast.domain.common.exceptions import ValidationError
from lexicast.domain.common.value_objects.ids import PodcastSeasonId, PodcastSeriesId


@dataclass
class PodcastSeries(Entity[PodcastSeriesId]):
    id: PodcastSeriesId
    title: str
    description: str | None = None
    source_language: str = "EN"
    target_language: str = "TR"
    level: str | None = None
    thumbnail_url: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValidationError("Title cannot be empty", field="title")

    @classmethod
    def create(
        cls,
        title: str,
        description: str | None = None,
        source_language: str = "EN",
        target_language: str = "TR",
        level: str | None = None,
    ) -> "PodcastSeries":
        return cls(
            id=PodcastSeriesId.generate(),
            title=title,
            description=description,
            source_language=source_language,
            target_language=target_language,
            level=level,
        )


@dataclass
class PodcastSeason(Entity[PodcastSeasonId]):
    id: PodcastSeasonId
    series_id: PodcastSeriesId
    season_number: int
    title: str
    description: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.season_number <= 0:
            raise ValidationError(
                "Season number must be positive", field="season_number", value=self.season_number
            )
        if not self.title or not self.title.strip():
            raise ValidationError("Title cannot be empty", field="title")

    @classmethod
    def create(
        cls,
        series_id: PodcastSeriesId,
        season_number: int,
        title: str,
        description: str | None = None,
    ) -> "PodcastSeason":
        return cls(
            id=PodcastSeasonId.generate(),
            series_id=series_id,
            season_number=season_number,
            title=title,
            description=description,
        )
