"""Repositories for podcast series and seasons."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lexicast.domain.common.value_objects.ids import PodcastSeasonId, PodcastSeriesId
from lexicast.domain.podcast.entities.podcast_series import PodcastSeason, PodcastSeries
from lexicast.domain.podcast.exceptions import (
    DuplicateSeasonError,
    PodcastSeasonNotFoundError,
    PodcastSeriesNotFoundError,
)
from lexicast.infrastructure.podcast.mappers.podcast_mapper import (
    PodcastSeasonMapper,
    PodcastSeriesMapper,
)
from lexicast.models import PodcastSeason as PodcastSeasonORM
from lexicast.models import PodcastSeries as PodcastSeriesORM

logger = logging.getLogger(__name__)


class PodcastSeriesRepository:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = PodcastSeriesMapper()

    def find_by_id(self, series_id: PodcastSeriesId) -> PodcastSeries | None:
        orm_model = self.db.get(PodcastSeriesORM, series_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_all(self, active_only: bool = True) -> list[PodcastSeries]:
        stmt = select(PodcastSeriesORM).order_by(PodcastSeriesORM.title)
        if active_only:
            stmt = stmt.where(PodcastSeriesORM.is_active.is_(True))
        return [self.mapper.to_domain(row) for row in self.db.execute(stmt).scalars()]

    def save(self, series: PodcastSeries) -> PodcastSeries:
        if not series.id.is_persisted():
            orm_model = self.mapper.to_orm(series)
            self.db.add(orm_model)
        else:
            existing = self.db.get(PodcastSeriesORM, series.id.value)
            if existing is None:
                raise PodcastSeriesNotFoundError(series.id.value)
            orm_model = self.mapper.to_orm(series, existing)

        self.db.commit()
        self.db.refresh(orm_model)
        logger.info(f"Saved podcast series {orm_model.id}")
        return self.mapper.to_domain(orm_model)


class PodcastSeasonRepository:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = PodcastSeasonMapper()

    def find_by_id(self, season_id: PodcastSeasonId) -> PodcastSeason | None:
        orm_model = self.db.get(PodcastSeasonORM, season_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_by_series(self, series_id: PodcastSeriesId) -> list[PodcastSeason]:
        stmt = (
            select(PodcastSeasonORM)
            .where(PodcastSeasonORM.series_id == series_id.value)
            .order_by(PodcastSeasonORM.season_number)
        )
        return [self.mapper.to_domain(row) for row in self.db.execute(stmt).scalars()]

    def save(self, season: PodcastSeason) -> PodcastSeason:
        """
        Save a season (create or update).

        Raises:
            DuplicateSeasonError: If the series already has a season with that number
        """
        if not season.id.is_persisted():
            orm_model = self.mapper.to_orm(season)
            self.db.add(orm_model)
        else:
            existing = self.db.get(PodcastSeasonORM, season.id.value)
            if existing is None:
                raise PodcastSeasonNotFoundError(season.id.value)
            orm_model = self.mapper.to_orm(season, existing)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateSeasonError(season.series_id.value, season.season_number) from e

        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)
