"""Repository for podcast episodes."""

import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from lexicast.domain.common.value_objects.ids import EpisodeId, PodcastSeasonId, PodcastSeriesId
from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.domain.podcast.exceptions import EpisodeNotFoundError
from lexicast.domain.podcast.value_objects.processing_status import ProcessingStatus
from lexicast.infrastructure.podcast.mappers.podcast_mapper import PodcastEpisodeMapper
from lexicast.models import PodcastEpisode as PodcastEpisodeORM
from lexicast.models import PodcastQuiz as PodcastQuizORM

logger = logging.getLogger(__name__)


class PodcastEpisodeRepository:
    """Repository for PodcastEpisode domain entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = PodcastEpisodeMapper()

    def find_by_id(self, episode_id: EpisodeId) -> PodcastEpisode | None:
        orm_model = self.db.get(PodcastEpisodeORM, episode_id.value, populate_existing=True)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_all(
        self,
        series_id: PodcastSeriesId | None = None,
        season_id: PodcastSeasonId | None = None,
        active_only: bool = True,
    ) -> list[PodcastEpisode]:
        """
        List episodes ordered by season and episode number.

        Args:
            series_id: Only episodes of this series
            season_id: Only episodes of this season
            active_only: Skip deactivated episodes

        Returns:
            List of episode entities
        """
        stmt = select(PodcastEpisodeORM)
        if series_id is not None:
            stmt = stmt.where(PodcastEpisodeORM.series_id == series_id.value)
        if season_id is not None:
            stmt = stmt.where(PodcastEpisodeORM.season_id == season_id.value)
        if active_only:
            stmt = stmt.where(PodcastEpisodeORM.is_active.is_(True))
        stmt = stmt.order_by(PodcastEpisodeORM.season_id, PodcastEpisodeORM.episode_number)
        return [self.mapper.to_domain(row) for row in self.db.execute(stmt).scalars()]

    def find_latest(self, limit: int) -> list[PodcastEpisode]:
        """Most recent active episodes that finished processing."""
        stmt = (
            select(PodcastEpisodeORM)
            .where(
                PodcastEpisodeORM.is_active.is_(True),
                PodcastEpisodeORM.processing_status == ProcessingStatus.COMPLETED.value,
            )
            .order_by(
                PodcastEpisodeORM.release_date.desc().nulls_last(),
                PodcastEpisodeORM.created_at.desc(),
                PodcastEpisodeORM.id.desc(),
            )
            .limit(limit)
        )
        return [self.mapper.to_domain(row) for row in self.db.execute(stmt).scalars()]

    def save(self, episode: PodcastEpisode) -> PodcastEpisode:
        """
        Save an episode (create or update).

        Raises:
            EpisodeNotFoundError: If an existing episode was deleted meanwhile
        """
        if not episode.id.is_persisted():
            orm_model = self.mapper.to_orm(episode)
            self.db.add(orm_model)
        else:
            existing = self.db.get(PodcastEpisodeORM, episode.id.value)
            if existing is None:
                raise EpisodeNotFoundError(episode.id.value)
            orm_model = self.mapper.to_orm(episode, existing)

        self.db.commit()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def save_if_status(self, episode: PodcastEpisode, expected: ProcessingStatus) -> bool:
        """
        Write the episode only if its stored status still equals `expected`.

        Returns:
            True if the row was updated, False if another writer changed it first
        """
        stmt = (
            update(PodcastEpisodeORM)
            .where(
                PodcastEpisodeORM.id == episode.id.value,
                PodcastEpisodeORM.processing_status == expected.value,
            )
            .values(**self.mapper.to_values(episode), updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        if result.rowcount != 1:
            logger.info(
                f"Episode {episode.id.value} left {expected.value} before it could be updated"
            )
            return False
        return True

    def delete(self, episode_id: EpisodeId) -> bool:
        """Delete an episode together with its quizzes."""
        orm_model = self.db.get(PodcastEpisodeORM, episode_id.value)
        if orm_model is None:
            return False
        # SQLite does not enforce ON DELETE CASCADE by default
        self.db.execute(
            delete(PodcastQuizORM)
            .where(PodcastQuizORM.episode_id == episode_id.value)
            .execution_options(synchronize_session=False)
        )
        self.db.delete(orm_model)
        self.db.commit()
        logger.info(f"Deleted podcast episode {episode_id.value}")
        return True
