"""Repository for episode quizzes."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from lexicast.domain.common.value_objects.ids import EpisodeId, PodcastQuizId
from lexicast.domain.podcast.entities.podcast_quiz import PodcastQuiz
from lexicast.domain.podcast.exceptions import PodcastQuizNotFoundError
from lexicast.infrastructure.podcast.mappers.podcast_mapper import PodcastQuizMapper
from lexicast.models import PodcastQuiz as PodcastQuizORM

logger = logging.getLogger(__name__)


class PodcastQuizRepository:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = PodcastQuizMapper()

    def find_by_id(self, quiz_id: PodcastQuizId) -> PodcastQuiz | None:
        orm_model = self.db.get(PodcastQuizORM, quiz_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_by_episode(self, episode_id: EpisodeId) -> list[PodcastQuiz]:
        stmt = (
            select(PodcastQuizORM)
            .where(PodcastQuizORM.episode_id == episode_id.value)
            .order_by(PodcastQuizORM.id)
        )
        return [self.mapper.to_domain(row) for row in self.db.execute(stmt).scalars()]

    def find_all(self) -> list[PodcastQuiz]:
        stmt = select(PodcastQuizORM).order_by(PodcastQuizORM.episode_id, PodcastQuizORM.id)
        return [self.mapper.to_domain(row) for row in self.db.execute(stmt).scalars()]

    def save(self, quiz: PodcastQuiz) -> PodcastQuiz:
        if not quiz.id.is_persisted():
            orm_model = self.mapper.to_orm(quiz)
            self.db.add(orm_model)
        else:
            existing = self.db.get(PodcastQuizORM, quiz.id.value)
            if existing is None:
                raise PodcastQuizNotFoundError(quiz.id.value)
            orm_model = self.mapper.to_orm(quiz, existing)

        self.db.commit()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def delete(self, quiz_id: PodcastQuizId) -> bool:
        orm_model = self.db.get(PodcastQuizORM, quiz_id.value)
        if orm_model is None:
            return False
        self.db.delete(orm_model)
        self.db.commit()
        logger.info(f"Deleted podcast quiz {quiz_id.value}")
        return True
