"""Repositories for flashcard groups and flashcards."""

import logging
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lexicast.domain.common.value_objects.ids import FlashCardGroupId, FlashCardId
from lexicast.domain.learning.entities.flashcard import FlashCard, FlashCardGroup
from lexicast.domain.learning.exceptions import (
    DuplicateFlashCardGroupError,
    FlashCardGroupNotFoundError,
    FlashCardNotFoundError,
)
from lexicast.infrastructure.learning.mappers.flashcard_mapper import (
    FlashCardGroupMapper,
    FlashCardMapper,
)
from lexicast.models import FlashCard as FlashCardORM
from lexicast.models import FlashCardGroup as FlashCardGroupORM

logger = logging.getLogger(__name__)


class FlashCardGroupRepository:
    """Repository for FlashCardGroup domain entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = FlashCardGroupMapper()

    def find_by_id(self, group_id: FlashCardGroupId, owner_key: str) -> FlashCardGroup | None:
        stmt = select(FlashCardGroupORM).where(
            FlashCardGroupORM.id == group_id.value,
            FlashCardGroupORM.owner_key == owner_key,
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_by_owner(self, owner_key: str) -> list[FlashCardGroup]:
        stmt = (
            select(FlashCardGroupORM)
            .where(FlashCardGroupORM.owner_key == owner_key)
            .order_by(FlashCardGroupORM.name)
        )
        return [self.mapper.to_domain(row) for row in self.db.execute(stmt).scalars()]

    def find_by_owner_and_name(self, owner_key: str, name: str) -> FlashCardGroup | None:
        stmt = select(FlashCardGroupORM).where(
            FlashCardGroupORM.owner_key == owner_key,
            FlashCardGroupORM.name == name,
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def count_cards(self, group_id: FlashCardGroupId) -> int:
        stmt = select(func.count(FlashCardORM.id)).where(FlashCardORM.group_id == group_id.value)
        return self.db.execute(stmt).scalar() or 0

    def save(self, group: FlashCardGroup) -> FlashCardGroup:
        """
        Save a group (create or update).

        Raises:
            DuplicateFlashCardGroupError: If the owner already has a group with that name
        """
        if not group.id.is_persisted():
            orm_model = self.mapper.to_orm(group)
            self.db.add(orm_model)
        else:
            existing = self.db.get(FlashCardGroupORM, group.id.value)
            if existing is None or existing.owner_key != group.owner_key:
                raise FlashCardGroupNotFoundError(group.id.value)
            orm_model = self.mapper.to_orm(group, existing)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateFlashCardGroupError(group.name) from e

        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def delete(self, group_id: FlashCardGroupId, owner_key: str) -> bool:
        """
        Delete a group and its cards.

        Returns:
            True if deleted, False if not found
        """
        stmt = select(FlashCardGroupORM).where(
            FlashCardGroupORM.id == group_id.value,
            FlashCardGroupORM.owner_key == owner_key,
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        if orm_model is None:
            return False

        # Cards first: SQLite does not enforce ON DELETE CASCADE by default
        self.db.execute(
            delete(FlashCardORM)
            .where(FlashCardORM.group_id == group_id.value)
            .execution_options(synchronize_session=False)
        )
        self.db.delete(orm_model)
        self.db.commit()
        logger.info(f"Deleted flashcard group {group_id.value}")
        return True


class FlashCardRepository:
    """Repository for FlashCard domain entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = FlashCardMapper()

    def find_by_id(self, card_id: FlashCardId, owner_key: str) -> FlashCard | None:
        stmt = select(FlashCardORM).where(
            FlashCardORM.id == card_id.value,
            FlashCardORM.owner_key == owner_key,
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_due(self, owner_key: str, now: datetime, limit: int) -> list[FlashCard]:
        """Unfinished cards whose next review is at or before now, oldest first."""
        stmt = (
            select(FlashCardORM)
            .where(
                FlashCardORM.owner_key == owner_key,
                FlashCardORM.is_completed.is_(False),
                FlashCardORM.next_review_date <= now,
            )
            .order_by(FlashCardORM.next_review_date, FlashCardORM.id)
            .limit(limit)
        )
        return [self.mapper.to_domain(row) for row in self.db.execute(stmt).scalars()]

    def find_by_group(self, group_id: FlashCardGroupId, owner_key: str) -> list[FlashCard]:
        stmt = (
            select(FlashCardORM)
            .where(
                FlashCardORM.group_id == group_id.value,
                FlashCardORM.owner_key == owner_key,
            )
            .order_by(FlashCardORM.created_at, FlashCardORM.id)
        )
        return [self.mapper.to_domain(row) for row in self.db.execute(stmt).scalars()]

    def save(self, card: FlashCard) -> FlashCard:
        if not card.id.is_persisted():
            orm_model = self.mapper.to_orm(card)
            self.db.add(orm_model)
        else:
            existing = self.db.get(FlashCardORM, card.id.value)
            if existing is None or existing.owner_key != card.owner_key:
                raise FlashCardNotFoundError(card.id.value)
            orm_model = self.mapper.to_orm(card, existing)

        self.db.commit()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def delete(self, card_id: FlashCardId, group_id: FlashCardGroupId, owner_key: str) -> bool:
        """
        Delete a card from a group.

        Returns:
            True if deleted, False if not found
        """
        stmt = select(FlashCardORM).where(
            FlashCardORM.id == card_id.value,
            FlashCardORM.group_id == group_id.value,
            FlashCardORM.owner_key == owner_key,
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        if orm_model is None:
            return False

        self.db.delete(orm_model)
        self.db.commit()
        return True
