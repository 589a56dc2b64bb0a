"""Mappers for flashcard ORM ↔ Domain conversion."""

from datetime import datetime

from lexicast.domain.common.value_objects.ids import FlashCardGroupId, FlashCardId
from lexicast.domain.learning.entities.flashcard import FlashCard, FlashCardGroup
from lexicast.models import FlashCard as FlashCardORM
from lexicast.models import FlashCardGroup as FlashCardGroupORM
from lexicast.utils import ensure_utc


class FlashCardGroupMapper:
    def to_domain(self, orm_model: FlashCardGroupORM) -> FlashCardGroup:
        return FlashCardGroup(
            id=FlashCardGroupId(orm_model.id),
            owner_key=orm_model.owner_key,
            name=orm_model.name,
            description=orm_model.description,
            source_language=orm_model.source_language,
            target_language=orm_model.target_language,
            is_active=orm_model.is_active,
            created_at=ensure_utc(orm_model.created_at),
            updated_at=ensure_utc(orm_model.updated_at),
        )

    def to_orm(
        self, domain_entity: FlashCardGroup, orm_model: FlashCardGroupORM | None = None
    ) -> FlashCardGroupORM:
        if orm_model is None:
            orm_model = FlashCardGroupORM(owner_key=domain_entity.owner_key)
        orm_model.name = domain_entity.name
        orm_model.description = domain_entity.description
        orm_model.source_language = domain_entity.source_language
        orm_model.target_language = domain_entity.target_language
        orm_model.is_active = domain_entity.is_active
        return orm_model


class FlashCardMapper:
    def to_domain(self, orm_model: FlashCardORM) -> FlashCard:
        return FlashCard(
            id=FlashCardId(orm_model.id),
            group_id=FlashCardGroupId(orm_model.group_id),
            owner_key=orm_model.owner_key,
            source_word=orm_model.source_word,
            target_word=orm_model.target_word,
            example_sentence=orm_model.example_sentence,
            current_step=orm_model.current_step,
            next_review_date=ensure_utc(orm_model.next_review_date),
            first_learning_date=ensure_utc(orm_model.first_learning_date),
            review_dates=[
                ensure_utc(datetime.fromisoformat(value)) for value in orm_model.review_dates or []
            ],
            is_completed=orm_model.is_completed,
            created_at=ensure_utc(orm_model.created_at),
            updated_at=ensure_utc(orm_model.updated_at),
        )

    def to_orm(
        self, domain_entity: FlashCard, orm_model: FlashCardORM | None = None
    ) -> FlashCardORM:
        if orm_model is None:
            orm_model = FlashCardORM(
                group_id=domain_entity.group_id.value, owner_key=domain_entity.owner_key
            )
        orm_model.source_word = domain_entity.source_word
        orm_model.target_word = domain_entity.target_word
        orm_model.example_sentence = domain_entity.example_sentence
        orm_model.current_step = domain_entity.current_step
        if domain_entity.next_review_date is not None:
            orm_model.next_review_date = domain_entity.next_review_date
        orm_model.first_learning_date = domain_entity.first_learning_date
        orm_model.review_dates = [value.isoformat() for value in domain_entity.review_dates]
        orm_model.is_completed = domain_entity.is_completed
        return orm_model
