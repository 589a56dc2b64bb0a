"""Pydantic schemas for flashcard group endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from lexicast.domain.learning.entities.flashcard import (
    MAX_GROUP_NAME_LENGTH,
    FlashCard,
    FlashCardGroup,
)


class FlashCardGroupCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_GROUP_NAME_LENGTH)
    description: str | None = None
    source_language: str = Field("EN", min_length=2, max_length=10)
    target_language: str = Field("TR", min_length=2, max_length=10)


class FlashCardGroupUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their current value."""

    name: str | None = Field(None, min_length=1, max_length=MAX_GROUP_NAME_LENGTH)
    description: str | None = None
    source_language: str | None = Field(None, min_length=2, max_length=10)
    target_language: str | None = Field(None, min_length=2, max_length=10)


class FlashCardGroupResponse(BaseModel):
    id: int
    name: str
    description: str | None
    source_language: str
    target_language: str
    card_count: int = 0
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_entity(cls, group: FlashCardGroup, card_count: int = 0) -> "FlashCardGroupResponse":
        return cls(
            id=group.id.value,
            name=group.name,
            description=group.description,
            source_language=group.source_language,
            target_language=group.target_language,
            card_count=card_count,
            created_at=group.created_at,
            updated_at=group.updated_at,
        )


class FlashCardCreateRequest(BaseModel):
    source_word: str = Field(..., min_length=1, max_length=255)
    target_word: str = Field(..., min_length=1, max_length=255)
    example_sentence: str | None = None


class FlashCardResponse(BaseModel):
    id: int
    group_id: int
    source_word: str
    target_word: str
    example_sentence: str | None
    current_step: int = 0
    next_review_date: datetime | None = None
    first_learning_date: datetime | None = None
    review_dates: list[datetime] = Field(default_factory=list)
    is_completed: bool = False
    created_at: datetime | None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, card: FlashCard) -> "FlashCardResponse":
        return cls(
            id=card.id.value,
            group_id=card.group_id.value,
            source_word=card.source_word,
            target_word=card.target_word,
            example_sentence=card.example_sentence,
            current_step=card.current_step,
            next_review_date=card.next_review_date,
            first_learning_date=card.first_learning_date,
            review_dates=list(card.review_dates),
            is_completed=card.is_completed,
            created_at=card.created_at,
            updated_at=card.updated_at,
        )


class FlashCardReviewRequest(BaseModel):
    is_correct: bool
