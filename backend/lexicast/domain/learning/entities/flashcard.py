"""
Flashcard group and flashcard entities.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from lexicast.domain.common.entity import Entity
from lexicast.domain.common.exceptions import ValidationError
from lexicast.domain.common.value_objects import FlashCardGroupId, FlashCardId

MAX_GROUP_NAME_LENGTH = 100

# Days until the next review, indexed by review step
REVIEW_INTERVAL_DAYS = (0, 1, 3, 7, 14, 30, 90)
LONG_TERM_INTERVAL_DAYS = 365
MASTERED_STEP = 6


@dataclass
class FlashCardGroup(Entity[FlashCardGroupId]):
    """
    Named deck of word pairs.

    Business Rules:
    - Owned by a user id or a device id (the owner key)
    - Name cannot be empty and is unique per owner (enforced at use case level)
    """

    id: FlashCardGroupId
    owner_key: str
    name: str
    description: str | None = None
    source_language: str = "EN"
    target_language: str = "TR"
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        self.name = _clean_name(self.name)

    def rename(self, name: str) -> None:
        """
        Update the group name.

        Raises:
            ValidationError: If name is empty or too long
        """
        self.name = _clean_name(name)

    def update_details(
        self,
        description: str | None,
        source_language: str | None,
        target_language: str | None,
    ) -> None:
        self.description = description
        if source_language:
            self.source_language = source_language
        if target_language:
            self.target_language = target_language

    @classmethod
    def create(
        cls,
        owner_key: str,
        name: str,
        description: str | None = None,
        source_language: str = "EN",
        target_language: str = "TR",
    ) -> "FlashCardGroup":
        """Create a new group (ID will be 0 until persisted)."""
        return cls(
            id=FlashCardGroupId.generate(),
            owner_key=owner_key,
            name=name,
            description=description,
            source_language=source_language,
            target_language=target_language,
        )


@dataclass
class FlashCard(Entity[FlashCardId]):
    """
    Word pair studied with spaced repetition.

    Business Rules:
    - A correct review moves the card one step up, a wrong one one step down (not below 0)
    - The next review is scheduled REVIEW_INTERVAL_DAYS[step] days after the review
    - Reaching MASTERED_STEP completes the card; completed cards are never due
    """

    id: FlashCardId
    group_id: FlashCardGroupId
    owner_key: str
    source_word: str
    target_word: str
    example_sentence: str | None = None
    current_step: int = 0
    next_review_date: datetime | None = None
    first_learning_date: datetime | None = None
    review_dates: list[datetime] = field(default_factory=list)
    is_completed: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.source_word or not self.source_word.strip():
            raise ValidationError("Source word cannot be empty", field="source_word")
        if not self.target_word or not self.target_word.strip():
            raise ValidationError("Target word cannot be empty", field="target_word")

    def is_due(self, at: datetime) -> bool:
        if self.is_completed:
            return False
        return self.next_review_date is None or self.next_review_date <= at

    def record_review(self, correct: bool, at: datetime) -> None:
        """
        Apply one review result and schedule the next review.

        Args:
            correct: Whether the learner recalled the card
            at: When the review happened
        """
        self.current_step = self.current_step + 1 if correct else max(0, self.current_step - 1)
        self.next_review_date = at + timedelta(days=review_interval_days(self.current_step))
        self.review_dates.append(at)

        if self.current_step == 1 and self.first_learning_date is None:
            self.first_learning_date = at
        if self.current_step >= MASTERED_STEP:
            self.is_completed = True

    @classmethod
    def create(
        cls,
        group_id: FlashCardGroupId,
        owner_key: str,
        source_word: str,
        target_word: str,
        example_sentence: str | None = None,
        now: datetime | None = None,
    ) -> "FlashCard":
        """Create a new card, due for its first review immediately."""
        return cls(
            id=FlashCardId.generate(),
            group_id=group_id,
            owner_key=owner_key,
            source_word=source_word.strip(),
            target_word=target_word.strip(),
            example_sentence=example_sentence,
            next_review_date=now,
        )


def review_interval_days(step: int) -> int:
    if step < len(REVIEW_INTERVAL_DAYS):
        return REVIEW_INTERVAL_DAYS[step]
    return LONG_TERM_INTERVAL_DAYS


def _clean_name(name: str) -> str:
    if not name or not name.strip():
        raise ValidationError("Group name cannot be empty", field="name")
    cleaned = name.strip()
    if len(cleaned) > MAX_GROUP_NAME_LENGTH:
        raise ValidationError(
            f"Group name cannot exceed {MAX_GROUP_NAME_LENGTH} characters", field="name"
        )
    return cleaned
