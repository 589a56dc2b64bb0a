"""Use case for flashcard groups and the cards inside them."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import structlog

from lexicast.application.learning.protocols.flashcard_repository import (
    FlashCardGroupRepositoryProtocol,
    FlashCardRepositoryProtocol,
)
from lexicast.domain.common.value_objects.ids import FlashCardGroupId, FlashCardId
from lexicast.domain.identity.value_objects.principal import Principal
from lexicast.domain.learning.entities.flashcard import FlashCard, FlashCardGroup
from lexicast.domain.learning.exceptions import (
    DuplicateFlashCardGroupError,
    FlashCardGroupNotFoundError,
    FlashCardNotFoundError,
)
from lexicast.utils import utc_now

logger = structlog.get_logger(__name__)

DEFAULT_DUE_LIMIT = 50


@dataclass
class FlashCardGroupSummary:
    """Group together with the number of cards it holds."""

    group: FlashCardGroup
    card_count: int


class FlashCardGroupUseCase:
    """
    Flashcard group CRUD for registered users and anonymous devices.

    Every operation resolves its owner from the caller's principal. Groups
    owned by someone else are reported as not found.
    """

    def __init__(
        self,
        group_repository: FlashCardGroupRepositoryProtocol,
        card_repository: FlashCardRepositoryProtocol,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.group_repository = group_repository
        self.card_repository = card_repository
        self.clock = clock

    def list_groups(self, principal: Principal) -> list[FlashCardGroupSummary]:
        groups = self.group_repository.find_by_owner(principal.owner_key)
        return [
            FlashCardGroupSummary(group=g, card_count=self.group_repository.count_cards(g.id))
            for g in groups
        ]

    def get_group(self, principal: Principal, group_id: int) -> FlashCardGroup:
        group = self.group_repository.find_by_id(FlashCardGroupId(group_id), principal.owner_key)
        if group is None:
            raise FlashCardGroupNotFoundError(group_id)
        return group

    def get_group_summary(self, principal: Principal, group_id: int) -> FlashCardGroupSummary:
        group = self.get_group(principal, group_id)
        return FlashCardGroupSummary(
            group=group, card_count=self.group_repository.count_cards(group.id)
        )

    def create_group(
        self,
        principal: Principal,
        name: str,
        description: str | None = None,
        source_language: str = "EN",
        target_language: str = "TR",
    ) -> FlashCardGroup:
        """
        Create a group for the caller.

        Raises:
            ValidationError: If the name is empty or too long
            DuplicateFlashCardGroupError: If the caller already has a group with that name
        """
        group = FlashCardGroup.create(
            owner_key=principal.owner_key,
            name=name,
            description=description,
            source_language=source_language,
            target_language=target_language,
        )
        if self.group_repository.find_by_owner_and_name(group.owner_key, group.name):
            raise DuplicateFlashCardGroupError(group.name)

        group = self.group_repository.save(group)
        logger.info(
            "flashcard_group_created",
            group_id=group.id.value,
            anonymous=principal.is_anonymous,
        )
        return group

    def update_group(
        self,
        principal: Principal,
        group_id: int,
        name: str | None = None,
        description: str | None = None,
        source_language: str | None = None,
        target_language: str | None = None,
    ) -> FlashCardGroup:
        """
        Update a group's name and details.

        Raises:
            FlashCardGroupNotFoundError: If the group does not exist for the caller
            DuplicateFlashCardGroupError: If the new name is taken by another group
        """
        group = self.get_group(principal, group_id)

        if name is not None:
            group.rename(name)
            existing = self.group_repository.find_by_owner_and_name(group.owner_key, group.name)
            if existing is not None and existing.id != group.id:
                raise DuplicateFlashCardGroupError(group.name)

        group.update_details(
            description if description is not None else group.description,
            source_language,
            target_language,
        )
        group = self.group_repository.save(group)
        logger.info("flashcard_group_updated", group_id=group_id)
        return group

    def delete_group(self, principal: Principal, group_id: int) -> None:
        if not self.group_repository.delete(FlashCardGroupId(group_id), principal.owner_key):
            raise FlashCardGroupNotFoundError(group_id)
        logger.info("flashcard_group_deleted", group_id=group_id)

    def list_cards(self, principal: Principal, group_id: int) -> list[FlashCard]:
        group = self.get_group(principal, group_id)
        return self.card_repository.find_by_group(group.id, principal.owner_key)

    def add_card(
        self,
        principal: Principal,
        group_id: int,
        source_word: str,
        target_word: str,
        example_sentence: str | None = None,
    ) -> FlashCard:
        """
        Add a word pair to one of the caller's groups.

        Raises:
            FlashCardGroupNotFoundError: If the group does not exist for the caller
            ValidationError: If either word is empty
        """
        group = self.get_group(principal, group_id)
        card = FlashCard.create(
            group_id=group.id,
            owner_key=principal.owner_key,
            source_word=source_word,
            target_word=target_word,
            example_sentence=example_sentence,
            now=self.clock(),
        )
        card = self.card_repository.save(card)
        logger.info("flashcard_created", flashcard_id=card.id.value, group_id=group_id)
        return card

    def delete_card(self, principal: Principal, group_id: int, card_id: int) -> None:
        group = self.get_group(principal, group_id)
        if not self.card_repository.delete(FlashCardId(card_id), group.id, principal.owner_key):
            raise FlashCardNotFoundError(card_id)
        logger.info("flashcard_deleted", flashcard_id=card_id, group_id=group_id)

    def list_due_cards(
        self, principal: Principal, limit: int = DEFAULT_DUE_LIMIT
    ) -> list[FlashCard]:
        """Cards across all of the caller's groups that are due for review now."""
        return self.card_repository.find_due(principal.owner_key, self.clock(), limit)

    def get_card(self, principal: Principal, card_id: int) -> FlashCard:
        card = self.card_repository.find_by_id(FlashCardId(card_id), principal.owner_key)
        if card is None:
            raise FlashCardNotFoundError(card_id)
        return card

    def review_card(self, principal: Principal, card_id: int, correct: bool) -> FlashCard:
        """
        Record a review answer and schedule the card's next review.

        Reviews are accepted at any time; answering before the card is due
        still moves it along the schedule.

        Raises:
            FlashCardNotFoundError: If the card does not exist for the caller
        """
        card = self.get_card(principal, card_id)
        card.record_review(correct, self.clock())
        card = self.card_repository.save(card)
        logger.info(
            "flashcard_reviewed",
            flashcard_id=card_id,
            correct=correct,
            step=card.current_step,
            completed=card.is_completed,
        )
        return card
