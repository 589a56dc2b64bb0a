"""Protocols for flashcard group and flashcard repositories."""

from datetime import datetime
from typing import Protocol

from lexicast.domain.common.value_objects.ids import FlashCardGroupId, FlashCardId
from lexicast.domain.learning.entities.flashcard import FlashCard, FlashCardGroup


class FlashCardGroupRepositoryProtocol(Protocol):
    """Protocol for flashcard group persistence, always scoped by owner."""

    def find_by_id(self, group_id: FlashCardGroupId, owner_key: str) -> FlashCardGroup | None:
        """
        Find a group by ID with ownership check.

        Args:
            group_id: The group ID
            owner_key: User id or device id that owns the group

        Returns:
            FlashCardGroup if found and owned, None otherwise
        """
        ...

    def find_by_owner(self, owner_key: str) -> list[FlashCardGroup]:
        """Get all groups of an owner ordered by name."""
        ...

    def find_by_owner_and_name(self, owner_key: str, name: str) -> FlashCardGroup | None:
        ...

    def count_cards(self, group_id: FlashCardGroupId) -> int:
        ...

    def save(self, group: FlashCardGroup) -> FlashCardGroup:
        """
        Save a group (create or update).

        Raises:
            DuplicateFlashCardGroupError: If the owner already has a group with that name
        """
        ...

    def delete(self, group_id: FlashCardGroupId, owner_key: str) -> bool:
        """
        Delete a group together with its cards.

        Returns:
            True if deleted, False if not found
        """
        ...


class FlashCardRepositoryProtocol(Protocol):
    """Protocol for flashcard persistence."""

    def find_by_id(self, card_id: FlashCardId, owner_key: str) -> FlashCard | None:
        """Find a card by ID with ownership check."""
        ...

    def find_due(self, owner_key: str, now: datetime, limit: int) -> list[FlashCard]:
        """
        Get an owner's unfinished cards due for review.

        Args:
            owner_key: User id or device id that owns the cards
            now: Cards scheduled at or before this moment are due
            limit: Maximum number of cards

        Returns:
            Cards ordered by next review date, most overdue first
        """
        ...

    def find_by_group(self, group_id: FlashCardGroupId, owner_key: str) -> list[FlashCard]:
        """Get the cards of a group ordered by creation time."""
        ...

    def save(self, card: FlashCard) -> FlashCard:
        ...

    def delete(self, card_id: FlashCardId, group_id: FlashCardGroupId, owner_key: str) -> bool:
        """
        Delete a card from a group.

        Returns:
            True if deleted, False if not found
        """
        ...
