"""Learning context protocols."""

from lexicast.application.learning.protocols.flashcard_repository import (
    FlashCardGroupRepositoryProtocol,
    FlashCardRepositoryProtocol,
)

__all__ = ["FlashCardGroupRepositoryProtocol", "FlashCardRepositoryProtocol"]
