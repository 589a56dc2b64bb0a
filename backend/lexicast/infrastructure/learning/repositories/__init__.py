from .flashcard_repository import FlashCardGroupRepository, FlashCardRepository

__all__ = ["FlashCardGroupRepository", "FlashCardRepository"]
