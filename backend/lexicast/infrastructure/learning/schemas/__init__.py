from .flashcard_schemas import (
    FlashCardCreateRequest,
    FlashCardGroupCreateRequest,
    FlashCardGroupResponse,
    FlashCardGroupUpdateRequest,
    FlashCardResponse,
    FlashCardReviewRequest,
)

__all__ = [
    "FlashCardCreateRequest",
    "FlashCardGroupCreateRequest",
    "FlashCardGroupResponse",
    "FlashCardGroupUpdateRequest",
    "FlashCardResponse",
    "FlashCardReviewRequest",
]
