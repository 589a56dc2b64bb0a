"""API routes for reviewing individual flashcards."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette import status

from lexicast.application.learning.use_cases.flashcard_group_use_case import (
    DEFAULT_DUE_LIMIT,
    FlashCardGroupUseCase,
)
from lexicast.core import container
from lexicast.domain.common.exceptions import DomainError
from lexicast.exceptions import LexicastError
from lexicast.infrastructure.common.di import inject_use_case
from lexicast.infrastructure.common.schemas import ApiResponse
from lexicast.infrastructure.identity.dependencies import CurrentPrincipal
from lexicast.infrastructure.learning.schemas import FlashCardResponse, FlashCardReviewRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/FlashCard", tags=["flashcards"])

GroupUseCase = Depends(inject_use_case(container.flashcard_group_use_case))


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Failed to {action}: {e!s}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please try again later.",
    )


@router.get("/due")
def list_due_cards(
    principal: CurrentPrincipal,
    limit: int = Query(DEFAULT_DUE_LIMIT, ge=1, le=200),
    use_case: FlashCardGroupUseCase = GroupUseCase,
) -> ApiResponse[list[FlashCardResponse]]:
    """List the caller's cards that are due for review, most overdue first."""
    try:
        cards = use_case.list_due_cards(principal, limit)
        return ApiResponse.ok([FlashCardResponse.from_entity(c) for c in cards])
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("list due flashcards", e) from e


@router.get("/{card_id}")
def get_card(
    card_id: int,
    principal: CurrentPrincipal,
    use_case: FlashCardGroupUseCase = GroupUseCase,
) -> ApiResponse[FlashCardResponse]:
    try:
        card = use_case.get_card(principal, card_id)
        return ApiResponse.ok(FlashCardResponse.from_entity(card))
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"get flashcard {card_id}", e) from e


@router.post("/{card_id}/review")
def review_card(
    card_id: int,
    body: FlashCardReviewRequest,
    principal: CurrentPrincipal,
    use_case: FlashCardGroupUseCase = GroupUseCase,
) -> ApiResponse[FlashCardResponse]:
    """
    Record whether the caller recalled the card.

    A correct answer moves the card to its next review step, a wrong one moves
    it back one step. The response carries the new schedule.
    """
    try:
        card = use_case.review_card(principal, card_id, body.is_correct)
        return ApiResponse.ok(FlashCardResponse.from_entity(card), "Review recorded")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"review flashcard {card_id}", e) from e
