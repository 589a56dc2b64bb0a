"""API routes for flashcard groups, for registered users and anonymous devices."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from starlette import status

from lexicast.application.learning.use_cases.flashcard_group_use_case import (
    FlashCardGroupUseCase,
)
from lexicast.core import container
from lexicast.domain.common.exceptions import DomainError
from lexicast.exceptions import LexicastError
from lexicast.infrastructure.common.di import inject_use_case
from lexicast.infrastructure.common.schemas import ApiResponse
from lexicast.infrastructure.identity.dependencies import CurrentPrincipal
from lexicast.infrastructure.learning.schemas import (
    FlashCardCreateRequest,
    FlashCardGroupCreateRequest,
    FlashCardGroupResponse,
    FlashCardGroupUpdateRequest,
    FlashCardResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/FlashCardGroup", tags=["flashcards"])

GroupUseCase = Depends(inject_use_case(container.flashcard_group_use_case))


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Failed to {action}: {e!s}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please try again later.",
    )


@router.get("")
def list_groups(
    principal: CurrentPrincipal,
    use_case: FlashCardGroupUseCase = GroupUseCase,
) -> ApiResponse[list[FlashCardGroupResponse]]:
    """List the caller's groups with their card counts."""
    try:
        summaries = use_case.list_groups(principal)
        return ApiResponse.ok(
            [FlashCardGroupResponse.from_entity(s.group, s.card_count) for s in summaries]
        )
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("list flashcard groups", e) from e


@router.get("/{group_id}")
def get_group(
    group_id: int,
    principal: CurrentPrincipal,
    use_case: FlashCardGroupUseCase = GroupUseCase,
) -> ApiResponse[FlashCardGroupResponse]:
    try:
        summary = use_case.get_group_summary(principal, group_id)
        return ApiResponse.ok(
            FlashCardGroupResponse.from_entity(summary.group, summary.card_count)
        )
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"get flashcard group {group_id}", e) from e


@router.post("", status_code=status.HTTP_201_CREATED)
def create_group(
    body: FlashCardGroupCreateRequest,
    principal: CurrentPrincipal,
    use_case: FlashCardGroupUseCase = GroupUseCase,
) -> ApiResponse[FlashCardGroupResponse]:
    try:
        group = use_case.create_group(
            principal,
            name=body.name,
            description=body.description,
            source_language=body.source_language,
            target_language=body.target_language,
        )
        return ApiResponse.ok(FlashCardGroupResponse.from_entity(group), "Group created")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("create flashcard group", e) from e


@router.put("/{group_id}")
def update_group(
    group_id: int,
    body: FlashCardGroupUpdateRequest,
    principal: CurrentPrincipal,
    use_case: FlashCardGroupUseCase = GroupUseCase,
) -> ApiResponse[FlashCardGroupResponse]:
    try:
        use_case.update_group(
            principal,
            group_id,
            name=body.name,
            description=body.description,
            source_language=body.source_language,
            target_language=body.target_language,
        )
        summary = use_case.get_group_summary(principal, group_id)
        return ApiResponse.ok(
            FlashCardGroupResponse.from_entity(summary.group, summary.card_count),
            "Group updated",
        )
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"update flashcard group {group_id}", e) from e


@router.delete("/{group_id}")
def delete_group(
    group_id: int,
    principal: CurrentPrincipal,
    use_case: FlashCardGroupUseCase = GroupUseCase,
) -> ApiResponse[None]:
    """Delete a group together with all of its cards."""
    try:
        use_case.delete_group(principal, group_id)
        return ApiResponse.ok(message="Group deleted")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"delete flashcard group {group_id}", e) from e


@router.get("/{group_id}/cards")
def list_cards(
    group_id: int,
    principal: CurrentPrincipal,
    use_case: FlashCardGroupUseCase = GroupUseCase,
) -> ApiResponse[list[FlashCardResponse]]:
    try:
        cards = use_case.list_cards(principal, group_id)
        return ApiResponse.ok([FlashCardResponse.from_entity(c) for c in cards])
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"list cards of group {group_id}", e) from e


@router.post("/{group_id}/cards", status_code=status.HTTP_201_CREATED)
def add_card(
    group_id: int,
    body: FlashCardCreateRequest,
    principal: CurrentPrincipal,
    use_case: FlashCardGroupUseCase = GroupUseCase,
) -> ApiResponse[FlashCardResponse]:
    try:
        card = use_case.add_card(
            principal,
            group_id,
            source_word=body.source_word,
            target_word=body.target_word,
            example_sentence=body.example_sentence,
        )
        return ApiResponse.ok(FlashCardResponse.from_entity(card), "Card added")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"add card to group {group_id}", e) from e


@router.delete("/{group_id}/cards/{card_id}")
def delete_card(
    group_id: int,
    card_id: int,
    principal: CurrentPrincipal,
    use_case: FlashCardGroupUseCase = GroupUseCase,
) -> ApiResponse[None]:
    try:
        use_case.delete_card(principal, group_id, card_id)
        return ApiResponse.ok(message="Card deleted")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"delete card {card_id}", e) from e
