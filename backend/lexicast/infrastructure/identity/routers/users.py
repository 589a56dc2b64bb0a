import logging

from fastapi import APIRouter, Depends, HTTPException
from starlette import status

from lexicast.application.identity.use_cases.anonymous_user_use_case import AnonymousUserUseCase
from lexicast.application.identity.use_cases.authentication_use_case import (
    AuthenticationUseCase,
)
from lexicast.application.identity.use_cases.dtos import StudySessionInput, SyncPayload
from lexicast.application.identity.use_cases.upgrade_anonymous_user_use_case import (
    UpgradeAnonymousUserUseCase,
)
from lexicast.core import container
from lexicast.domain.common.exceptions import AuthorizationError, DomainError, ValidationError
from lexicast.exceptions import LexicastError
from lexicast.infrastructure.common.di import inject_use_case
from lexicast.infrastructure.common.schemas import ApiResponse
from lexicast.infrastructure.identity.dependencies import (
    AnonymousPrincipal,
    CurrentPrincipal,
    OptionalPrincipal,
)
from lexicast.infrastructure.identity.schemas import (
    AnonymousLoginRequest,
    AnonymousUserResponse,
    AuthResponse,
    EmailAvailabilityResponse,
    SyncRequest,
    UpgradeAnonymousRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/User", tags=["users"])


@router.post("/anonymous")
async def create_anonymous_user(
    body: AnonymousLoginRequest,
    use_case: AnonymousUserUseCase = Depends(inject_use_case(container.anonymous_user_use_case)),
) -> ApiResponse[AuthResponse]:
    """Same as POST /Auth/anonymous."""
    result = use_case.authenticate(body.device_id, body.device_type, body.app_version)
    return ApiResponse.ok(AuthResponse.from_result(result))


@router.post("/sync")
async def sync_anonymous_user(
    body: SyncRequest,
    principal: AnonymousPrincipal,
    use_case: AnonymousUserUseCase = Depends(inject_use_case(container.anonymous_user_use_case)),
) -> ApiResponse[AnonymousUserResponse]:
    """
    Upload the device's learning progress.

    Favorites, preferences and totals are replaced; study sessions are merged
    by date.
    """
    payload = SyncPayload(
        favorite_words=body.favorite_words,
        preferences=body.preferences,
        study_sessions=[StudySessionInput(**s.model_dump()) for s in body.study_sessions],
        total_words_learned=body.total_words_learned,
        current_streak=body.current_streak,
        longest_streak=body.longest_streak,
        total_study_time_seconds=body.total_study_time_seconds,
    )
    assert principal.device_id is not None
    try:
        anonymous_user = use_case.sync(principal.device_id, payload)
        return ApiResponse.ok(AnonymousUserResponse.from_entity(anonymous_user), "Sync complete")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to sync device {principal.device_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post("/upgrade-anonymous", status_code=status.HTTP_201_CREATED)
async def upgrade_anonymous_user(
    body: UpgradeAnonymousRequest,
    principal: OptionalPrincipal,
    use_case: UpgradeAnonymousUserUseCase = Depends(
        inject_use_case(container.upgrade_anonymous_user_use_case)
    ),
) -> ApiResponse[AuthResponse]:
    """
    Turn the calling device into a registered account.

    The device comes from the anonymous bearer token, or from the body when no
    token is sent.
    """
    if principal is not None and not principal.is_anonymous:
        raise AuthorizationError("Caller is already a registered user")
    device_id = principal.device_id if principal is not None else body.device_id
    if not device_id:
        raise ValidationError("device_id is required", field="device_id")

    try:
        result = use_case.upgrade(
            device_id=device_id,
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            profile_picture_url=body.profile_picture_url,
        )
        return ApiResponse.ok(AuthResponse.from_result(result), "Account upgraded")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        logger.error(f"Failed to upgrade device {device_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get("/check-email/{email}")
async def check_email(
    email: str,
    use_case: AuthenticationUseCase = Depends(inject_use_case(container.authentication_use_case)),
) -> ApiResponse[EmailAvailabilityResponse]:
    available = not use_case.email_exists(email)
    return ApiResponse.ok(EmailAvailabilityResponse(email=email, available=available))


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    principal: CurrentPrincipal,
    use_case: AuthenticationUseCase = Depends(inject_use_case(container.authentication_use_case)),
) -> ApiResponse[UserResponse]:
    """Get a user's profile. Callers can only read their own."""
    if principal.is_anonymous or principal.user_id != user_id:
        raise AuthorizationError("You can only view your own profile")
    return ApiResponse.ok(UserResponse.from_user(use_case.get_user_by_id(user_id)))
