import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from starlette import status

from lexicast.application.identity.use_cases.anonymous_user_use_case import AnonymousUserUseCase
from lexicast.application.identity.use_cases.authentication_use_case import (
    AuthenticationUseCase,
)
from lexicast.application.identity.use_cases.dtos import ProviderLogin
from lexicast.application.identity.use_cases.provider_authentication_use_case import (
    ProviderAuthenticationUseCase,
)
from lexicast.application.identity.use_cases.register_user_use_case import RegisterUserUseCase
from lexicast.core import container
from lexicast.domain.common.exceptions import DomainError
from lexicast.exceptions import LexicastError
from lexicast.infrastructure.common.di import inject_use_case
from lexicast.infrastructure.common.rate_limit import limiter
from lexicast.infrastructure.common.schemas import ApiResponse
from lexicast.infrastructure.identity.dependencies import ClientIp, CurrentPrincipal
from lexicast.infrastructure.identity.schemas import (
    AnonymousLoginRequest,
    AuthResponse,
    LoginRequest,
    LogoutRequest,
    LogoutResponse,
    OAuthLoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/Auth", tags=["auth"])


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Failed to {action}: {e!s}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please try again later.",
    )


@router.post("/login")
@limiter.limit("10/minute")  # type: ignore[misc]
async def login(
    request: Request,
    body: LoginRequest,
    use_case: AuthenticationUseCase = Depends(inject_use_case(container.authentication_use_case)),
) -> ApiResponse[AuthResponse]:
    """Sign in with email and password."""
    try:
        result = use_case.authenticate_user(body.email, body.password, body.device_id)
        return ApiResponse.ok(AuthResponse.from_result(result), "Login successful")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("log in", e) from e


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")  # type: ignore[misc]
async def register(
    request: Request,
    body: RegisterRequest,
    use_case: RegisterUserUseCase = Depends(inject_use_case(container.register_user_use_case)),
) -> ApiResponse[AuthResponse]:
    """
    Register a new user account.

    Returns a token pair for immediate login after registration.
    """
    try:
        result = use_case.register_user(
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            device_id=body.device_id,
        )
        return ApiResponse.ok(AuthResponse.from_result(result), "Registration successful")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("register user", e) from e


@router.post("/oauth")
@limiter.limit("20/minute")  # type: ignore[misc]
async def oauth_login(
    request: Request,
    body: OAuthLoginRequest,
    use_case: ProviderAuthenticationUseCase = Depends(
        inject_use_case(container.provider_authentication_use_case)
    ),
) -> ApiResponse[AuthResponse]:
    """Sign in with an identity asserted by an external provider."""
    login = ProviderLogin(
        provider_name=body.provider,
        provider_id=body.provider_id,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        display_name=body.display_name,
        profile_picture_url=body.profile_picture_url,
        access_token=body.access_token,
        refresh_token=body.refresh_token,
    )
    try:
        result = use_case.authenticate(login, body.device_id)
        return ApiResponse.ok(AuthResponse.from_result(result), "Login successful")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("authenticate provider login", e) from e


@router.post("/anonymous")
async def anonymous_login(
    body: AnonymousLoginRequest,
    use_case: AnonymousUserUseCase = Depends(inject_use_case(container.anonymous_user_use_case)),
) -> ApiResponse[AuthResponse]:
    """Get or create the anonymous identity of a device and sign it in."""
    try:
        result = use_case.authenticate(body.device_id, body.device_type, body.app_version)
        return ApiResponse.ok(AuthResponse.from_result(result))
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("sign in anonymously", e) from e


@router.get("/me")
async def get_me(
    principal: CurrentPrincipal,
    use_case: AuthenticationUseCase = Depends(inject_use_case(container.authentication_use_case)),
) -> ApiResponse[UserResponse]:
    """Get the caller's profile; anonymous callers get a user-shaped view."""
    identity = use_case.get_identity(principal)
    if identity.anonymous_user is not None:
        return ApiResponse.ok(UserResponse.from_anonymous(identity.anonymous_user))
    assert identity.user is not None
    return ApiResponse.ok(UserResponse.from_user(identity.user))


@router.post("/refresh")
@limiter.limit("30/minute")  # type: ignore[misc]
async def refresh(
    request: Request,
    body: RefreshTokenRequest,
    use_case: AuthenticationUseCase = Depends(inject_use_case(container.authentication_use_case)),
) -> ApiResponse[AuthResponse]:
    """
    Exchange a refresh token for a new token pair.

    The presented refresh token is consumed; presenting it again revokes
    every session of the user.
    """
    try:
        result = use_case.refresh_access_token(body.refresh_token)
        return ApiResponse.ok(AuthResponse.from_result(result))
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("refresh token", e) from e


@router.post("/logout")
async def logout(
    principal: CurrentPrincipal,
    client_ip: ClientIp,
    body: LogoutRequest | None = None,
    use_case: AuthenticationUseCase = Depends(inject_use_case(container.authentication_use_case)),
) -> ApiResponse[LogoutResponse]:
    """Revoke the given refresh token, or every session with all_devices."""
    body = body or LogoutRequest()
    revoked = use_case.logout(
        principal,
        refresh_token=body.refresh_token,
        all_devices=body.all_devices,
        ip_address=client_ip,
    )
    return ApiResponse.ok(LogoutResponse(revoked=revoked), "Logged out successfully")
