"""Identity context schemas."""

from lexicast.infrastructure.identity.schemas.auth_schemas import (
    AnonymousLoginRequest,
    AnonymousUserResponse,
    AuthResponse,
    EmailAvailabilityResponse,
    LoginRequest,
    LogoutRequest,
    LogoutResponse,
    OAuthLoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    StudySessionSchema,
    SyncRequest,
    UpgradeAnonymousRequest,
    UserResponse,
)

__all__ = [
    "AnonymousLoginRequest",
    "AnonymousUserResponse",
    "AuthResponse",
    "EmailAvailabilityResponse",
    "LoginRequest",
    "LogoutRequest",
    "LogoutResponse",
    "OAuthLoginRequest",
    "RefreshTokenRequest",
    "RegisterRequest",
    "StudySessionSchema",
    "SyncRequest",
    "UpgradeAnonymousRequest",
    "UserResponse",
]
