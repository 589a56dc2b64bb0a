"""Identity domain layer."""

from lexicast.domain.identity.entities.anonymous_user import AnonymousUser
from lexicast.domain.identity.entities.refresh_token import RefreshToken
from lexicast.domain.identity.entities.user import User, UserProvider
from lexicast.domain.identity.exceptions import (
    AnonymousUserAlreadyUpgradedError,
    AnonymousUserNotFoundError,
    EmailAlreadyExistsError,
    InactiveAccountError,
    InvalidCredentialsError,
    RefreshTokenInactiveError,
    RefreshTokenNotFoundError,
    RefreshTokenReusedError,
    RegistrationDisabledError,
    UserNotFoundError,
)
from lexicast.domain.identity.value_objects.principal import Principal

__all__ = [
    "AnonymousUser",
    "AnonymousUserAlreadyUpgradedError",
    "AnonymousUserNotFoundError",
    "EmailAlreadyExistsError",
    "InactiveAccountError",
    "InvalidCredentialsError",
    "Principal",
    "RefreshToken",
    "RefreshTokenInactiveError",
    "RefreshTokenNotFoundError",
    "RefreshTokenReusedError",
    "RegistrationDisabledError",
    "User",
    "UserNotFoundError",
    "UserProvider",
]
