"""Identity repositories."""

from lexicast.infrastructure.identity.repositories.anonymous_user_repository import (
    AnonymousUserRepository,
)
from lexicast.infrastructure.identity.repositories.refresh_token_repository import (
    RefreshTokenRepository,
)
from lexicast.infrastructure.identity.repositories.user_repository import UserRepository

__all__ = ["AnonymousUserRepository", "RefreshTokenRepository", "UserRepository"]
