from .anonymous_user_repository import AnonymousUserRepositoryProtocol
from .password_service import PasswordServiceProtocol
from .refresh_token_repository import RefreshTokenRepositoryProtocol
from .token_service import TokenServiceProtocol
from .user_repository import UserRepositoryProtocol

__all__ = [
    "AnonymousUserRepositoryProtocol",
    "PasswordServiceProtocol",
    "RefreshTokenRepositoryProtocol",
    "TokenServiceProtocol",
    "UserRepositoryProtocol",
]
