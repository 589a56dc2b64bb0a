"""Use case for authentication operations."""

import structlog

from lexicast.application.identity.protocols.anonymous_user_repository import (
    AnonymousUserRepositoryProtocol,
)
from lexicast.application.identity.protocols.password_service import PasswordServiceProtocol
from lexicast.application.identity.protocols.user_repository import UserRepositoryProtocol
from lexicast.application.identity.services.session_store import SessionStore
from lexicast.application.identity.services.token_issuer import TokenIssuer
from lexicast.application.identity.use_cases.dtos import AuthResult, Identity
from lexicast.domain.common.value_objects.ids import UserId
from lexicast.domain.identity.entities.user import User
from lexicast.domain.identity.exceptions import (
    AnonymousUserNotFoundError,
    InactiveAccountError,
    InvalidCredentialsError,
    RefreshTokenInactiveError,
    RefreshTokenNotFoundError,
    RefreshTokenReusedError,
    UserNotFoundError,
)
from lexicast.domain.identity.value_objects.principal import Principal
from lexicast.utils import utc_now

logger = structlog.get_logger(__name__)


class AuthenticationUseCase:
    """Login, refresh, logout and identity lookup."""

    def __init__(
        self,
        user_repository: UserRepositoryProtocol,
        anonymous_user_repository: AnonymousUserRepositoryProtocol,
        password_service: PasswordServiceProtocol,
        session_store: SessionStore,
        token_issuer: TokenIssuer,
    ) -> None:
        """Initialize use case with dependencies."""
        self.user_repository = user_repository
        self.anonymous_user_repository = anonymous_user_repository
        self.password_service = password_service
        self.session_store = session_store
        self.token_issuer = token_issuer

    def authenticate_user(
        self, email: str, password: str, device_id: str | None = None
    ) -> AuthResult:
        """
        Authenticate a user with email and password.

        Args:
            email: User's email address
            password: User's plain text password
            device_id: Device the refresh token should be bound to

        Returns:
            Access and refresh tokens for the user

        Raises:
            InvalidCredentialsError: If email or password is wrong
            InactiveAccountError: If the account is deactivated
        """
        user = self.user_repository.find_by_email(email)

        # Verify against a dummy hash for unknown emails so timing does not leak existence
        if not user:
            self.password_service.verify_password(password, self.password_service.get_dummy_hash())
            raise InvalidCredentialsError

        if not user.has_password() or not self.password_service.verify_password(
            password, user.hashed_password  # type: ignore[arg-type]
        ):
            raise InvalidCredentialsError

        if not user.is_active:
            raise InactiveAccountError

        user.record_login(utc_now())
        user = self.user_repository.save(user)
        result = self.token_issuer.issue_for_user(user, device_id)

        logger.info("user_authenticated", user_id=user.id.value, email=email)

        return result

    def refresh_access_token(self, refresh_token: str) -> AuthResult:
        """
        Exchange a refresh token for a new token pair.

        Presenting a token that was already rotated is treated as theft: every
        session of that user is revoked.

        Args:
            refresh_token: Opaque refresh token value

        Returns:
            New access and refresh tokens

        Raises:
            RefreshTokenNotFoundError: If the token is unknown
            RefreshTokenReusedError: If the token was already used
            RefreshTokenInactiveError: If the token is revoked or expired
            InvalidCredentialsError: If the owning user is gone or inactive
        """
        record = self.session_store.lookup(refresh_token)
        if record is None:
            raise RefreshTokenNotFoundError

        if record.is_used:
            logger.warning(
                "refresh_token_reuse_detected",
                user_id=record.user_id.value,
                device_id=record.device_id,
            )
            self.session_store.revoke_all_for_user(record.user_id)
            if record.device_id:
                self.session_store.revoke_all_for_device(record.device_id)
            raise RefreshTokenReusedError

        if not record.is_active():
            raise RefreshTokenInactiveError

        user = self.user_repository.find_by_id(record.user_id)
        if not user or not user.is_active:
            self.session_store.revoke_all_for_user(record.user_id)
            raise InvalidCredentialsError

        result = self.token_issuer.rotate_for_user(user, record)

        logger.info("access_token_refreshed", user_id=user.id.value)

        return result

    def logout(
        self,
        principal: Principal,
        refresh_token: str | None = None,
        all_devices: bool = False,
        ip_address: str | None = None,
    ) -> int:
        """
        Revoke refresh tokens for the caller.

        Always succeeds; revoking tokens that are already inactive is a no-op.

        Returns:
            Number of tokens revoked
        """
        revoked = 0
        if refresh_token:
            record = self.session_store.lookup(refresh_token)
            if record is not None and self._owns(principal, record.user_id, record.device_id):
                revoked += self.session_store.revoke_one(refresh_token, ip_address)

        if all_devices:
            if principal.is_anonymous and principal.device_id:
                revoked += self.session_store.revoke_all_for_device(
                    principal.device_id, ip_address
                )
            elif principal.user_id is not None:
                revoked += self.session_store.revoke_all_for_user(
                    UserId(principal.user_id), ip_address
                )

        logger.info("user_logged_out", owner=principal.owner_key, revoked=revoked)
        return revoked

    def get_identity(self, principal: Principal) -> Identity:
        """
        Resolve the caller to a stored user or anonymous record.

        Raises:
            AnonymousUserNotFoundError: If the device has no anonymous record
            UserNotFoundError: If the user does not exist
        """
        if principal.is_anonymous and principal.device_id:
            anonymous_user = self.anonymous_user_repository.find_by_device_id(principal.device_id)
            if anonymous_user is None:
                raise AnonymousUserNotFoundError(principal.device_id)
            return Identity(anonymous_user=anonymous_user)

        return Identity(user=self.get_user_by_id(principal.user_id or 0))

    def get_user_by_id(self, user_id: int) -> User:
        """
        Get a user by ID.

        Raises:
            UserNotFoundError: If user is not found
        """
        user = self.user_repository.find_by_id(UserId(user_id))
        if not user:
            raise UserNotFoundError(user_id)
        return user

    def email_exists(self, email: str) -> bool:
        return self.user_repository.email_exists(email)

    @staticmethod
    def _owns(principal: Principal, user_id: UserId, device_id: str | None) -> bool:
        if principal.is_anonymous:
            return device_id is not None and device_id == principal.device_id
        return principal.user_id == user_id.value
