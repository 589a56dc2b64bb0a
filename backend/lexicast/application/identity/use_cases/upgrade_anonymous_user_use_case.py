"""Use case for turning an anonymous device into a registered account."""

import structlog

from lexicast.application.identity.protocols.anonymous_user_repository import (
    AnonymousUserRepositoryProtocol,
)
from lexicast.application.identity.protocols.password_service import PasswordServiceProtocol
from lexicast.application.identity.protocols.user_repository import UserRepositoryProtocol
from lexicast.application.identity.services.token_issuer import TokenIssuer
from lexicast.application.identity.use_cases.dtos import AuthResult
from lexicast.domain.identity.entities.user import User
from lexicast.domain.identity.exceptions import (
    AnonymousUserAlreadyUpgradedError,
    AnonymousUserNotFoundError,
    EmailAlreadyExistsError,
)

logger = structlog.get_logger(__name__)


class UpgradeAnonymousUserUseCase:
    """One-way, one-time migration from anonymous to registered."""

    def __init__(
        self,
        anonymous_user_repository: AnonymousUserRepositoryProtocol,
        user_repository: UserRepositoryProtocol,
        password_service: PasswordServiceProtocol,
        token_issuer: TokenIssuer,
    ) -> None:
        self.anonymous_user_repository = anonymous_user_repository
        self.user_repository = user_repository
        self.password_service = password_service
        self.token_issuer = token_issuer

    def upgrade(
        self,
        device_id: str,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
        profile_picture_url: str | None = None,
    ) -> AuthResult:
        """
        Upgrade the anonymous record of a device.

        Args:
            device_id: Device whose anonymous record is upgraded
            email: Email of the new account
            password: Plain text password of the new account
            first_name: Given name
            last_name: Family name
            profile_picture_url: Avatar; falls back to the device's synced preference

        Returns:
            Registered tokens for the new user

        Raises:
            AnonymousUserNotFoundError: If the device has no anonymous record
            AnonymousUserAlreadyUpgradedError: If the device was already upgraded
            EmailAlreadyExistsError: If the email is taken
        """
        anonymous_user = self.anonymous_user_repository.find_by_device_id(device_id)
        if anonymous_user is None:
            raise AnonymousUserNotFoundError(device_id)
        if anonymous_user.is_upgraded:
            raise AnonymousUserAlreadyUpgradedError(device_id)
        if self.user_repository.email_exists(email):
            raise EmailAlreadyExistsError(email)

        user = User.create_from_anonymous(
            anonymous_user_id=anonymous_user.id,
            device_id=device_id,
            email=email,
            hashed_password=self.password_service.hash_password(password),
            first_name=first_name,
            last_name=last_name,
            profile_picture_url=profile_picture_url or anonymous_user.preferred_profile_picture,
        )
        user = self.user_repository.save(user)

        # Conditional update: a concurrent upgrade of the same device loses here
        if not self.anonymous_user_repository.mark_upgraded(anonymous_user, user.id):
            self.user_repository.delete(user.id)
            raise AnonymousUserAlreadyUpgradedError(device_id)

        result = self.token_issuer.issue_for_user(user, device_id)

        logger.info(
            "anonymous_user_upgraded",
            anonymous_user_id=anonymous_user.id.value,
            user_id=user.id.value,
        )
        return result
