"""Use case for user registration."""

import structlog

from lexicast.application.identity.protocols.password_service import PasswordServiceProtocol
from lexicast.application.identity.protocols.user_repository import UserRepositoryProtocol
from lexicast.application.identity.services.token_issuer import TokenIssuer
from lexicast.application.identity.use_cases.dtos import AuthResult
from lexicast.domain.identity.entities.user import User
from lexicast.domain.identity.exceptions import EmailAlreadyExistsError, RegistrationDisabledError
from lexicast.feature_flags import is_user_registrations_enabled

logger = structlog.get_logger(__name__)


class RegisterUserUseCase:
    """Use case for user registration operations."""

    def __init__(
        self,
        user_repository: UserRepositoryProtocol,
        password_service: PasswordServiceProtocol,
        token_issuer: TokenIssuer,
    ) -> None:
        """Initialize use case with dependencies."""
        self.user_repository = user_repository
        self.password_service = password_service
        self.token_issuer = token_issuer

    def register_user(
        self,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
        device_id: str | None = None,
    ) -> AuthResult:
        """
        Register a new user account and sign it in.

        Args:
            email: User's email address, compared exactly as stored
            password: User's plain text password (will be hashed)
            first_name: Given name
            last_name: Family name
            device_id: Device the refresh token should be bound to

        Returns:
            Tokens for the created user

        Raises:
            RegistrationDisabledError: If registration is disabled via feature flag
            EmailAlreadyExistsError: If email is already registered
        """
        if not is_user_registrations_enabled():
            raise RegistrationDisabledError

        if self.user_repository.email_exists(email):
            raise EmailAlreadyExistsError(email)

        hashed_password = self.password_service.hash_password(password)

        user = User.create(
            email=email,
            hashed_password=hashed_password,
            first_name=first_name,
            last_name=last_name,
        )
        if device_id:
            user.add_device(device_id)
        user = self.user_repository.save(user)
        result = self.token_issuer.issue_for_user(user, device_id)

        logger.info("user_registered", user_id=user.id.value, email=email)

        return result
