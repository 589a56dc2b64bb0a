"""Use case for signing in through an external identity provider."""

import structlog

from lexicast.application.identity.protocols.user_repository import UserRepositoryProtocol
from lexicast.application.identity.services.token_issuer import TokenIssuer
from lexicast.application.identity.use_cases.dtos import AuthResult, ProviderLogin
from lexicast.domain.identity.entities.user import User, UserProvider
from lexicast.domain.identity.exceptions import InactiveAccountError
from lexicast.utils import utc_now

logger = structlog.get_logger(__name__)


class ProviderAuthenticationUseCase:
    """Resolve a provider identity to a user, creating or linking as needed."""

    def __init__(self, user_repository: UserRepositoryProtocol, token_issuer: TokenIssuer) -> None:
        self.user_repository = user_repository
        self.token_issuer = token_issuer

    def authenticate(self, login: ProviderLogin, device_id: str | None = None) -> AuthResult:
        """
        Sign in with a provider identity.

        Resolution order:
        1. The provider identity is already linked: refresh its stored tokens.
        2. A user with the same email exists: link the provider to that user.
        3. Otherwise: create a verified user with this provider.

        Raises:
            InactiveAccountError: If the resolved account is deactivated
            ValidationError: If a new account would have no email
        """
        now = utc_now()
        user = self.user_repository.find_by_provider(login.provider_name, login.provider_id)

        if user is not None:
            user.refresh_provider_tokens(
                login.provider_name,
                login.provider_id,
                login.access_token,
                login.refresh_token,
                used_at=now,
            )
            outcome = "provider_reused"
        else:
            provider = UserProvider(
                provider_name=login.provider_name,
                provider_id=login.provider_id,
                email=login.email,
                display_name=login.display_name,
                profile_picture_url=login.profile_picture_url,
                access_token=login.access_token,
                refresh_token=login.refresh_token,
                created_at=now,
                last_used_at=now,
            )
            user = self.user_repository.find_by_email(login.email)
            if user is not None:
                user.link_provider(provider)
                outcome = "provider_linked"
            else:
                user = User.create_from_provider(
                    provider, first_name=login.first_name, last_name=login.last_name
                )
                outcome = "user_created"

        if not user.is_active:
            raise InactiveAccountError

        if device_id:
            user.add_device(device_id)
        user.record_login(now)
        user = self.user_repository.save(user)
        result = self.token_issuer.issue_for_user(user, device_id)

        logger.info(
            "provider_authenticated",
            user_id=user.id.value,
            provider=login.provider_name,
            outcome=outcome,
        )
        return result
