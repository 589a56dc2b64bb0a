"""User entity for identity management."""

from dataclasses import dataclass, field
from datetime import datetime

from lexicast.domain.common.entity import Entity
from lexicast.domain.common.exceptions import ValidationError
from lexicast.domain.common.value_objects.ids import AnonymousUserId, UserId
from lexicast.domain.identity.exceptions import ProviderAlreadyLinkedError

# Domain constraints
MAX_EMAIL_LENGTH = 255
DEFAULT_SUBSCRIPTION_PLAN = "Free"
ROLE_USER = "User"
ROLE_ADMIN = "Admin"


@dataclass
class UserProvider:
    """External identity (Google, Apple, ...) linked to a user."""

    provider_name: str
    provider_id: str
    email: str | None = None
    display_name: str | None = None
    profile_picture_url: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    last_used_at: datetime | None = None

    def matches(self, provider_name: str, provider_id: str) -> bool:
        return self.provider_name == provider_name and self.provider_id == provider_id


@dataclass
class User(Entity[UserId]):
    """
    User entity representing a registered account.

    Business Rules:
    - Email must be unique (enforced at repository level)
    - Users can exist without passwords (provider-only accounts)
    - A (provider name, provider id) pair is linked at most once
    - Accounts created by upgrade remember the anonymous record they came from
    """

    id: UserId
    email: str
    first_name: str = ""
    last_name: str = ""
    hashed_password: str | None = None
    profile_picture_url: str | None = None
    email_verified: bool = False
    role: str = ROLE_USER
    providers: list[UserProvider] = field(default_factory=list)
    device_ids: list[str] = field(default_factory=list)
    anonymous_user_id: AnonymousUserId | None = None
    current_subscription_plan: str = DEFAULT_SUBSCRIPTION_PLAN
    subscription_provider: str | None = None
    subscription_expires_at: datetime | None = None
    is_active: bool = True
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        _validate_email(self.email)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def has_password(self) -> bool:
        """Check if this user has a password set."""
        return self.hashed_password is not None

    def active_providers(self) -> list[UserProvider]:
        return [p for p in self.providers if p.is_active]

    def find_provider(self, provider_name: str, provider_id: str) -> UserProvider | None:
        return next((p for p in self.providers if p.matches(provider_name, provider_id)), None)

    def link_provider(self, provider: UserProvider) -> None:
        """
        Attach a new provider identity.

        Raises:
            ProviderAlreadyLinkedError: If the identity is already linked
        """
        if self.find_provider(provider.provider_name, provider.provider_id):
            raise ProviderAlreadyLinkedError(provider.provider_name, provider.provider_id)
        self.providers.append(provider)

    def refresh_provider_tokens(
        self,
        provider_name: str,
        provider_id: str,
        access_token: str | None,
        refresh_token: str | None,
        used_at: datetime,
    ) -> None:
        provider = self.find_provider(provider_name, provider_id)
        if provider is None:
            raise ValidationError(
                "Provider is not linked to this user", field="provider_id", value=provider_id
            )
        provider.access_token = access_token
        provider.refresh_token = refresh_token
        provider.last_used_at = used_at

    def record_login(self, at: datetime) -> None:
        self.last_login_at = at

    def add_device(self, device_id: str) -> None:
        if device_id not in self.device_ids:
            self.device_ids.append(device_id)

    @classmethod
    def create(
        cls,
        email: str,
        hashed_password: str | None = None,
        first_name: str = "",
        last_name: str = "",
        profile_picture_url: str | None = None,
    ) -> "User":
        """
        Create a new email/password user.

        Args:
            email: User's email address
            hashed_password: User's hashed password
            first_name: Given name
            last_name: Family name
            profile_picture_url: Avatar URL

        Returns:
            New, unverified User instance

        Raises:
            ValidationError: If email is invalid
        """
        return cls(
            id=UserId.generate(),
            email=email,
            first_name=first_name,
            last_name=last_name,
            hashed_password=hashed_password,
            profile_picture_url=profile_picture_url,
            email_verified=False,
        )

    @classmethod
    def create_from_provider(
        cls, provider: UserProvider, first_name: str = "", last_name: str = ""
    ) -> "User":
        """
        Create a user from a provider identity.

        The provider has already verified the email, so the account starts verified.
        """
        if not provider.email:
            raise ValidationError("Provider did not supply an email", field="email")
        return cls(
            id=UserId.generate(),
            email=provider.email,
            first_name=first_name,
            last_name=last_name,
            profile_picture_url=provider.profile_picture_url,
            email_verified=True,
            providers=[provider],
        )

    @classmethod
    def create_from_anonymous(
        cls,
        anonymous_user_id: AnonymousUserId,
        device_id: str,
        email: str,
        hashed_password: str,
        first_name: str = "",
        last_name: str = "",
        profile_picture_url: str | None = None,
    ) -> "User":
        """Create the registered account that replaces an anonymous device identity."""
        return cls(
            id=UserId.generate(),
            email=email,
            first_name=first_name,
            last_name=last_name,
            hashed_password=hashed_password,
            profile_picture_url=profile_picture_url,
            email_verified=False,
            device_ids=[device_id],
            anonymous_user_id=anonymous_user_id,
        )

    @classmethod
    def create_with_id(cls, id: UserId, email: str, **attributes: object) -> "User":
        """
        Reconstitute a user from persistence.

        Raises:
            ValidationError: If email is invalid
        """
        return cls(id=id, email=email, **attributes)  # type: ignore[arg-type]


def _validate_email(email: str) -> None:
    if not email:
        raise ValidationError("Email cannot be empty", field="email", value=email)
    if len(email) > MAX_EMAIL_LENGTH:
        raise ValidationError(
            f"Email cannot exceed {MAX_EMAIL_LENGTH} characters", field="email", value=email
        )
    if "@" not in email:
        raise ValidationError("Email is not valid", field="email", value=email)
