"""Identity domain exceptions."""

from lexicast.domain.common.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    EntityNotFoundError,
)


class UserNotFoundError(EntityNotFoundError):
    """Raised when a user cannot be found."""

    def __init__(self, user_id: int) -> None:
        super().__init__("User", user_id)


class AnonymousUserNotFoundError(EntityNotFoundError):
    """Raised when no anonymous record exists for a device."""

    def __init__(self, device_id: str) -> None:
        super().__init__("AnonymousUser", device_id)


class EmailAlreadyExistsError(ConflictError):
    """Raised when attempting to register with an email that already exists."""

    def __init__(self, email: str) -> None:
        super().__init__(f"Email {email} is already registered", {"email": email})
        self.email = email


class ProviderAlreadyLinkedError(ConflictError):
    """Raised when a provider identity is already attached to an account."""

    def __init__(self, provider_name: str, provider_id: str) -> None:
        super().__init__(
            f"{provider_name} account is already linked",
            {"provider_name": provider_name, "provider_id": provider_id},
        )


class AnonymousUserAlreadyUpgradedError(ConflictError):
    """Raised when an anonymous device has already become a registered user."""

    def __init__(self, device_id: str) -> None:
        super().__init__("Anonymous user has already been upgraded", {"device_id": device_id})
        self.device_id = device_id


class InvalidCredentialsError(AuthenticationError):
    """Raised when authentication fails due to invalid credentials."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class InactiveAccountError(AuthenticationError):
    """Raised when a deactivated account tries to authenticate."""

    def __init__(self) -> None:
        super().__init__("Account is inactive")


class RefreshTokenNotFoundError(AuthenticationError):
    """Raised when a refresh token value is unknown."""

    def __init__(self) -> None:
        super().__init__("Invalid refresh token")


class RefreshTokenInactiveError(AuthenticationError):
    """Raised when a refresh token exists but is revoked, expired or already consumed."""

    def __init__(self) -> None:
        super().__init__("Refresh token is expired or revoked")


class RefreshTokenReusedError(AuthenticationError):
    """Raised when an already rotated refresh token is presented again."""

    def __init__(self) -> None:
        super().__init__("Refresh token has already been used")


class RegistrationDisabledError(AuthorizationError):
    """Raised when user registration is disabled via feature flag."""

    def __init__(self) -> None:
        super().__init__("User registration is currently disabled")
