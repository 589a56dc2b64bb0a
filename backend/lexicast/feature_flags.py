"""Feature flags module for centralized feature toggle management."""

from typing import Literal

from pydantic import BaseModel, Field

from lexicast.config import get_settings


class FeatureFlags(BaseModel):
    """Pydantic model defining all feature flags in the application."""

    user_registrations: bool = Field(..., description="Whether user registration is enabled")
    in_process_transcoding: bool = Field(
        ..., description="Whether the API process also runs the transcoding worker"
    )


FeatureFlagKey = Literal["user_registrations", "in_process_transcoding"]


def get_feature_flags() -> FeatureFlags:
    """
    Get current feature flags based on application configuration.

    Returns:
        FeatureFlags instance with current flag values
    """
    settings = get_settings()

    return FeatureFlags(
        user_registrations=settings.ALLOW_USER_REGISTRATIONS,
        in_process_transcoding=settings.TRANSCODING_WORKER_ENABLED,
    )


def get_feature_flag(key: FeatureFlagKey) -> bool:
    """Get the value of a specific feature flag."""
    flags = get_feature_flags()
    return getattr(flags, key)


def is_user_registrations_enabled() -> bool:
    """Check if user registrations are enabled."""
    return get_feature_flag("user_registrations")


def is_in_process_transcoding_enabled() -> bool:
    return get_feature_flag("in_process_transcoding")
