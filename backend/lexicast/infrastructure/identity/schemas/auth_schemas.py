"""Pydantic schemas for authentication and user endpoints."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from lexicast.application.identity.use_cases.dtos import AuthResult
from lexicast.domain.identity.entities.anonymous_user import AnonymousUser
from lexicast.domain.identity.entities.user import DEFAULT_SUBSCRIPTION_PLAN, User

ANONYMOUS_DISPLAY_NAME = "Anonymous User"


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)
    device_id: str | None = Field(None, max_length=255)


class RegisterRequest(BaseModel):
    """Schema for email/password registration."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, description="Plain text password")
    first_name: str = Field("", max_length=100)
    last_name: str = Field("", max_length=100)
    device_id: str | None = Field(None, max_length=255)


class OAuthLoginRequest(BaseModel):
    """Identity asserted by an external provider (Google, Apple, ...)."""

    provider: str = Field(..., min_length=1, max_length=50)
    provider_id: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    first_name: str = Field("", max_length=100)
    last_name: str = Field("", max_length=100)
    display_name: str | None = None
    profile_picture_url: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    device_id: str | None = Field(None, max_length=255)


class AnonymousLoginRequest(BaseModel):
    device_id: str = Field(..., min_length=1, max_length=255)
    device_type: str | None = Field(None, max_length=50)
    app_version: str | None = Field(None, max_length=50)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class LogoutRequest(BaseModel):
    refresh_token: str | None = None
    all_devices: bool = False


class StudySessionSchema(BaseModel):
    date: date
    words_studied: int = Field(0, ge=0)
    correct_answers: int = Field(0, ge=0)
    study_duration_seconds: int = Field(0, ge=0)
    study_type: str | None = None


class SyncRequest(BaseModel):
    """Progress snapshot uploaded by an anonymous device."""

    favorite_words: list[str] = Field(default_factory=list)
    preferences: dict[str, Any] = Field(default_factory=dict)
    study_sessions: list[StudySessionSchema] = Field(default_factory=list)
    total_words_learned: int = Field(0, ge=0)
    current_streak: int | None = Field(None, ge=0)
    longest_streak: int | None = Field(None, ge=0)
    total_study_time_seconds: int | None = Field(None, ge=0)


class UpgradeAnonymousRequest(BaseModel):
    """Register the calling device; device_id is only needed without a bearer token."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)
    first_name: str = Field("", max_length=100)
    last_name: str = Field("", max_length=100)
    profile_picture_url: str | None = None
    device_id: str | None = Field(None, max_length=255)


class UserResponse(BaseModel):
    """Public view of a user, also used for anonymous callers."""

    id: int | None
    email: str
    first_name: str
    last_name: str
    display_name: str
    profile_picture_url: str | None = None
    email_verified: bool = False
    role: str
    subscription_plan: str = DEFAULT_SUBSCRIPTION_PLAN
    providers: list[str] = Field(default_factory=list)
    is_anonymous: bool = False
    device_id: str | None = None
    created_at: datetime | None = None
    last_login_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id.value,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            display_name=user.display_name,
            profile_picture_url=user.profile_picture_url,
            email_verified=user.email_verified,
            role=user.role,
            subscription_plan=user.current_subscription_plan,
            providers=[p.provider_name for p in user.active_providers()],
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )

    @classmethod
    def from_anonymous(cls, anonymous_user: AnonymousUser) -> "UserResponse":
        return cls(
            id=None,
            email=f"anonymous@{anonymous_user.device_id}",
            first_name="Anonymous",
            last_name="User",
            display_name=ANONYMOUS_DISPLAY_NAME,
            profile_picture_url=anonymous_user.preferred_profile_picture,
            role=anonymous_user.role,
            is_anonymous=True,
            device_id=anonymous_user.device_id,
            created_at=anonymous_user.created_at,
        )


class AuthResponse(BaseModel):
    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_at: datetime
    is_anonymous: bool = False
    user: UserResponse | None = None

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        user = None
        if result.user is not None:
            user = UserResponse.from_user(result.user)
        elif result.anonymous_user is not None:
            user = UserResponse.from_anonymous(result.anonymous_user)
        return cls(
            access_token=result.access_token,
            refresh_token=result.refresh_token,
            expires_at=result.expires_at,
            is_anonymous=result.is_anonymous,
            user=user,
        )


class StudySessionResponse(StudySessionSchema):
    pass


class AnonymousUserResponse(BaseModel):
    """Anonymous record including its synced progress."""

    device_id: str
    device_type: str | None = None
    app_version: str | None = None
    is_upgraded: bool
    upgraded_user_id: int | None = None
    favorite_words: list[str]
    preferences: dict[str, Any]
    study_sessions: list[StudySessionResponse]
    total_words_learned: int
    current_streak: int
    longest_streak: int
    total_study_time_seconds: int
    last_sync_at: datetime | None = None
    last_active_at: datetime | None = None

    @classmethod
    def from_entity(cls, anonymous_user: AnonymousUser) -> "AnonymousUserResponse":
        data = anonymous_user.sync_data
        return cls(
            device_id=anonymous_user.device_id,
            device_type=anonymous_user.device_type,
            app_version=anonymous_user.app_version,
            is_upgraded=anonymous_user.is_upgraded,
            upgraded_user_id=(
                anonymous_user.upgraded_user_id.value if anonymous_user.upgraded_user_id else None
            ),
            favorite_words=data.favorite_words,
            preferences=data.preferences,
            study_sessions=[
                StudySessionResponse(
                    date=s.date,
                    words_studied=s.words_studied,
                    correct_answers=s.correct_answers,
                    study_duration_seconds=s.study_duration_seconds,
                    study_type=s.study_type,
                )
                for s in data.study_sessions
            ],
            total_words_learned=data.total_words_learned,
            current_streak=data.current_streak,
            longest_streak=data.longest_streak,
            total_study_time_seconds=data.total_study_time_seconds,
            last_sync_at=anonymous_user.last_sync_at,
            last_active_at=anonymous_user.last_active_at,
        )


class LogoutResponse(BaseModel):
    revoked: int


class EmailAvailabilityResponse(BaseModel):
    email: str
    available: bool
