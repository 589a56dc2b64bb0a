"""DTOs for identity use cases."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from lexicast.domain.identity.entities.anonymous_user import AnonymousUser
from lexicast.domain.identity.entities.user import User


@dataclass
class AuthResult:
    """Tokens handed to a client after a successful authentication."""

    access_token: str
    expires_at: datetime
    refresh_token: str | None = None
    user: User | None = None
    anonymous_user: AnonymousUser | None = None

    @property
    def is_anonymous(self) -> bool:
        return self.anonymous_user is not None


@dataclass
class ProviderLogin:
    """Identity asserted by an external provider."""

    provider_name: str
    provider_id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    display_name: str | None = None
    profile_picture_url: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None


@dataclass
class StudySessionInput:
    date: date
    words_studied: int = 0
    correct_answers: int = 0
    study_duration_seconds: int = 0
    study_type: str | None = None


@dataclass
class SyncPayload:
    """Progress snapshot uploaded by an anonymous device."""

    favorite_words: list[str] = field(default_factory=list)
    preferences: dict[str, Any] = field(default_factory=dict)
    study_sessions: list[StudySessionInput] = field(default_factory=list)
    total_words_learned: int = 0
    current_streak: int | None = None
    longest_streak: int | None = None
    total_study_time_seconds: int | None = None


@dataclass
class Identity:
    """Either a registered user or an anonymous device, as seen by /me."""

    user: User | None = None
    anonymous_user: AnonymousUser | None = None
