"""Anonymous (device-scoped) user entity."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from lexicast.domain.common.entity import Entity
from lexicast.domain.common.exceptions import ValidationError
from lexicast.domain.common.value_objects.ids import AnonymousUserId, UserId
from lexicast.domain.identity.exceptions import AnonymousUserAlreadyUpgradedError

ANONYMOUS_ROLE = "Anonymous"
MAX_DEVICE_ID_LENGTH = 255
PROFILE_PICTURE_PREFERENCE = "profilePictureUrl"


@dataclass
class StudySession:
    """Per-day study totals reported by the client."""

    date: date
    words_studied: int = 0
    correct_answers: int = 0
    study_duration_seconds: int = 0
    study_type: str | None = None

    def absorb(self, other: "StudySession") -> None:
        self.words_studied += other.words_studied
        self.correct_answers += other.correct_answers
        self.study_duration_seconds += other.study_duration_seconds


@dataclass
class SyncData:
    """Learning progress stored on the device and mirrored to the server."""

    favorite_words: list[str] = field(default_factory=list)
    preferences: dict[str, Any] = field(default_factory=dict)
    study_sessions: list[StudySession] = field(default_factory=list)
    total_words_learned: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    total_study_time_seconds: int = 0

    def merge_sessions(self, incoming: list[StudySession]) -> None:
        """Merge sessions by calendar date, summing the counters of same-day entries."""
        by_date = {session.date: session for session in self.study_sessions}
        for session in incoming:
            existing = by_date.get(session.date)
            if existing is None:
                copy = StudySession(
                    date=session.date,
                    words_studied=session.words_studied,
                    correct_answers=session.correct_answers,
                    study_duration_seconds=session.study_duration_seconds,
                    study_type=session.study_type,
                )
                self.study_sessions.append(copy)
                by_date[copy.date] = copy
            else:
                existing.absorb(session)
        self.study_sessions.sort(key=lambda s: s.date)


@dataclass
class AnonymousUser(Entity[AnonymousUserId]):
    """
    Identity keyed by a device id for users who have not registered.

    Business Rules:
    - One record per device id (enforced at repository level)
    - After upgrade the record is frozen; only activity timestamps move
    """

    id: AnonymousUserId
    device_id: str
    device_type: str | None = None
    app_version: str | None = None
    sync_data: SyncData = field(default_factory=SyncData)
    is_upgraded: bool = False
    upgraded_user_id: UserId | None = None
    is_active: bool = True
    created_at: datetime | None = None
    last_active_at: datetime | None = None
    last_sync_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.device_id or not self.device_id.strip():
            raise ValidationError("Device id cannot be empty", field="device_id")
        if len(self.device_id) > MAX_DEVICE_ID_LENGTH:
            raise ValidationError(
                f"Device id cannot exceed {MAX_DEVICE_ID_LENGTH} characters", field="device_id"
            )

    @property
    def role(self) -> str:
        return ANONYMOUS_ROLE

    @property
    def preferred_profile_picture(self) -> str | None:
        value = self.sync_data.preferences.get(PROFILE_PICTURE_PREFERENCE)
        return value if isinstance(value, str) and value else None

    def touch(
        self, at: datetime, device_type: str | None = None, app_version: str | None = None
    ) -> None:
        """Record activity. Device details are only updated before upgrade."""
        self.last_active_at = at
        if self.is_upgraded:
            return
        if device_type:
            self.device_type = device_type
        if app_version:
            self.app_version = app_version

    def apply_sync(
        self,
        at: datetime,
        favorite_words: list[str],
        preferences: dict[str, Any],
        study_sessions: list[StudySession],
        total_words_learned: int,
        current_streak: int | None = None,
        longest_streak: int | None = None,
        total_study_time_seconds: int | None = None,
    ) -> None:
        """
        Apply a sync payload from the device.

        Favorites, preferences and word totals are replaced; study sessions are
        merged by date.

        Raises:
            AnonymousUserAlreadyUpgradedError: If the record has been upgraded
        """
        if self.is_upgraded:
            raise AnonymousUserAlreadyUpgradedError(self.device_id)

        data = self.sync_data
        data.favorite_words = list(favorite_words)
        data.preferences = dict(preferences)
        data.total_words_learned = total_words_learned
        data.merge_sessions(study_sessions)
        if current_streak is not None:
            data.current_streak = current_streak
        if longest_streak is not None:
            data.longest_streak = max(data.longest_streak, longest_streak)
        if total_study_time_seconds is not None:
            data.total_study_time_seconds = total_study_time_seconds

        self.last_sync_at = at
        self.last_active_at = at

    def mark_upgraded(self, user_id: UserId, at: datetime) -> None:
        """
        Point this record at the registered user it became.

        Raises:
            AnonymousUserAlreadyUpgradedError: If already upgraded
        """
        if self.is_upgraded:
            raise AnonymousUserAlreadyUpgradedError(self.device_id)
        self.is_upgraded = True
        self.upgraded_user_id = user_id
        self.last_active_at = at

    @classmethod
    def create(
        cls,
        device_id: str,
        at: datetime,
        device_type: str | None = None,
        app_version: str | None = None,
    ) -> "AnonymousUser":
        return cls(
            id=AnonymousUserId.generate(),
            device_id=device_id,
            device_type=device_type,
            app_version=app_version,
            created_at=at,
            last_active_at=at,
        )
