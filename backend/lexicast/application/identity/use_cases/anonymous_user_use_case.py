"""Use case for anonymous (device-based) sessions."""

import structlog

from lexicast.application.identity.protocols.anonymous_user_repository import (
    AnonymousUserRepositoryProtocol,
)
from lexicast.application.identity.services.token_issuer import TokenIssuer
from lexicast.application.identity.use_cases.dtos import AuthResult, SyncPayload
from lexicast.domain.identity.entities.anonymous_user import AnonymousUser, StudySession
from lexicast.domain.identity.exceptions import AnonymousUserNotFoundError
from lexicast.utils import utc_now

logger = structlog.get_logger(__name__)


class AnonymousUserUseCase:
    """Get-or-create anonymous identities and keep their progress in sync."""

    def __init__(
        self,
        anonymous_user_repository: AnonymousUserRepositoryProtocol,
        token_issuer: TokenIssuer,
    ) -> None:
        self.anonymous_user_repository = anonymous_user_repository
        self.token_issuer = token_issuer

    def get_or_create(
        self, device_id: str, device_type: str | None = None, app_version: str | None = None
    ) -> AnonymousUser:
        """
        Return the anonymous record for a device, creating it on first contact.

        Repeated calls with the same device id return the same record.
        """
        now = utc_now()
        anonymous_user = self.anonymous_user_repository.find_by_device_id(device_id)
        if anonymous_user is None:
            candidate = AnonymousUser.create(device_id, now, device_type, app_version)
            anonymous_user = self.anonymous_user_repository.create_if_absent(candidate)
            logger.info("anonymous_user_created", anonymous_user_id=anonymous_user.id.value)
            return anonymous_user

        anonymous_user.touch(now, device_type, app_version)
        return self.anonymous_user_repository.save(anonymous_user)

    def authenticate(
        self, device_id: str, device_type: str | None = None, app_version: str | None = None
    ) -> AuthResult:
        """
        Sign in a device anonymously.

        Returns:
            An anonymous access token; anonymous sessions carry no refresh token
        """
        anonymous_user = self.get_or_create(device_id, device_type, app_version)
        result = self.token_issuer.issue_for_anonymous(anonymous_user)
        logger.info("anonymous_authenticated", anonymous_user_id=anonymous_user.id.value)
        return result

    def get_by_device(self, device_id: str) -> AnonymousUser:
        anonymous_user = self.anonymous_user_repository.find_by_device_id(device_id)
        if anonymous_user is None:
            raise AnonymousUserNotFoundError(device_id)
        return anonymous_user

    def sync(self, device_id: str, payload: SyncPayload) -> AnonymousUser:
        """
        Apply a progress snapshot from the device.

        Raises:
            AnonymousUserNotFoundError: If the device never signed in
            AnonymousUserAlreadyUpgradedError: If the device became a registered user
        """
        anonymous_user = self.get_by_device(device_id)
        anonymous_user.apply_sync(
            at=utc_now(),
            favorite_words=payload.favorite_words,
            preferences=payload.preferences,
            study_sessions=[
                StudySession(
                    date=s.date,
                    words_studied=s.words_studied,
                    correct_answers=s.correct_answers,
                    study_duration_seconds=s.study_duration_seconds,
                    study_type=s.study_type,
                )
                for s in payload.study_sessions
            ],
            total_words_learned=payload.total_words_learned,
            current_streak=payload.current_streak,
            longest_streak=payload.longest_streak,
            total_study_time_seconds=payload.total_study_time_seconds,
        )
        anonymous_user = self.anonymous_user_repository.save(anonymous_user)
        logger.info(
            "anonymous_user_synced",
            anonymous_user_id=anonymous_user.id.value,
            sessions=len(anonymous_user.sync_data.study_sessions),
        )
        return anonymous_user
