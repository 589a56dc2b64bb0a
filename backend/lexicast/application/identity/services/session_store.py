"""Refresh-token session store."""

from collections.abc import Callable
from datetime import datetime, timedelta

import structlog

from lexicast.application.identity.protocols.refresh_token_repository import (
    RefreshTokenRepositoryProtocol,
)
from lexicast.application.identity.protocols.token_service import TokenServiceProtocol
from lexicast.domain.common.value_objects.ids import UserId
from lexicast.domain.identity.entities.refresh_token import RefreshToken
from lexicast.domain.identity.exceptions import RefreshTokenInactiveError
from lexicast.utils import utc_now

logger = structlog.get_logger(__name__)

DEFAULT_REFRESH_TOKEN_LIFETIME = timedelta(days=30)
DEFAULT_SWEEP_GRACE_PERIOD = timedelta(days=7)


class SessionStore:
    """
    Persisted refresh tokens with rotation and revocation.

    Every operation that changes more than one record is delegated to a single
    repository call so it runs inside one transaction.
    """

    def __init__(
        self,
        refresh_token_repository: RefreshTokenRepositoryProtocol,
        token_service: TokenServiceProtocol,
        token_lifetime: timedelta = DEFAULT_REFRESH_TOKEN_LIFETIME,
        sweep_grace_period: timedelta = DEFAULT_SWEEP_GRACE_PERIOD,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.refresh_token_repository = refresh_token_repository
        self.token_service = token_service
        self.token_lifetime = token_lifetime
        self.sweep_grace_period = sweep_grace_period
        self.clock = clock

    def issue(self, user_id: UserId, jwt_id: str, device_id: str | None = None) -> RefreshToken:
        """
        Insert a new active refresh token.

        Args:
            user_id: Owner of the token
            jwt_id: Id of the access token issued alongside
            device_id: Device the session is bound to, if any

        Returns:
            The persisted refresh token record
        """
        record = self._new_record(user_id, jwt_id, device_id)
        return self.refresh_token_repository.add(record)

    def lookup(self, token: str) -> RefreshToken | None:
        return self.refresh_token_repository.find_by_token(token)

    def rotate(self, old: RefreshToken, jwt_id: str) -> RefreshToken:
        """
        Consume a refresh token and issue its replacement in one step.

        Args:
            old: The record being presented for refresh
            jwt_id: Id of the new access token

        Returns:
            The replacement record

        Raises:
            RefreshTokenInactiveError: If the old token stopped being active
                before it could be consumed (revoked, expired, or used concurrently)
        """
        replacement = self._new_record(old.user_id, jwt_id, old.device_id)
        stored = self.refresh_token_repository.consume_and_replace(
            old.token, replacement, self.clock()
        )
        if stored is None:
            raise RefreshTokenInactiveError
        logger.info("refresh_token_rotated", user_id=old.user_id.value, old_id=old.id.value)
        return stored

    def revoke_one(self, token: str, ip_address: str | None = None) -> int:
        return self.refresh_token_repository.revoke(token, self.clock(), ip_address)

    def revoke_all_for_user(self, user_id: UserId, ip_address: str | None = None) -> int:
        revoked = self.refresh_token_repository.revoke_for_user(user_id, self.clock(), ip_address)
        logger.info("refresh_tokens_revoked", user_id=user_id.value, count=revoked)
        return revoked

    def revoke_all_for_device(self, device_id: str, ip_address: str | None = None) -> int:
        revoked = self.refresh_token_repository.revoke_for_device(
            device_id, self.clock(), ip_address
        )
        logger.info("refresh_tokens_revoked", device_id=device_id, count=revoked)
        return revoked

    def sweep(self) -> int:
        """Delete records that expired more than the grace period ago."""
        cutoff = self.clock() - self.sweep_grace_period
        removed = self.refresh_token_repository.delete_expired_before(cutoff)
        logger.info("refresh_tokens_swept", removed=removed, cutoff=cutoff.isoformat())
        return removed

    def _new_record(self, user_id: UserId, jwt_id: str, device_id: str | None) -> RefreshToken:
        return RefreshToken.create(
            user_id=user_id,
            token=self.token_service.issue_refresh_token(),
            jwt_id=jwt_id,
            lifetime=self.token_lifetime,
            device_id=device_id,
            now=self.clock(),
        )
