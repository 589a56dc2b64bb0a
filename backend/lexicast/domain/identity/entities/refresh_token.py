"""Refresh token record entity."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from lexicast.domain.common.entity import Entity
from lexicast.domain.common.value_objects.ids import RefreshTokenId, UserId
from lexicast.utils import utc_now


@dataclass
class RefreshToken(Entity[RefreshTokenId]):
    """
    Server-side state behind an opaque refresh token.

    A token is active while it is neither revoked, used, nor expired. Each
    successful refresh consumes the token and points it at its replacement.
    """

    id: RefreshTokenId
    user_id: UserId
    token: str
    jwt_id: str
    expires_at: datetime
    created_at: datetime
    device_id: str | None = None
    is_used: bool = False
    used_at: datetime | None = None
    is_revoked: bool = False
    revoked_at: datetime | None = None
    revoked_by_ip: str | None = None
    replaced_by_token: str | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utc_now()) >= self.expires_at

    def is_active(self, now: datetime | None = None) -> bool:
        return not self.is_revoked and not self.is_used and not self.is_expired(now)

    @classmethod
    def create(
        cls,
        user_id: UserId,
        token: str,
        jwt_id: str,
        lifetime: timedelta,
        device_id: str | None = None,
        now: datetime | None = None,
    ) -> "RefreshToken":
        issued_at = now or utc_now()
        return cls(
            id=RefreshTokenId.generate(),
            user_id=user_id,
            token=token,
            jwt_id=jwt_id,
            device_id=device_id,
            created_at=issued_at,
            expires_at=issued_at + lifetime,
        )
