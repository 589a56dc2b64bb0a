from datetime import datetime
from typing import Protocol

from lexicast.domain.common.value_objects.ids import UserId
from lexicast.domain.identity.entities.refresh_token import RefreshToken


class RefreshTokenRepositoryProtocol(Protocol):
    def add(self, refresh_token: RefreshToken) -> RefreshToken: ...

    def find_by_token(self, token: str) -> RefreshToken | None: ...

    def consume_and_replace(
        self, old_token: str, replacement: RefreshToken, now: datetime
    ) -> RefreshToken | None: ...

    def revoke(self, token: str, now: datetime, ip_address: str | None = None) -> int: ...

    def revoke_for_user(
        self, user_id: UserId, now: datetime, ip_address: str | None = None
    ) -> int: ...

    def revoke_for_device(
        self, device_id: str, now: datetime, ip_address: str | None = None
    ) -> int: ...

    def delete_expired_before(self, cutoff: datetime) -> int: ...
