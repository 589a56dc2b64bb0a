from datetime import datetime
from typing import Protocol

from lexicast.domain.identity.entities.user import User
from lexicast.domain.identity.value_objects.principal import Principal


class TokenServiceProtocol(Protocol):
    def issue_user_token(self, user: User, jwt_id: str | None = None) -> str: ...

    def issue_anonymous_token(self, device_id: str) -> str: ...

    def issue_refresh_token(self) -> str: ...

    def validate(self, token: str) -> bool: ...

    def resolve_principal(self, token: str) -> Principal | None: ...

    def extract_jwt_id(self, token: str) -> str | None: ...

    def expiry_of(self, token: str) -> datetime: ...
