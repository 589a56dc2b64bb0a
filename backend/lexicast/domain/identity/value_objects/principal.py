"""Resolved caller identity."""

from dataclasses import dataclass

from lexicast.domain.common.exceptions import AuthenticationError
from lexicast.domain.common.value_object import ValueObject
from lexicast.domain.identity.entities.user import ROLE_ADMIN


@dataclass(frozen=True)
class Principal(ValueObject):
    """
    The authenticated caller of a request.

    Anonymous callers are identified by device id, registered callers by user
    id. When a token carries a device id the caller is anonymous, regardless
    of any other claims.
    """

    user_id: int | None = None
    device_id: str | None = None
    role: str | None = None
    jwt_id: str | None = None

    def __post_init__(self) -> None:
        if self.user_id is None and not self.device_id:
            raise AuthenticationError("Token carries no identity claims")

    @property
    def is_anonymous(self) -> bool:
        return bool(self.device_id)

    @property
    def is_admin(self) -> bool:
        return not self.is_anonymous and self.role == ROLE_ADMIN

    @property
    def owner_key(self) -> str:
        """Key under which the caller's resources are stored."""
        if self.device_id:
            return self.device_id
        return str(self.user_id)
