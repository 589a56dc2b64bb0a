from typing import Protocol

from lexicast.domain.common.value_objects.ids import UserId
from lexicast.domain.identity.entities.anonymous_user import AnonymousUser


class AnonymousUserRepositoryProtocol(Protocol):
    def find_by_device_id(self, device_id: str) -> AnonymousUser | None: ...

    def create_if_absent(self, anonymous_user: AnonymousUser) -> AnonymousUser: ...

    def save(self, anonymous_user: AnonymousUser) -> AnonymousUser: ...

    def mark_upgraded(self, anonymous_user: AnonymousUser, user_id: UserId) -> bool: ...
