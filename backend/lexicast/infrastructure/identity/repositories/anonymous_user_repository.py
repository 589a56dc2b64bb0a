"""Repository for anonymous (device) users."""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lexicast.domain.common.value_objects.ids import UserId
from lexicast.domain.identity.entities.anonymous_user import AnonymousUser
from lexicast.domain.identity.exceptions import AnonymousUserNotFoundError
from lexicast.infrastructure.identity.mappers.anonymous_user_mapper import AnonymousUserMapper
from lexicast.models import AnonymousUser as AnonymousUserORM
from lexicast.utils import utc_now

logger = logging.getLogger(__name__)


class AnonymousUserRepository:
    """Repository for AnonymousUser domain entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = AnonymousUserMapper()

    def find_by_device_id(self, device_id: str) -> AnonymousUser | None:
        orm_model = self._get_orm(device_id)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def create_if_absent(self, anonymous_user: AnonymousUser) -> AnonymousUser:
        """
        Insert a record for a device unless one already exists.

        The unique device id constraint settles concurrent first contacts; the
        loser re-reads the winner's row.

        Returns:
            The stored record for the device
        """
        orm_model = self.mapper.to_orm(anonymous_user)
        self.db.add(orm_model)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self._get_orm(anonymous_user.device_id)
            if existing is None:
                raise
            logger.info(f"Anonymous user for device already existed (id={existing.id})")
            return self.mapper.to_domain(existing)

        self.db.refresh(orm_model)
        logger.info(f"Created anonymous user {orm_model.id}")
        return self.mapper.to_domain(orm_model)

    def save(self, anonymous_user: AnonymousUser) -> AnonymousUser:
        if not anonymous_user.id.is_persisted():
            return self.create_if_absent(anonymous_user)

        orm_model = self.db.get(AnonymousUserORM, anonymous_user.id.value)
        if orm_model is None:
            raise AnonymousUserNotFoundError(anonymous_user.device_id)
        self.mapper.to_orm(anonymous_user, orm_model)
        self.db.commit()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def mark_upgraded(self, anonymous_user: AnonymousUser, user_id: UserId) -> bool:
        """
        Flag the record as upgraded unless that already happened.

        Returns:
            True if this call performed the upgrade, False if another one won
        """
        now = utc_now()
        stmt = (
            update(AnonymousUserORM)
            .where(
                AnonymousUserORM.id == anonymous_user.id.value,
                AnonymousUserORM.is_upgraded.is_(False),
            )
            .values(is_upgraded=True, upgraded_user_id=user_id.value, last_active_at=now)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        if result.rowcount != 1:
            return False

        anonymous_user.mark_upgraded(user_id, now)
        return True

    def _get_orm(self, device_id: str) -> AnonymousUserORM | None:
        stmt = select(AnonymousUserORM).where(AnonymousUserORM.device_id == device_id)
        return self.db.execute(stmt).scalar_one_or_none()
