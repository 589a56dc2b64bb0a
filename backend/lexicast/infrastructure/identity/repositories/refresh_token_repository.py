"""Repository for refresh token records."""

import logging
from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from lexicast.domain.common.value_objects.ids import UserId
from lexicast.domain.identity.entities.refresh_token import RefreshToken
from lexicast.infrastructure.identity.mappers.refresh_token_mapper import RefreshTokenMapper
from lexicast.models import RefreshToken as RefreshTokenORM

logger = logging.getLogger(__name__)


class RefreshTokenRepository:
    """
    Refresh token persistence.

    State changes are conditional updates on the active predicate, so a
    record that is already used, revoked or expired is never touched twice.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = RefreshTokenMapper()

    def add(self, refresh_token: RefreshToken) -> RefreshToken:
        orm_model = self.mapper.to_orm(refresh_token)
        self.db.add(orm_model)
        self.db.commit()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def find_by_token(self, token: str) -> RefreshToken | None:
        stmt = select(RefreshTokenORM).where(RefreshTokenORM.token == token)
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def consume_and_replace(
        self, old_token: str, replacement: RefreshToken, now: datetime
    ) -> RefreshToken | None:
        """
        Mark a token used and insert its replacement in one transaction.

        Returns:
            The stored replacement, or None if the old token was no longer active
        """
        stmt = (
            update(RefreshTokenORM)
            .where(RefreshTokenORM.token == old_token, *self._active(now))
            .values(is_used=True, used_at=now, replaced_by_token=replacement.token)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            if result.rowcount != 1:
                self.db.rollback()
                return None

            orm_model = self.mapper.to_orm(replacement)
            self.db.add(orm_model)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def revoke(self, token: str, now: datetime, ip_address: str | None = None) -> int:
        return self._revoke_where(now, ip_address, RefreshTokenORM.token == token)

    def revoke_for_user(
        self, user_id: UserId, now: datetime, ip_address: str | None = None
    ) -> int:
        return self._revoke_where(now, ip_address, RefreshTokenORM.user_id == user_id.value)

    def revoke_for_device(
        self, device_id: str, now: datetime, ip_address: str | None = None
    ) -> int:
        return self._revoke_where(now, ip_address, RefreshTokenORM.device_id == device_id)

    def delete_expired_before(self, cutoff: datetime) -> int:
        stmt = (
            delete(RefreshTokenORM)
            .where(RefreshTokenORM.expires_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        if result.rowcount:
            logger.info(f"Deleted {result.rowcount} expired refresh tokens")
        return result.rowcount

    def _revoke_where(self, now: datetime, ip_address: str | None, *criteria: object) -> int:
        stmt = (
            update(RefreshTokenORM)
            .where(*criteria, *self._active(now))  # type: ignore[arg-type]
            .values(is_revoked=True, revoked_at=now, revoked_by_ip=ip_address)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount

    @staticmethod
    def _active(now: datetime) -> tuple:
        return (
            RefreshTokenORM.is_used.is_(False),
            RefreshTokenORM.is_revoked.is_(False),
            RefreshTokenORM.expires_at > now,
        )
