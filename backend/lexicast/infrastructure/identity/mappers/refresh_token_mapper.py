"""Mapper for RefreshToken ORM ↔ Domain conversion."""

from lexicast.domain.common.value_objects.ids import RefreshTokenId, UserId
from lexicast.domain.identity.entities.refresh_token import RefreshToken
from lexicast.models import RefreshToken as RefreshTokenORM
from lexicast.utils import ensure_utc


class RefreshTokenMapper:
    def to_domain(self, orm_model: RefreshTokenORM) -> RefreshToken:
        return RefreshToken(
            id=RefreshTokenId(orm_model.id),
            user_id=UserId(orm_model.user_id),
            token=orm_model.token,
            jwt_id=orm_model.jwt_id,
            expires_at=ensure_utc(orm_model.expires_at),
            created_at=ensure_utc(orm_model.created_at),
            device_id=orm_model.device_id,
            is_used=orm_model.is_used,
            used_at=ensure_utc(orm_model.used_at),
            is_revoked=orm_model.is_revoked,
            revoked_at=ensure_utc(orm_model.revoked_at),
            revoked_by_ip=orm_model.revoked_by_ip,
            replaced_by_token=orm_model.replaced_by_token,
        )

    def to_orm(self, domain_entity: RefreshToken) -> RefreshTokenORM:
        return RefreshTokenORM(
            id=domain_entity.id.value if domain_entity.id.value != 0 else None,
            token=domain_entity.token,
            jwt_id=domain_entity.jwt_id,
            user_id=domain_entity.user_id.value,
            device_id=domain_entity.device_id,
            is_used=domain_entity.is_used,
            used_at=domain_entity.used_at,
            is_revoked=domain_entity.is_revoked,
            revoked_at=domain_entity.revoked_at,
            revoked_by_ip=domain_entity.revoked_by_ip,
            replaced_by_token=domain_entity.replaced_by_token,
            created_at=domain_entity.created_at,
            expires_at=domain_entity.expires_at,
        )
