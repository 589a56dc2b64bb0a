"""Mapper for User ORM ↔ Domain conversion."""

from lexicast.domain.common.value_objects.ids import AnonymousUserId, UserId
from lexicast.domain.identity.entities.user import User, UserProvider
from lexicast.models import User as UserORM
from lexicast.models import UserProvider as UserProviderORM
from lexicast.utils import ensure_utc


class UserMapper:
    """Mapper for User ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: UserORM) -> User:
        """Convert ORM model to domain entity."""
        return User.create_with_id(
            id=UserId(orm_model.id),
            email=orm_model.email,
            first_name=orm_model.first_name,
            last_name=orm_model.last_name,
            hashed_password=orm_model.hashed_password,
            profile_picture_url=orm_model.profile_picture_url,
            email_verified=orm_model.email_verified,
            role=orm_model.role,
            providers=[self._provider_to_domain(p) for p in orm_model.providers],
            device_ids=list(orm_model.device_ids or []),
            anonymous_user_id=(
                AnonymousUserId(orm_model.anonymous_user_id)
                if orm_model.anonymous_user_id is not None
                else None
            ),
            current_subscription_plan=orm_model.current_subscription_plan,
            subscription_provider=orm_model.subscription_provider,
            subscription_expires_at=ensure_utc(orm_model.subscription_expires_at),
            is_active=orm_model.is_active,
            last_login_at=ensure_utc(orm_model.last_login_at),
            created_at=ensure_utc(orm_model.created_at),
            updated_at=ensure_utc(orm_model.updated_at),
        )

    def to_orm(self, domain_entity: User, orm_model: UserORM | None = None) -> UserORM:
        """Convert domain entity to ORM model."""
        if orm_model is None:
            orm_model = UserORM(id=domain_entity.id.value if domain_entity.id.value != 0 else None)

        orm_model.email = domain_entity.email
        orm_model.first_name = domain_entity.first_name
        orm_model.last_name = domain_entity.last_name
        orm_model.hashed_password = domain_entity.hashed_password
        orm_model.profile_picture_url = domain_entity.profile_picture_url
        orm_model.email_verified = domain_entity.email_verified
        orm_model.role = domain_entity.role
        orm_model.device_ids = list(domain_entity.device_ids)
        orm_model.anonymous_user_id = (
            domain_entity.anonymous_user_id.value if domain_entity.anonymous_user_id else None
        )
        orm_model.current_subscription_plan = domain_entity.current_subscription_plan
        orm_model.subscription_provider = domain_entity.subscription_provider
        orm_model.subscription_expires_at = domain_entity.subscription_expires_at
        orm_model.is_active = domain_entity.is_active
        orm_model.last_login_at = domain_entity.last_login_at
        self._sync_providers(domain_entity, orm_model)
        return orm_model

    def _sync_providers(self, domain_entity: User, orm_model: UserORM) -> None:
        existing = {(p.provider_name, p.provider_id): p for p in orm_model.providers}
        for provider in domain_entity.providers:
            key = (provider.provider_name, provider.provider_id)
            row = existing.get(key)
            if row is None:
                row = UserProviderORM(
                    provider_name=provider.provider_name, provider_id=provider.provider_id
                )
                orm_model.providers.append(row)
            row.email = provider.email
            row.display_name = provider.display_name
            row.profile_picture_url = provider.profile_picture_url
            row.access_token = provider.access_token
            row.refresh_token = provider.refresh_token
            row.is_active = provider.is_active
            row.last_used_at = provider.last_used_at
            if provider.created_at is not None:
                row.created_at = provider.created_at

    def _provider_to_domain(self, orm_model: UserProviderORM) -> UserProvider:
        return UserProvider(
            provider_name=orm_model.provider_name,
            provider_id=orm_model.provider_id,
            email=orm_model.email,
            display_name=orm_model.display_name,
            profile_picture_url=orm_model.profile_picture_url,
            access_token=orm_model.access_token,
            refresh_token=orm_model.refresh_token,
            is_active=orm_model.is_active,
            created_at=ensure_utc(orm_model.created_at),
            last_used_at=ensure_utc(orm_model.last_used_at),
        )
