"""Repository for User domain entities."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lexicast.domain.common.value_objects.ids import UserId
from lexicast.domain.identity.entities.user import User
from lexicast.domain.identity.exceptions import (
    EmailAlreadyExistsError,
    ProviderAlreadyLinkedError,
    UserNotFoundError,
)
from lexicast.infrastructure.identity.mappers.user_mapper import UserMapper
from lexicast.models import User as UserORM
from lexicast.models import UserProvider as UserProviderORM

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for User domain entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = UserMapper()

    def find_by_id(self, user_id: UserId) -> User | None:
        """
        Find a user by ID.

        Args:
            user_id: The user ID

        Returns:
            User entity if found, None otherwise
        """
        orm_model = self.db.get(UserORM, user_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_by_email(self, email: str) -> User | None:
        stmt = select(UserORM).where(UserORM.email == email)
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_by_provider(self, provider_name: str, provider_id: str) -> User | None:
        """
        Find the user a provider identity is linked to.

        Args:
            provider_name: Provider key, e.g. "google"
            provider_id: The user's id at that provider

        Returns:
            User entity if the identity is linked, None otherwise
        """
        stmt = (
            select(UserORM)
            .join(UserProviderORM, UserProviderORM.user_id == UserORM.id)
            .where(
                UserProviderORM.provider_name == provider_name,
                UserProviderORM.provider_id == provider_id,
            )
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def email_exists(self, email: str) -> bool:
        """Check if an email is already registered (exact match)."""
        stmt = select(UserORM.id).where(UserORM.email == email)
        return self.db.execute(stmt).scalar_one_or_none() is not None

    def save(self, user: User) -> User:
        """
        Save a user entity.

        Args:
            user: The user entity to save

        Returns:
            Saved user entity with database-generated values

        Raises:
            EmailAlreadyExistsError: If the email is already registered
            ProviderAlreadyLinkedError: If a provider identity belongs to another user
        """
        if not user.id.is_persisted():
            orm_model = self.mapper.to_orm(user)
            self.db.add(orm_model)
        else:
            existing = self.db.get(UserORM, user.id.value)
            if existing is None:
                raise UserNotFoundError(user.id.value)
            orm_model = self.mapper.to_orm(user, existing)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            message = str(e.orig).lower()
            if "email" in message:
                raise EmailAlreadyExistsError(user.email) from e
            if "provider" in message:
                provider = user.providers[-1]
                raise ProviderAlreadyLinkedError(
                    provider.provider_name, provider.provider_id
                ) from e
            raise

        self.db.refresh(orm_model)
        logger.info(f"Saved user {orm_model.id}")
        return self.mapper.to_domain(orm_model)

    def delete(self, user_id: UserId) -> bool:
        orm_model = self.db.get(UserORM, user_id.value)
        if orm_model is None:
            return False
        self.db.delete(orm_model)
        self.db.commit()
        logger.info(f"Deleted user {user_id.value}")
        return True
