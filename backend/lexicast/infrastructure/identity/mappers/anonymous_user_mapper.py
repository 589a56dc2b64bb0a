"""Mapper for AnonymousUser ORM ↔ Domain conversion."""

from datetime import date
from typing import Any

from lexicast.domain.common.value_objects.ids import AnonymousUserId, UserId
from lexicast.domain.identity.entities.anonymous_user import (
    AnonymousUser,
    StudySession,
    SyncData,
)
from lexicast.models import AnonymousUser as AnonymousUserORM
from lexicast.utils import ensure_utc


class AnonymousUserMapper:
    """Mapper for AnonymousUser ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: AnonymousUserORM) -> AnonymousUser:
        return AnonymousUser(
            id=AnonymousUserId(orm_model.id),
            device_id=orm_model.device_id,
            device_type=orm_model.device_type,
            app_version=orm_model.app_version,
            sync_data=self.sync_data_to_domain(orm_model.sync_data or {}),
            is_upgraded=orm_model.is_upgraded,
            upgraded_user_id=(
                UserId(orm_model.upgraded_user_id)
                if orm_model.upgraded_user_id is not None
                else None
            ),
            is_active=orm_model.is_active,
            created_at=ensure_utc(orm_model.created_at),
            last_active_at=ensure_utc(orm_model.last_active_at),
            last_sync_at=ensure_utc(orm_model.last_sync_at),
        )

    def to_orm(
        self, domain_entity: AnonymousUser, orm_model: AnonymousUserORM | None = None
    ) -> AnonymousUserORM:
        if orm_model is None:
            orm_model = AnonymousUserORM(
                id=domain_entity.id.value if domain_entity.id.value != 0 else None
            )
            if domain_entity.created_at is not None:
                orm_model.created_at = domain_entity.created_at

        orm_model.device_id = domain_entity.device_id
        orm_model.device_type = domain_entity.device_type
        orm_model.app_version = domain_entity.app_version
        orm_model.sync_data = self.sync_data_to_document(domain_entity.sync_data)
        orm_model.is_upgraded = domain_entity.is_upgraded
        orm_model.upgraded_user_id = (
            domain_entity.upgraded_user_id.value if domain_entity.upgraded_user_id else None
        )
        orm_model.is_active = domain_entity.is_active
        orm_model.last_active_at = domain_entity.last_active_at
        orm_model.last_sync_at = domain_entity.last_sync_at
        return orm_model

    def sync_data_to_document(self, sync_data: SyncData) -> dict[str, Any]:
        """Serialize sync data into the JSON column."""
        return {
            "favorite_words": list(sync_data.favorite_words),
            "preferences": dict(sync_data.preferences),
            "study_sessions": [
                {
                    "date": s.date.isoformat(),
                    "words_studied": s.words_studied,
                    "correct_answers": s.correct_answers,
                    "study_duration_seconds": s.study_duration_seconds,
                    "study_type": s.study_type,
                }
                for s in sync_data.study_sessions
            ],
            "total_words_learned": sync_data.total_words_learned,
            "current_streak": sync_data.current_streak,
            "longest_streak": sync_data.longest_streak,
            "total_study_time_seconds": sync_data.total_study_time_seconds,
        }

    def sync_data_to_domain(self, document: dict[str, Any]) -> SyncData:
        return SyncData(
            favorite_words=list(document.get("favorite_words", [])),
            preferences=dict(document.get("preferences", {})),
            study_sessions=[
                StudySession(
                    date=date.fromisoformat(s["date"]),
                    words_studied=s.get("words_studied", 0),
                    correct_answers=s.get("correct_answers", 0),
                    study_duration_seconds=s.get("study_duration_seconds", 0),
                    study_type=s.get("study_type"),
                )
                for s in document.get("study_sessions", [])
            ],
            total_words_learned=document.get("total_words_learned", 0),
            current_streak=document.get("current_streak", 0),
            longest_streak=document.get("longest_streak", 0),
            total_study_time_seconds=document.get("total_study_time_seconds", 0),
        )
