"""Mappers for podcast ORM ↔ Domain conversion."""

from datetime import datetime
from typing import Any

from lexicast.domain.common.value_objects.ids import (
    EpisodeId,
    PodcastQuizId,
    PodcastSeasonId,
    PodcastSeriesId,
)
from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.domain.podcast.entities.podcast_quiz import PodcastQuiz
from lexicast.domain.podcast.entities.podcast_series import PodcastSeason, PodcastSeries
from lexicast.domain.podcast.value_objects.audio_quality import AudioQuality
from lexicast.domain.podcast.value_objects.processing_status import ProcessingStatus
from lexicast.models import PodcastEpisode as PodcastEpisodeORM
from lexicast.models import PodcastQuiz as PodcastQuizORM
from lexicast.models import PodcastSeason as PodcastSeasonORM
from lexicast.models import PodcastSeries as PodcastSeriesORM
from lexicast.utils import ensure_utc


class PodcastSeriesMapper:
    def to_domain(self, orm_model: PodcastSeriesORM) -> PodcastSeries:
        return PodcastSeries(
            id=PodcastSeriesId(orm_model.id),
            title=orm_model.title,
            description=orm_model.description,
            source_language=orm_model.source_language,
            target_language=orm_model.target_language,
            level=orm_model.level,
            thumbnail_url=orm_model.thumbnail_url,
            is_active=orm_model.is_active,
            created_at=ensure_utc(orm_model.created_at),
            updated_at=ensure_utc(orm_model.updated_at),
        )

    def to_orm(
        self, domain_entity: PodcastSeries, orm_model: PodcastSeriesORM | None = None
    ) -> PodcastSeriesORM:
        if orm_model is None:
            orm_model = PodcastSeriesORM()
        orm_model.title = domain_entity.title
        orm_model.description = domain_entity.description
        orm_model.source_language = domain_entity.source_language
        orm_model.target_language = domain_entity.target_language
        orm_model.level = domain_entity.level
        orm_model.thumbnail_url = domain_entity.thumbnail_url
        orm_model.is_active = domain_entity.is_active
        return orm_model


class PodcastSeasonMapper:
    def to_domain(self, orm_model: PodcastSeasonORM) -> PodcastSeason:
        return PodcastSeason(
            id=PodcastSeasonId(orm_model.id),
            series_id=PodcastSeriesId(orm_model.series_id),
            season_number=orm_model.season_number,
            title=orm_model.title,
            description=orm_model.description,
            is_active=orm_model.is_active,
            created_at=ensure_utc(orm_model.created_at),
            updated_at=ensure_utc(orm_model.updated_at),
        )

    def to_orm(
        self, domain_entity: PodcastSeason, orm_model: PodcastSeasonORM | None = None
    ) -> PodcastSeasonORM:
        if orm_model is None:
            orm_model = PodcastSeasonORM(series_id=domain_entity.series_id.value)
        orm_model.season_number = domain_entity.season_number
        orm_model.title = domain_entity.title
        orm_model.description = domain_entity.description
        orm_model.is_active = domain_entity.is_active
        return orm_model


class PodcastEpisodeMapper:
    """Mapper for PodcastEpisode ORM ↔ Domain conversion; renditions live in a JSON column."""

    def to_domain(self, orm_model: PodcastEpisodeORM) -> PodcastEpisode:
        return PodcastEpisode(
            id=EpisodeId(orm_model.id),
            series_id=PodcastSeriesId(orm_model.series_id),
            season_id=PodcastSeasonId(orm_model.season_id),
            episode_number=orm_model.episode_number,
            title=orm_model.title,
            description=orm_model.description,
            duration_seconds=orm_model.duration_seconds,
            original_audio_url=orm_model.original_audio_url,
            original_file_name=orm_model.original_file_name,
            audio_qualities=[self.quality_to_domain(q) for q in orm_model.audio_qualities or []],
            thumbnail_url=orm_model.thumbnail_url,
            release_date=ensure_utc(orm_model.release_date),
            processing_status=ProcessingStatus(orm_model.processing_status),
            processing_started_at=ensure_utc(orm_model.processing_started_at),
            processing_completed_at=ensure_utc(orm_model.processing_completed_at),
            processing_error=orm_model.processing_error,
            is_active=orm_model.is_active,
            created_at=ensure_utc(orm_model.created_at),
            updated_at=ensure_utc(orm_model.updated_at),
        )

    def to_orm(
        self, domain_entity: PodcastEpisode, orm_model: PodcastEpisodeORM | None = None
    ) -> PodcastEpisodeORM:
        if orm_model is None:
            orm_model = PodcastEpisodeORM()
        for column, value in self.to_values(domain_entity).items():
            setattr(orm_model, column, value)
        return orm_model

    def to_values(self, domain_entity: PodcastEpisode) -> dict[str, Any]:
        """Column values for a domain entity, usable in an UPDATE statement."""
        return {
            "series_id": domain_entity.series_id.value,
            "season_id": domain_entity.season_id.value,
            "episode_number": domain_entity.episode_number,
            "title": domain_entity.title,
            "description": domain_entity.description,
            "duration_seconds": domain_entity.duration_seconds,
            "original_audio_url": domain_entity.original_audio_url,
            "original_file_name": domain_entity.original_file_name,
            "audio_qualities": [
                self.quality_to_document(q) for q in domain_entity.audio_qualities
            ],
            "thumbnail_url": domain_entity.thumbnail_url,
            "release_date": domain_entity.release_date,
            "processing_status": domain_entity.processing_status.value,
            "processing_started_at": domain_entity.processing_started_at,
            "processing_completed_at": domain_entity.processing_completed_at,
            "processing_error": domain_entity.processing_error,
            "is_active": domain_entity.is_active,
        }

    def quality_to_document(self, quality: AudioQuality) -> dict[str, Any]:
        return {
            "quality": quality.quality,
            "url": quality.url,
            "file_size": quality.file_size,
            "bitrate": quality.bitrate,
            "is_processed": quality.is_processed,
            "processed_at": quality.processed_at.isoformat() if quality.processed_at else None,
        }

    def quality_to_domain(self, document: dict[str, Any]) -> AudioQuality:
        processed_at = document.get("processed_at")
        return AudioQuality(
            quality=document["quality"],
            url=document["url"],
            file_size=document.get("file_size", 0),
            bitrate=document.get("bitrate", 0),
            is_processed=document.get("is_processed", False),
            processed_at=ensure_utc(datetime.fromisoformat(processed_at)) if processed_at else None,
        )


class PodcastQuizMapper:
    def to_domain(self, orm_model: PodcastQuizORM) -> PodcastQuiz:
        return PodcastQuiz(
            id=PodcastQuizId(orm_model.id),
            episode_id=EpisodeId(orm_model.episode_id),
            question=orm_model.question,
            answers=list(orm_model.answers or []),
            correct_answer_index=orm_model.correct_answer_index,
            created_at=ensure_utc(orm_model.created_at),
            updated_at=ensure_utc(orm_model.updated_at),
        )

    def to_orm(
        self, domain_entity: PodcastQuiz, orm_model: PodcastQuizORM | None = None
    ) -> PodcastQuizORM:
        if orm_model is None:
            orm_model = PodcastQuizORM(episode_id=domain_entity.episode_id.value)
        orm_model.question = domain_entity.question
        orm_model.answers = list(domain_entity.answers)
        orm_model.correct_answer_index = domain_entity.correct_answer_index
        return orm_model
