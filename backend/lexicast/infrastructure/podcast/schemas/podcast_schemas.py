"""Pydantic schemas for podcast endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from lexicast.domain.podcast.entities.podcast_episode import MAX_TITLE_LENGTH, PodcastEpisode
from lexicast.domain.podcast.entities.podcast_quiz import MAX_ANSWERS, MIN_ANSWERS, PodcastQuiz
from lexicast.domain.podcast.entities.podcast_series import PodcastSeason, PodcastSeries
from lexicast.domain.podcast.value_objects.audio_quality import AudioQuality
from lexicast.domain.podcast.value_objects.processing_status import ProcessingStatus


class SeriesCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    source_language: str = Field("EN", min_length=2, max_length=10)
    target_language: str = Field("TR", min_length=2, max_length=10)
    level: str | None = Field(None, max_length=20, description="CEFR level, e.g. A2")


class SeriesResponse(BaseModel):
    id: int
    title: str
    description: str | None
    source_language: str
    target_language: str
    level: str | None
    thumbnail_url: str | None
    is_active: bool
    created_at: datetime | None

    @classmethod
    def from_entity(cls, series: PodcastSeries) -> "SeriesResponse":
        return cls(
            id=series.id.value,
            title=series.title,
            description=series.description,
            source_language=series.source_language,
            target_language=series.target_language,
            level=series.level,
            thumbnail_url=series.thumbnail_url,
            is_active=series.is_active,
            created_at=series.created_at,
        )


class SeasonCreateRequest(BaseModel):
    series_id: int = Field(..., gt=0)
    season_number: int = Field(..., gt=0)
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class SeasonResponse(BaseModel):
    id: int
    series_id: int
    season_number: int
    title: str
    description: str | None
    is_active: bool

    @classmethod
    def from_entity(cls, season: PodcastSeason) -> "SeasonResponse":
        return cls(
            id=season.id.value,
            series_id=season.series_id.value,
            season_number=season.season_number,
            title=season.title,
            description=season.description,
            is_active=season.is_active,
        )


class EpisodeCreateRequest(BaseModel):
    series_id: int = Field(..., gt=0)
    season_id: int = Field(..., gt=0)
    episode_number: int = Field(..., gt=0)
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str | None = None
    release_date: datetime | None = None


class EpisodeUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their current value."""

    title: str | None = Field(None, min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str | None = None
    episode_number: int | None = Field(None, gt=0)
    release_date: datetime | None = None
    is_active: bool | None = None


class AudioQualityResponse(BaseModel):
    quality: str
    url: str
    file_size: int
    bitrate: int
    is_processed: bool
    processed_at: datetime | None

    @classmethod
    def from_value(cls, quality: AudioQuality) -> "AudioQualityResponse":
        return cls(
            quality=quality.quality,
            url=quality.url,
            file_size=quality.file_size,
            bitrate=quality.bitrate,
            is_processed=quality.is_processed,
            processed_at=quality.processed_at,
        )


class EpisodeSummaryResponse(BaseModel):
    """Episode fields shown in listings."""

    id: int
    series_id: int
    season_id: int
    episode_number: int
    title: str
    duration_seconds: int
    thumbnail_url: str | None
    release_date: datetime | None
    processing_status: ProcessingStatus

    @classmethod
    def from_entity(cls, episode: PodcastEpisode) -> "EpisodeSummaryResponse":
        return cls(
            id=episode.id.value,
            series_id=episode.series_id.value,
            season_id=episode.season_id.value,
            episode_number=episode.episode_number,
            title=episode.title,
            duration_seconds=episode.duration_seconds,
            thumbnail_url=episode.thumbnail_url,
            release_date=episode.release_date,
            processing_status=episode.processing_status,
        )


class EpisodeResponse(EpisodeSummaryResponse):
    """Full episode, including renditions and processing details."""

    description: str | None
    original_audio_url: str | None
    original_file_name: str | None
    audio_qualities: list[AudioQualityResponse]
    all_qualities_processed: bool
    processing_started_at: datetime | None
    processing_completed_at: datetime | None
    processing_error: str | None
    is_active: bool
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_entity(cls, episode: PodcastEpisode) -> "EpisodeResponse":
        summary = EpisodeSummaryResponse.from_entity(episode)
        return cls(
            **summary.model_dump(),
            description=episode.description,
            original_audio_url=episode.original_audio_url,
            original_file_name=episode.original_file_name,
            audio_qualities=[AudioQualityResponse.from_value(q) for q in episode.audio_qualities],
            all_qualities_processed=episode.all_qualities_processed,
            processing_started_at=episode.processing_started_at,
            processing_completed_at=episode.processing_completed_at,
            processing_error=episode.processing_error,
            is_active=episode.is_active,
            created_at=episode.created_at,
            updated_at=episode.updated_at,
        )


class QuizCreateRequest(BaseModel):
    episode_id: int = Field(..., gt=0)
    question: str = Field(..., min_length=1)
    answers: list[str] = Field(..., min_length=MIN_ANSWERS, max_length=MAX_ANSWERS)
    correct_answer_index: int = Field(..., ge=0)


class QuizUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their current value."""

    question: str | None = Field(None, min_length=1)
    answers: list[str] | None = Field(None, min_length=MIN_ANSWERS, max_length=MAX_ANSWERS)
    correct_answer_index: int | None = Field(None, ge=0)


class QuizResponse(BaseModel):
    id: int
    episode_id: int
    question: str
    answers: list[str]
    correct_answer_index: int
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_entity(cls, quiz: PodcastQuiz) -> "QuizResponse":
        return cls(
            id=quiz.id.value,
            episode_id=quiz.episode_id.value,
            question=quiz.question,
            answers=list(quiz.answers),
            correct_answer_index=quiz.correct_answer_index,
            created_at=quiz.created_at,
            updated_at=quiz.updated_at,
        )
