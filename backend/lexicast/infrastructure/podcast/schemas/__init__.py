from .podcast_schemas import (
    AudioQualityResponse,
    EpisodeCreateRequest,
    EpisodeResponse,
    EpisodeSummaryResponse,
    EpisodeUpdateRequest,
    QuizCreateRequest,
    QuizResponse,
    QuizUpdateRequest,
    SeasonCreateRequest,
    SeasonResponse,
    SeriesCreateRequest,
    SeriesResponse,
)

__all__ = [
    "AudioQualityResponse",
    "EpisodeCreateRequest",
    "EpisodeResponse",
    "EpisodeSummaryResponse",
    "EpisodeUpdateRequest",
    "QuizCreateRequest",
    "QuizResponse",
    "QuizUpdateRequest",
    "SeasonCreateRequest",
    "SeasonResponse",
    "SeriesCreateRequest",
    "SeriesResponse",
]
