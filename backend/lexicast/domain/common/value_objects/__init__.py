"""Common value objects shared across all domain modules."""

from .ids import (
    AnonymousUserId,
    EpisodeId,
    FlashCardGroupId,
    FlashCardId,
    PodcastQuizId,
    PodcastSeasonId,
    PodcastSeriesId,
    RefreshTokenId,
    UserId,
)

__all__ = [
    "AnonymousUserId",
    "EpisodeId",
    "FlashCardGroupId",
    "FlashCardId",
    "PodcastQuizId",
    "PodcastSeasonId",
    "PodcastSeriesId",
    "RefreshTokenId",
    "UserId",
]
