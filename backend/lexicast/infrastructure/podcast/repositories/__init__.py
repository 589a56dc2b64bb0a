"""Podcast repositories."""

from lexicast.infrastructure.podcast.repositories.podcast_episode_repository import (
    PodcastEpisodeRepository,
)
from lexicast.infrastructure.podcast.repositories.podcast_quiz_repository import (
    PodcastQuizRepository,
)
from lexicast.infrastructure.podcast.repositories.podcast_series_repository import (
    PodcastSeasonRepository,
    PodcastSeriesRepository,
)

__all__ = [
    "PodcastEpisodeRepository",
    "PodcastQuizRepository",
    "PodcastSeasonRepository",
    "PodcastSeriesRepository",
]
