"""Podcast domain layer."""

from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.domain.podcast.entities.podcast_series import PodcastSeason, PodcastSeries
from lexicast.domain.podcast.value_objects.audio_quality import (
    DEFAULT_QUALITY_LEVELS,
    AudioQuality,
    QualityLevel,
)
from lexicast.domain.podcast.value_objects.processing_status import ProcessingStatus

__all__ = [
    "DEFAULT_QUALITY_LEVELS",
    "AudioQuality",
    "PodcastEpisode",
    "PodcastSeason",
    "PodcastSeries",
    "ProcessingStatus",
    "QualityLevel",
]
