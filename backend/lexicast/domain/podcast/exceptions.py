"""Podcast domain exceptions."""

from lexicast.domain.common.exceptions import (
    BusinessRuleViolationError,
    ConflictError,
    EntityNotFoundError,
)


class PodcastSeriesNotFoundError(EntityNotFoundError):
    def __init__(self, series_id: int) -> None:
        super().__init__("PodcastSeries", series_id)


class PodcastSeasonNotFoundError(EntityNotFoundError):
    def __init__(self, season_id: int) -> None:
        super().__init__("PodcastSeason", season_id)


class EpisodeNotFoundError(EntityNotFoundError):
    def __init__(self, episode_id: int) -> None:
        super().__init__("PodcastEpisode", episode_id)


class InvalidStatusTransitionError(BusinessRuleViolationError):
    """Raised when an episode's processing status would skip or reverse a step."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            "processing_status_transition",
            f"Cannot move episode from {current} to {target}",
        )
        self.current = current
        self.target = target


class EpisodeBusyError(ConflictError):
    """Raised when audio is uploaded while a previous upload is still being processed."""

    def __init__(self, episode_id: int, status: str) -> None:
        super().__init__(
            f"Episode {episode_id} is {status}; wait for processing to finish",
            {"episode_id": episode_id, "status": status},
        )
        self.episode_id = episode_id
        self.status = status


class DuplicateSeasonError(ConflictError):
    def __init__(self, series_id: int, season_number: int) -> None:
        super().__init__(
            f"Season {season_number} already exists for series {series_id}",
            {"series_id": series_id, "season_number": season_number},
        )


class PodcastQuizNotFoundError(EntityNotFoundError):
    def __init__(self, quiz_id: int) -> None:
        super().__init__("PodcastQuiz", quiz_id)
