from dataclasses import dataclass

from ..entity import EntityId


@dataclass(frozen=True)
class UserId(EntityId):
    """Strongly-typed user identifier."""


@dataclass(frozen=True)
class AnonymousUserId(EntityId):
    """Strongly-typed anonymous user identifier."""


@dataclass(frozen=True)
class RefreshTokenId(EntityId):
    """Strongly-typed refresh token record identifier."""


@dataclass(frozen=True)
class PodcastSeriesId(EntityId):
    """Strongly-typed podcast series identifier."""


@dataclass(frozen=True)
class PodcastSeasonId(EntityId):
    """Strongly-typed podcast season identifier."""


@dataclass(frozen=True)
class EpisodeId(EntityId):
    """Strongly-typed podcast episode identifier."""


@dataclass(frozen=True)
class FlashCardGroupId(EntityId):
    """Strongly-typed flashcard group identifier."""


@dataclass(frozen=True)
class FlashCardId(EntityId):
    """Strongly-typed flashcard identifier."""


@dataclass(frozen=True)
class PodcastQuizId(EntityId):
    """Strongly-typed podcast quiz identifier."""
