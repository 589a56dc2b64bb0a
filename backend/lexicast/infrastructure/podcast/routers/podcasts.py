"""Public podcast catalog endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette import status

from lexicast.application.podcast.use_cases.podcast_catalog_use_case import (
    MAX_LATEST_EPISODES,
    PodcastCatalogUseCase,
)
from lexicast.application.podcast.use_cases.podcast_quiz_use_case import PodcastQuizUseCase
from lexicast.core import container
from lexicast.domain.common.exceptions import DomainError
from lexicast.domain.podcast.exceptions import EpisodeNotFoundError
from lexicast.exceptions import LexicastError
from lexicast.infrastructure.common.di import inject_use_case
from lexicast.infrastructure.common.schemas import ApiResponse
from lexicast.infrastructure.podcast.schemas import (
    EpisodeResponse,
    EpisodeSummaryResponse,
    QuizResponse,
    SeasonResponse,
    SeriesResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/Podcast", tags=["podcasts"])

CatalogUseCase = Depends(inject_use_case(container.podcast_catalog_use_case))
QuizUseCase = Depends(inject_use_case(container.podcast_quiz_use_case))


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Failed to {action}: {e!s}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please try again later.",
    )


@router.get("/series")
def list_series(
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[list[SeriesResponse]]:
    try:
        series = use_case.list_series()
        return ApiResponse.ok([SeriesResponse.from_entity(s) for s in series])
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("list podcast series", e) from e


@router.get("/series/{series_id}")
def get_series(
    series_id: int,
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[SeriesResponse]:
    try:
        return ApiResponse.ok(SeriesResponse.from_entity(use_case.get_series(series_id)))
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"get podcast series {series_id}", e) from e


@router.get("/series/{series_id}/seasons")
def list_seasons(
    series_id: int,
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[list[SeasonResponse]]:
    try:
        seasons = use_case.list_seasons(series_id)
        return ApiResponse.ok([SeasonResponse.from_entity(s) for s in seasons])
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"list seasons of series {series_id}", e) from e


@router.get("/series/{series_id}/episodes")
def list_series_episodes(
    series_id: int,
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[list[EpisodeSummaryResponse]]:
    """List the active episodes of a series, season by season."""
    try:
        series = use_case.get_series(series_id)
        episodes = use_case.list_episodes(series_id=series.id.value)
        return ApiResponse.ok([EpisodeSummaryResponse.from_entity(e) for e in episodes])
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"list episodes of series {series_id}", e) from e


@router.get("/seasons/{season_id}")
def get_season(
    season_id: int,
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[SeasonResponse]:
    try:
        return ApiResponse.ok(SeasonResponse.from_entity(use_case.get_season(season_id)))
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"get podcast season {season_id}", e) from e


@router.get("/seasons/{season_id}/episodes")
def list_season_episodes(
    season_id: int,
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[list[EpisodeSummaryResponse]]:
    """List the active episodes of a season in episode order."""
    try:
        season = use_case.get_season(season_id)
        episodes = use_case.list_episodes(season_id=season.id.value)
        return ApiResponse.ok([EpisodeSummaryResponse.from_entity(e) for e in episodes])
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"list episodes of season {season_id}", e) from e


@router.get("/episodes/latest")
def latest_episodes(
    limit: int = Query(10, ge=1, le=MAX_LATEST_EPISODES),
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[list[EpisodeSummaryResponse]]:
    """Most recently released episodes that finished processing."""
    try:
        episodes = use_case.latest_episodes(limit)
        return ApiResponse.ok([EpisodeSummaryResponse.from_entity(e) for e in episodes])
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("list latest episodes", e) from e


@router.get("/episodes/{episode_id}")
def get_episode(
    episode_id: int,
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[EpisodeResponse]:
    try:
        episode = use_case.get_episode(episode_id)
        if not episode.is_active:
            raise EpisodeNotFoundError(episode_id)
        return ApiResponse.ok(EpisodeResponse.from_entity(episode))
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"get episode {episode_id}", e) from e


@router.get("/episodes/{episode_id}/quizzes")
def list_episode_quizzes(
    episode_id: int,
    use_case: PodcastQuizUseCase = QuizUseCase,
) -> ApiResponse[list[QuizResponse]]:
    """List the comprehension quizzes of an active episode."""
    try:
        quizzes = use_case.list_for_episode(episode_id)
        return ApiResponse.ok([QuizResponse.from_entity(q) for q in quizzes])
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"list quizzes of episode {episode_id}", e) from e


@router.get("/quizzes/{quiz_id}")
def get_quiz(
    quiz_id: int,
    use_case: PodcastQuizUseCase = QuizUseCase,
) -> ApiResponse[QuizResponse]:
    try:
        return ApiResponse.ok(QuizResponse.from_entity(use_case.get_quiz(quiz_id)))
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"get quiz {quiz_id}", e) from e
