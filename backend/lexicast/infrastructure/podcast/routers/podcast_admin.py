"""Admin endpoints for managing podcast content and media."""

import logging
import os
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from starlette import status

from lexicast.application.podcast.use_cases.episode_media_upload_use_case import (
    EpisodeMediaUploadUseCase,
)
from lexicast.application.podcast.use_cases.podcast_catalog_use_case import (
    PodcastCatalogUseCase,
)
from lexicast.application.podcast.use_cases.podcast_quiz_use_case import PodcastQuizUseCase
from lexicast.core import container
from lexicast.domain.common.exceptions import DomainError
from lexicast.exceptions import LexicastError
from lexicast.infrastructure.common.di import inject_use_case
from lexicast.infrastructure.common.schemas import ApiResponse
from lexicast.infrastructure.identity.dependencies import AdminPrincipal
from lexicast.infrastructure.podcast.schemas import (
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

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin/Podcast", tags=["podcast-admin"])

CatalogUseCase = Depends(inject_use_case(container.podcast_catalog_use_case))
UploadUseCase = Depends(inject_use_case(container.episode_media_upload_use_case))
QuizUseCase = Depends(inject_use_case(container.podcast_quiz_use_case))


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Failed to {action}: {e!s}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please try again later.",
    )


def _upload_size(file: UploadFile) -> int:
    """Size of a spooled upload, without reading its body."""
    if file.size is not None:
        return file.size
    position = file.file.tell()
    size = file.file.seek(0, os.SEEK_END)
    file.file.seek(position)
    return size


@router.post("/series", status_code=status.HTTP_201_CREATED)
def create_series(
    body: SeriesCreateRequest,
    admin: AdminPrincipal,
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[SeriesResponse]:
    try:
        series = use_case.create_series(
            title=body.title,
            description=body.description,
            source_language=body.source_language,
            target_language=body.target_language,
            level=body.level,
        )
        return ApiResponse.ok(SeriesResponse.from_entity(series), "Series created")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("create podcast series", e) from e


@router.post("/seasons", status_code=status.HTTP_201_CREATED)
def create_season(
    body: SeasonCreateRequest,
    admin: AdminPrincipal,
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[SeasonResponse]:
    try:
        season = use_case.create_season(
            body.series_id, body.season_number, body.title, body.description
        )
        return ApiResponse.ok(SeasonResponse.from_entity(season), "Season created")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("create podcast season", e) from e


@router.post("/episode", status_code=status.HTTP_201_CREATED)
def create_episode(
    body: EpisodeCreateRequest,
    admin: AdminPrincipal,
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[EpisodeResponse]:
    """Create an episode; its audio is uploaded separately."""
    try:
        episode = use_case.create_episode(
            series_id=body.series_id,
            season_id=body.season_id,
            episode_number=body.episode_number,
            title=body.title,
            description=body.description,
            release_date=body.release_date,
        )
        return ApiResponse.ok(EpisodeResponse.from_entity(episode), "Episode created")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("create podcast episode", e) from e


@router.get("/episodes")
def list_episodes(
    admin: AdminPrincipal,
    series_id: int | None = Query(None, gt=0),
    season_id: int | None = Query(None, gt=0),
    include_inactive: bool = False,
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[list[EpisodeSummaryResponse]]:
    """List episodes in every processing state."""
    try:
        episodes = use_case.list_episodes(
            series_id=series_id, season_id=season_id, active_only=not include_inactive
        )
        return ApiResponse.ok([EpisodeSummaryResponse.from_entity(e) for e in episodes])
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("list podcast episodes", e) from e


@router.put("/episodes/{episode_id}")
def update_episode(
    episode_id: int,
    body: EpisodeUpdateRequest,
    admin: AdminPrincipal,
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[EpisodeResponse]:
    try:
        episode = use_case.update_episode(
            episode_id,
            title=body.title,
            description=body.description,
            episode_number=body.episode_number,
            release_date=body.release_date,
            is_active=body.is_active,
        )
        return ApiResponse.ok(EpisodeResponse.from_entity(episode), "Episode updated")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"update episode {episode_id}", e) from e


@router.delete("/episodes/{episode_id}")
def delete_episode(
    episode_id: int,
    admin: AdminPrincipal,
    use_case: PodcastCatalogUseCase = CatalogUseCase,
) -> ApiResponse[None]:
    try:
        use_case.delete_episode(episode_id)
        return ApiResponse.ok(message="Episode deleted")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"delete episode {episode_id}", e) from e


@router.post("/episodes/{episode_id}/upload-audio", status_code=status.HTTP_202_ACCEPTED)
async def upload_audio(
    episode_id: int,
    file: Annotated[UploadFile, File(...)],
    admin: AdminPrincipal,
    use_case: EpisodeMediaUploadUseCase = UploadUseCase,
) -> ApiResponse[EpisodeResponse]:
    """
    Upload an episode's MP3 and queue it for transcoding.

    The response is returned once the job is queued; renditions appear on the
    episode when the worker finishes.

    Args:
        episode_id: ID of the episode
        file: MP3 file, at most 500 MB

    Raises:
        InvalidMediaFileError: If the file is not an acceptable MP3
        EpisodeBusyError: If a previous upload is still queued or processing
        QueueUnavailableError: If the processing queue is down
    """
    try:
        episode = await use_case.upload_audio(
            episode_id, file.filename, file.content_type, _upload_size(file), file.file
        )
        return ApiResponse.ok(EpisodeResponse.from_entity(episode), "Audio queued for processing")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"upload audio for episode {episode_id}", e) from e
    finally:
        await file.close()


@router.post("/episodes/{episode_id}/upload-thumbnail")
def upload_thumbnail(
    episode_id: int,
    file: Annotated[UploadFile, File(...)],
    admin: AdminPrincipal,
    use_case: EpisodeMediaUploadUseCase = UploadUseCase,
) -> ApiResponse[EpisodeResponse]:
    try:
        episode = use_case.upload_thumbnail(
            episode_id, file.filename, file.content_type, _upload_size(file), file.file
        )
        return ApiResponse.ok(EpisodeResponse.from_entity(episode), "Thumbnail uploaded")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"upload thumbnail for episode {episode_id}", e) from e


@router.get("/quizzes")
def list_quizzes(
    admin: AdminPrincipal,
    episode_id: int | None = Query(None, gt=0),
    use_case: PodcastQuizUseCase = QuizUseCase,
) -> ApiResponse[list[QuizResponse]]:
    """List quizzes of every episode, or of one episode including inactive ones."""
    try:
        quizzes = use_case.list_all(episode_id)
        return ApiResponse.ok([QuizResponse.from_entity(q) for q in quizzes])
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("list podcast quizzes", e) from e


@router.post("/quizzes", status_code=status.HTTP_201_CREATED)
def create_quiz(
    body: QuizCreateRequest,
    admin: AdminPrincipal,
    use_case: PodcastQuizUseCase = QuizUseCase,
) -> ApiResponse[QuizResponse]:
    try:
        quiz = use_case.create_quiz(
            episode_id=body.episode_id,
            question=body.question,
            answers=body.answers,
            correct_answer_index=body.correct_answer_index,
        )
        return ApiResponse.ok(QuizResponse.from_entity(quiz), "Quiz created")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error("create podcast quiz", e) from e


@router.put("/quizzes/{quiz_id}")
def update_quiz(
    quiz_id: int,
    body: QuizUpdateRequest,
    admin: AdminPrincipal,
    use_case: PodcastQuizUseCase = QuizUseCase,
) -> ApiResponse[QuizResponse]:
    try:
        quiz = use_case.update_quiz(
            quiz_id,
            question=body.question,
            answers=body.answers,
            correct_answer_index=body.correct_answer_index,
        )
        return ApiResponse.ok(QuizResponse.from_entity(quiz), "Quiz updated")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"update quiz {quiz_id}", e) from e


@router.delete("/quizzes/{quiz_id}")
def delete_quiz(
    quiz_id: int,
    admin: AdminPrincipal,
    use_case: PodcastQuizUseCase = QuizUseCase,
) -> ApiResponse[None]:
    try:
        use_case.delete_quiz(quiz_id)
        return ApiResponse.ok(message="Quiz deleted")
    except (LexicastError, DomainError):
        raise
    except Exception as e:
        raise _internal_error(f"delete quiz {quiz_id}", e) from e
