"""Use case for podcast series, season and episode metadata."""

from datetime import datetime

import structlog

from lexicast.application.podcast.protocols.episode_repository import (
    PodcastEpisodeRepositoryProtocol,
)
from lexicast.application.podcast.protocols.series_repository import (
    PodcastSeasonRepositoryProtocol,
    PodcastSeriesRepositoryProtocol,
)
from lexicast.domain.common.exceptions import ValidationError
from lexicast.domain.common.value_objects.ids import EpisodeId, PodcastSeasonId, PodcastSeriesId
from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.domain.podcast.entities.podcast_series import PodcastSeason, PodcastSeries
from lexicast.domain.podcast.exceptions import (
    DuplicateSeasonError,
    EpisodeNotFoundError,
    PodcastSeasonNotFoundError,
    PodcastSeriesNotFoundError,
)

logger = structlog.get_logger(__name__)

MAX_LATEST_EPISODES = 50


class PodcastCatalogUseCase:
    """Podcast metadata reads and admin writes."""

    def __init__(
        self,
        series_repository: PodcastSeriesRepositoryProtocol,
        season_repository: PodcastSeasonRepositoryProtocol,
        episode_repository: PodcastEpisodeRepositoryProtocol,
    ) -> None:
        self.series_repository = series_repository
        self.season_repository = season_repository
        self.episode_repository = episode_repository

    def create_series(
        self,
        title: str,
        description: str | None = None,
        source_language: str = "EN",
        target_language: str = "TR",
        level: str | None = None,
    ) -> PodcastSeries:
        series = PodcastSeries.create(title, description, source_language, target_language, level)
        series = self.series_repository.save(series)
        logger.info("podcast_series_created", series_id=series.id.value)
        return series

    def list_series(self) -> list[PodcastSeries]:
        return self.series_repository.find_all()

    def get_series(self, series_id: int) -> PodcastSeries:
        series = self.series_repository.find_by_id(PodcastSeriesId(series_id))
        if series is None:
            raise PodcastSeriesNotFoundError(series_id)
        return series

    def create_season(
        self, series_id: int, season_number: int, title: str, description: str | None = None
    ) -> PodcastSeason:
        """
        Add a season to a series.

        Raises:
            PodcastSeriesNotFoundError: If the series does not exist
            DuplicateSeasonError: If the season number is taken in that series
        """
        series = self.get_series(series_id)
        existing = self.season_repository.find_by_series(series.id)
        if any(s.season_number == season_number for s in existing):
            raise DuplicateSeasonError(series_id, season_number)

        season = PodcastSeason.create(series.id, season_number, title, description)
        season = self.season_repository.save(season)
        logger.info("podcast_season_created", season_id=season.id.value, series_id=series_id)
        return season

    def list_seasons(self, series_id: int) -> list[PodcastSeason]:
        series = self.get_series(series_id)
        return self.season_repository.find_by_series(series.id)

    def get_season(self, season_id: int) -> PodcastSeason:
        season = self.season_repository.find_by_id(PodcastSeasonId(season_id))
        if season is None:
            raise PodcastSeasonNotFoundError(season_id)
        return season

    def create_episode(
        self,
        series_id: int,
        season_id: int,
        episode_number: int,
        title: str,
        description: str | None = None,
        release_date: datetime | None = None,
    ) -> PodcastEpisode:
        """
        Create an episode awaiting its audio.

        Raises:
            PodcastSeasonNotFoundError: If the season does not exist
            ValidationError: If the season belongs to a different series
        """
        season = self.get_season(season_id)
        if season.series_id.value != series_id:
            raise ValidationError(
                "Season does not belong to the given series", field="season_id", value=season_id
            )

        episode = PodcastEpisode.create(
            series_id=season.series_id,
            season_id=season.id,
            episode_number=episode_number,
            title=title,
            description=description,
            release_date=release_date,
        )
        episode = self.episode_repository.save(episode)
        logger.info("podcast_episode_created", episode_id=episode.id.value, season_id=season_id)
        return episode

    def update_episode(
        self,
        episode_id: int,
        title: str | None = None,
        description: str | None = None,
        episode_number: int | None = None,
        release_date: datetime | None = None,
        is_active: bool | None = None,
    ) -> PodcastEpisode:
        """
        Edit an episode's metadata. Processing state and media are left alone.

        Raises:
            EpisodeNotFoundError: If the episode does not exist
            ValidationError: If the title or episode number is invalid
        """
        episode = self.get_episode(episode_id)
        episode.update_details(title, description, episode_number, release_date, is_active)
        episode = self.episode_repository.save(episode)
        logger.info("podcast_episode_updated", episode_id=episode_id)
        return episode

    def get_episode(self, episode_id: int) -> PodcastEpisode:
        episode = self.episode_repository.find_by_id(EpisodeId(episode_id))
        if episode is None:
            raise EpisodeNotFoundError(episode_id)
        return episode

    def list_episodes(
        self,
        series_id: int | None = None,
        season_id: int | None = None,
        active_only: bool = True,
    ) -> list[PodcastEpisode]:
        return self.episode_repository.find_all(
            series_id=PodcastSeriesId(series_id) if series_id is not None else None,
            season_id=PodcastSeasonId(season_id) if season_id is not None else None,
            active_only=active_only,
        )

    def latest_episodes(self, limit: int = 10) -> list[PodcastEpisode]:
        return self.episode_repository.find_latest(max(1, min(limit, MAX_LATEST_EPISODES)))

    def delete_episode(self, episode_id: int) -> None:
        """
        Delete an episode.

        Raises:
            EpisodeNotFoundError: If the episode does not exist
        """
        if not self.episode_repository.delete(EpisodeId(episode_id)):
            raise EpisodeNotFoundError(episode_id)
        logger.info("podcast_episode_deleted", episode_id=episode_id)
