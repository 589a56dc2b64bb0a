from typing import Protocol

from lexicast.domain.common.value_objects.ids import PodcastSeasonId, PodcastSeriesId
from lexicast.domain.podcast.entities.podcast_series import PodcastSeason, PodcastSeries


class PodcastSeriesRepositoryProtocol(Protocol):
    def find_by_id(self, series_id: PodcastSeriesId) -> PodcastSeries | None: ...

    def find_all(self, active_only: bool = True) -> list[PodcastSeries]: ...

    def save(self, series: PodcastSeries) -> PodcastSeries: ...


class PodcastSeasonRepositoryProtocol(Protocol):
    def find_by_id(self, season_id: PodcastSeasonId) -> PodcastSeason | None: ...

    def find_by_series(self, series_id: PodcastSeriesId) -> list[PodcastSeason]: ...

    def save(self, season: PodcastSeason) -> PodcastSeason: ...
