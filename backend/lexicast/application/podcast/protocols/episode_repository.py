from typing import Protocol

from lexicast.domain.common.value_objects.ids import EpisodeId, PodcastSeasonId, PodcastSeriesId
from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.domain.podcast.value_objects.processing_status import ProcessingStatus


class PodcastEpisodeRepositoryProtocol(Protocol):
    def find_by_id(self, episode_id: EpisodeId) -> PodcastEpisode | None: ...

    def find_all(
        self,
        series_id: PodcastSeriesId | None = None,
        season_id: PodcastSeasonId | None = None,
        active_only: bool = True,
    ) -> list[PodcastEpisode]: ...

    def find_latest(self, limit: int) -> list[PodcastEpisode]: ...

    def save(self, episode: PodcastEpisode) -> PodcastEpisode: ...

    def save_if_status(self, episode: PodcastEpisode, expected: ProcessingStatus) -> bool: ...

    def delete(self, episode_id: EpisodeId) -> bool: ...
