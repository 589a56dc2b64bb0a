from typing import Protocol

from lexicast.domain.common.value_objects.ids import EpisodeId, PodcastQuizId
from lexicast.domain.podcast.entities.podcast_quiz import PodcastQuiz


class PodcastQuizRepositoryProtocol(Protocol):
    def find_by_id(self, quiz_id: PodcastQuizId) -> PodcastQuiz | None: ...

    def find_by_episode(self, episode_id: EpisodeId) -> list[PodcastQuiz]: ...

    def find_all(self) -> list[PodcastQuiz]: ...

    def save(self, quiz: PodcastQuiz) -> PodcastQuiz: ...

    def delete(self, quiz_id: PodcastQuizId) -> bool: ...
