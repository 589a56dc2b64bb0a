"""Use case for comprehension quizzes attached to episodes."""

import structlog

from lexicast.application.podcast.protocols.episode_repository import (
    PodcastEpisodeRepositoryProtocol,
)
from lexicast.application.podcast.protocols.quiz_repository import PodcastQuizRepositoryProtocol
from lexicast.domain.common.value_objects.ids import EpisodeId, PodcastQuizId
from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.domain.podcast.entities.podcast_quiz import PodcastQuiz
from lexicast.domain.podcast.exceptions import EpisodeNotFoundError, PodcastQuizNotFoundError

logger = structlog.get_logger(__name__)


class PodcastQuizUseCase:
    """
    Quiz reads for listeners and quiz management for admins.

    Listeners only see quizzes of active episodes; admins see all of them.
    """

    def __init__(
        self,
        episode_repository: PodcastEpisodeRepositoryProtocol,
        quiz_repository: PodcastQuizRepositoryProtocol,
    ) -> None:
        self.episode_repository = episode_repository
        self.quiz_repository = quiz_repository

    def _get_episode(self, episode_id: int, active_only: bool) -> PodcastEpisode:
        episode = self.episode_repository.find_by_id(EpisodeId(episode_id))
        if episode is None or (active_only and not episode.is_active):
            raise EpisodeNotFoundError(episode_id)
        return episode

    def list_for_episode(self, episode_id: int, active_only: bool = True) -> list[PodcastQuiz]:
        """
        Quizzes of one episode, in creation order.

        Raises:
            EpisodeNotFoundError: If the episode does not exist, or is inactive
                and active_only is set
        """
        episode = self._get_episode(episode_id, active_only)
        return self.quiz_repository.find_by_episode(episode.id)

    def get_quiz(self, quiz_id: int, active_only: bool = True) -> PodcastQuiz:
        quiz = self.quiz_repository.find_by_id(PodcastQuizId(quiz_id))
        if quiz is None:
            raise PodcastQuizNotFoundError(quiz_id)
        if active_only:
            episode = self.episode_repository.find_by_id(quiz.episode_id)
            if episode is None or not episode.is_active:
                raise PodcastQuizNotFoundError(quiz_id)
        return quiz

    def list_all(self, episode_id: int | None = None) -> list[PodcastQuiz]:
        if episode_id is not None:
            return self.list_for_episode(episode_id, active_only=False)
        return self.quiz_repository.find_all()

    def create_quiz(
        self,
        episode_id: int,
        question: str,
        answers: list[str],
        correct_answer_index: int,
    ) -> PodcastQuiz:
        """
        Attach a quiz to an episode.

        Raises:
            EpisodeNotFoundError: If the episode does not exist
            ValidationError: If the question, answers or index are invalid
        """
        episode = self._get_episode(episode_id, active_only=False)
        quiz = PodcastQuiz.create(episode.id, question, answers, correct_answer_index)
        quiz = self.quiz_repository.save(quiz)
        logger.info("podcast_quiz_created", quiz_id=quiz.id.value, episode_id=episode_id)
        return quiz

    def update_quiz(
        self,
        quiz_id: int,
        question: str | None = None,
        answers: list[str] | None = None,
        correct_answer_index: int | None = None,
    ) -> PodcastQuiz:
        """
        Revise a quiz; omitted values are kept.

        Raises:
            PodcastQuizNotFoundError: If the quiz does not exist
            ValidationError: If the revised quiz is invalid
        """
        quiz = self.get_quiz(quiz_id, active_only=False)
        quiz.revise(question, answers, correct_answer_index)
        quiz = self.quiz_repository.save(quiz)
        logger.info("podcast_quiz_updated", quiz_id=quiz_id)
        return quiz

    def delete_quiz(self, quiz_id: int) -> None:
        if not self.quiz_repository.delete(PodcastQuizId(quiz_id)):
            raise PodcastQuizNotFoundError(quiz_id)
        logger.info("podcast_quiz_deleted", quiz_id=quiz_id)
