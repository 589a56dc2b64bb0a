"""Comprehension quiz attached to a podcast episode."""

from dataclasses import dataclass, field
from datetime import datetime

from lexicast.domain.common.entity import Entity
from lexicast.domain.common.exceptions import ValidationError
from lexicast.domain.common.value_objects.ids import EpisodeId, PodcastQuizId

MIN_ANSWERS = 2
MAX_ANSWERS = 6


@dataclass
class PodcastQuiz(Entity[PodcastQuizId]):
    """
    Multiple-choice question about an episode.

    Business Rules:
    - The question cannot be empty
    - Between MIN_ANSWERS and MAX_ANSWERS non-empty answers
    - correct_answer_index points at one of the answers
    """

    id: PodcastQuizId
    episode_id: EpisodeId
    question: str
    answers: list[str] = field(default_factory=list)
    correct_answer_index: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.question, self.answers = _clean(self.question, self.answers, self.correct_answer_index)

    def revise(
        self,
        question: str | None = None,
        answers: list[str] | None = None,
        correct_answer_index: int | None = None,
    ) -> None:
        """
        Replace any of the question, answers or correct index.

        Omitted values keep their current value. The result is validated as a
        whole, so changing the answers may require a new index too.

        Raises:
            ValidationError: If the revised quiz breaks a rule
        """
        new_index = (
            self.correct_answer_index if correct_answer_index is None else correct_answer_index
        )
        self.question, self.answers = _clean(
            self.question if question is None else question,
            self.answers if answers is None else answers,
            new_index,
        )
        self.correct_answer_index = new_index

    @classmethod
    def create(
        cls,
        episode_id: EpisodeId,
        question: str,
        answers: list[str],
        correct_answer_index: int,
    ) -> "PodcastQuiz":
        return cls(
            id=PodcastQuizId.generate(),
            episode_id=episode_id,
            question=question,
            answers=list(answers),
            correct_answer_index=correct_answer_index,
        )


def _clean(question: str, answers: list[str], correct_answer_index: int) -> tuple[str, list[str]]:
    if not question or not question.strip():
        raise ValidationError("Question cannot be empty", field="question")

    cleaned = [answer.strip() for answer in answers]
    if not MIN_ANSWERS <= len(cleaned) <= MAX_ANSWERS:
        raise ValidationError(
            f"A quiz needs between {MIN_ANSWERS} and {MAX_ANSWERS} answers",
            field="answers",
            value=len(cleaned),
        )
    if any(not answer for answer in cleaned):
        raise ValidationError("Answers cannot be empty", field="answers")
    if not 0 <= correct_answer_index < len(cleaned):
        raise ValidationError(
            "Correct answer index is out of range",
            field="correct_answer_index",
            value=correct_answer_index,
        )
    return question.strip(), cleaned
