"""Tests for flashcard review scheduling through FlashCardGroupUseCase."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.orm import Session

from lexicast.application.learning.use_cases.flashcard_group_use_case import (
    FlashCardGroupUseCase,
)
from lexicast.domain.identity.value_objects.principal import Principal
from lexicast.domain.learning.exceptions import FlashCardNotFoundError
from lexicast.infrastructure.learning.repositories import (
    FlashCardGroupRepository,
    FlashCardRepository,
)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 9, 7, 0, tzinfo=UTC))


@pytest.fixture
def use_case(db_session: Session, clock: FakeClock) -> FlashCardGroupUseCase:
    return FlashCardGroupUseCase(
        FlashCardGroupRepository(db_session), FlashCardRepository(db_session), clock=clock
    )


@pytest.fixture
def learner() -> Principal:
    return Principal(user_id=7)


def _deck(use_case: FlashCardGroupUseCase, principal: Principal, *words: str) -> list[int]:
    group = use_case.create_group(principal, "Kitchen")
    return [
        use_case.add_card(principal, group.id.value, word, word.upper()).id.value
        for word in words
    ]


class TestDueCards:
    def test_new_cards_are_due(
        self, use_case: FlashCardGroupUseCase, learner: Principal, clock: FakeClock
    ) -> None:
        card_ids = _deck(use_case, learner, "kaşık", "çatal")

        due = use_case.list_due_cards(learner)

        assert [c.id.value for c in due] == card_ids
        assert due[0].next_review_date == clock.now

    def test_reviewed_card_returns_when_interval_passes(
        self, use_case: FlashCardGroupUseCase, learner: Principal, clock: FakeClock
    ) -> None:
        spoon, fork = _deck(use_case, learner, "kaşık", "çatal")

        use_case.review_card(learner, spoon, correct=True)

        assert [c.id.value for c in use_case.list_due_cards(learner)] == [fork]
        clock.now += timedelta(days=1)
        assert [c.id.value for c in use_case.list_due_cards(learner)] == [spoon, fork]

    def test_most_overdue_first_and_limited(
        self, use_case: FlashCardGroupUseCase, learner: Principal, clock: FakeClock
    ) -> None:
        first, second, third = _deck(use_case, learner, "tabak", "bardak", "tencere")
        use_case.review_card(learner, first, correct=True)
        use_case.review_card(learner, second, correct=True)
        use_case.review_card(learner, second, correct=True)
        clock.now += timedelta(days=5)

        due = use_case.list_due_cards(learner, limit=2)

        assert [c.id.value for c in due] == [third, first]

    def test_completed_cards_never_due(
        self, use_case: FlashCardGroupUseCase, learner: Principal, clock: FakeClock
    ) -> None:
        (card_id,) = _deck(use_case, learner, "bıçak")
        for _ in range(6):
            card = use_case.review_card(learner, card_id, correct=True)
            clock.now = card.next_review_date

        assert card.is_completed
        clock.now += timedelta(days=1000)
        assert use_case.list_due_cards(learner) == []

    def test_other_owners_cards_hidden(
        self, use_case: FlashCardGroupUseCase, learner: Principal
    ) -> None:
        _deck(use_case, learner, "kaşık")

        assert use_case.list_due_cards(Principal(device_id="tablet-1")) == []


class TestReviewCard:
    def test_review_is_persisted(
        self, use_case: FlashCardGroupUseCase, learner: Principal, clock: FakeClock
    ) -> None:
        (card_id,) = _deck(use_case, learner, "kaşık")

        use_case.review_card(learner, card_id, correct=True)
        stored = use_case.get_card(learner, card_id)

        assert stored.current_step == 1
        assert stored.next_review_date == clock.now + timedelta(days=1)
        assert stored.first_learning_date == clock.now
        assert stored.review_dates == [clock.now]

    def test_unknown_card(self, use_case: FlashCardGroupUseCase, learner: Principal) -> None:
        with pytest.raises(FlashCardNotFoundError):
            use_case.review_card(learner, 404, correct=True)

    def test_card_of_another_owner(
        self, use_case: FlashCardGroupUseCase, learner: Principal
    ) -> None:
        (card_id,) = _deck(use_case, learner, "kaşık")

        with pytest.raises(FlashCardNotFoundError):
            use_case.review_card(Principal(user_id=8), card_id, correct=False)
