"""Tests for episode quiz endpoints."""

from dataclasses import replace

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from lexicast.domain.podcast.entities.podcast_episode import PodcastEpisode
from lexicast.infrastructure.podcast.repositories import (
    PodcastEpisodeRepository,
    PodcastQuizRepository,
)

QUIZ = {
    "question": "What did Ayşe buy?",
    "answers": ["Tomatoes", "Bread", "Cheese"],
    "correct_answer_index": 1,
}


def _create_quiz(
    client: TestClient, headers: dict[str, str], episode_id: int, **overrides: object
):
    return client.post(
        "/api/admin/Podcast/quizzes",
        json={**QUIZ, "episode_id": episode_id, **overrides},
        headers=headers,
    )


class TestAdminQuizzes:
    """Test suite for /admin/Podcast/quizzes."""

    def test_create_quiz(
        self, client: TestClient, admin_headers: dict[str, str], test_episode: PodcastEpisode
    ) -> None:
        response = _create_quiz(client, admin_headers, test_episode.id.value)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["episode_id"] == test_episode.id.value
        assert data["answers"] == ["Tomatoes", "Bread", "Cheese"]
        assert data["correct_answer_index"] == 1

    def test_create_for_missing_episode(
        self, client: TestClient, admin_headers: dict[str, str]
    ) -> None:
        response = _create_quiz(client, admin_headers, 99999)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_index_outside_answers_rejected(
        self, client: TestClient, admin_headers: dict[str, str], test_episode: PodcastEpisode
    ) -> None:
        response = _create_quiz(
            client, admin_headers, test_episode.id.value, correct_answer_index=3
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["success"] is False

    def test_update_quiz(
        self, client: TestClient, admin_headers: dict[str, str], test_episode: PodcastEpisode
    ) -> None:
        quiz = _create_quiz(client, admin_headers, test_episode.id.value).json()["data"]

        response = client.put(
            f"/api/admin/Podcast/quizzes/{quiz['id']}",
            json={"answers": ["Bread", "Olives"], "correct_answer_index": 0},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["question"] == QUIZ["question"]
        assert data["answers"] == ["Bread", "Olives"]
        assert data["correct_answer_index"] == 0

    def test_delete_quiz(
        self, client: TestClient, admin_headers: dict[str, str], test_episode: PodcastEpisode
    ) -> None:
        quiz = _create_quiz(client, admin_headers, test_episode.id.value).json()["data"]
        url = f"/api/admin/Podcast/quizzes/{quiz['id']}"

        assert client.delete(url, headers=admin_headers).status_code == status.HTTP_200_OK
        assert client.delete(url, headers=admin_headers).status_code == status.HTTP_404_NOT_FOUND

    def test_list_filtered_by_episode(
        self, client: TestClient, admin_headers: dict[str, str], test_episode: PodcastEpisode
    ) -> None:
        _create_quiz(client, admin_headers, test_episode.id.value)
        _create_quiz(client, admin_headers, test_episode.id.value, question="Who sold it?")

        response = client.get(
            "/api/admin/Podcast/quizzes",
            params={"episode_id": test_episode.id.value},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        questions = [q["question"] for q in response.json()["data"]]
        assert questions == [QUIZ["question"], "Who sold it?"]

    def test_deleting_episode_removes_its_quizzes(
        self,
        client: TestClient,
        db_session: Session,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
    ) -> None:
        _create_quiz(client, admin_headers, test_episode.id.value)

        response = client.delete(
            f"/api/admin/Podcast/episodes/{test_episode.id.value}", headers=admin_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert PodcastQuizRepository(db_session).find_all() == []

    def test_non_admin_cannot_create(
        self, client: TestClient, auth_headers: dict[str, str], test_episode: PodcastEpisode
    ) -> None:
        response = _create_quiz(client, auth_headers, test_episode.id.value)

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestPublicQuizzes:
    """Test suite for quiz reads under /Podcast."""

    def test_list_episode_quizzes(
        self, client: TestClient, admin_headers: dict[str, str], test_episode: PodcastEpisode
    ) -> None:
        quiz = _create_quiz(client, admin_headers, test_episode.id.value).json()["data"]

        listed = client.get(f"/api/Podcast/episodes/{test_episode.id.value}/quizzes")
        single = client.get(f"/api/Podcast/quizzes/{quiz['id']}")

        assert listed.status_code == status.HTTP_200_OK
        assert [q["id"] for q in listed.json()["data"]] == [quiz["id"]]
        assert single.status_code == status.HTTP_200_OK
        assert single.json()["data"]["question"] == QUIZ["question"]

    def test_inactive_episode_quizzes_hidden(
        self,
        client: TestClient,
        db_session: Session,
        admin_headers: dict[str, str],
        test_episode: PodcastEpisode,
    ) -> None:
        quiz = _create_quiz(client, admin_headers, test_episode.id.value).json()["data"]
        PodcastEpisodeRepository(db_session).save(replace(test_episode, is_active=False))

        listed = client.get(f"/api/Podcast/episodes/{test_episode.id.value}/quizzes")
        single = client.get(f"/api/Podcast/quizzes/{quiz['id']}")

        assert listed.status_code == status.HTTP_404_NOT_FOUND
        assert single.status_code == status.HTTP_404_NOT_FOUND

    def test_missing_quiz(self, client: TestClient) -> None:
        response = client.get("/api/Podcast/quizzes/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
