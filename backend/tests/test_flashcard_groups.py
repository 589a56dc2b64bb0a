"""Tests for flashcard group API endpoints."""

from fastapi import status
from fastapi.testclient import TestClient

from lexicast.domain.identity.entities.anonymous_user import AnonymousUser
from lexicast.domain.identity.entities.user import User


def _create_group(client: TestClient, headers: dict[str, str], name: str = "Food") -> dict:
    response = client.post(
        "/api/FlashCardGroup",
        json={"name": name, "description": "Words from the market episode"},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["data"]


def _add_card(
    client: TestClient, headers: dict[str, str], group_id: int, source: str, target: str
) -> dict:
    response = client.post(
        f"/api/FlashCardGroup/{group_id}/cards",
        json={"source_word": source, "target_word": target},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["data"]


class TestCreateGroup:
    """Test suite for POST /FlashCardGroup."""

    def test_create_group_success(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        data = _create_group(client, auth_headers)

        assert data["name"] == "Food"
        assert data["source_language"] == "EN"
        assert data["target_language"] == "TR"
        assert data["card_count"] == 0

    def test_create_group_trims_name(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        data = _create_group(client, auth_headers, name="  Travel  ")

        assert data["name"] == "Travel"

    def test_duplicate_name_conflicts(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        _create_group(client, auth_headers)

        response = client.post("/api/FlashCardGroup", json={"name": "Food"}, headers=auth_headers)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["success"] is False

    def test_same_name_for_different_owners(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        anonymous_user: AnonymousUser,
        anonymous_headers: dict[str, str],
    ) -> None:
        _create_group(client, auth_headers)

        data = _create_group(client, anonymous_headers)

        assert data["name"] == "Food"

    def test_blank_name_rejected(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.post("/api/FlashCardGroup", json={"name": "   "}, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_authentication(self, client: TestClient) -> None:
        response = client.post("/api/FlashCardGroup", json={"name": "Food"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestReadGroups:
    """Test suite for GET /FlashCardGroup and GET /FlashCardGroup/{id}."""

    def test_list_groups_with_card_counts(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        food = _create_group(client, auth_headers, name="Food")
        _create_group(client, auth_headers, name="Animals")
        _add_card(client, auth_headers, food["id"], "bread", "ekmek")
        _add_card(client, auth_headers, food["id"], "water", "su")

        response = client.get("/api/FlashCardGroup", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        groups = response.json()["data"]
        assert [g["name"] for g in groups] == ["Animals", "Food"]
        assert groups[1]["card_count"] == 2
        assert groups[0]["card_count"] == 0

    def test_get_group(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        group = _create_group(client, auth_headers)
        _add_card(client, auth_headers, group["id"], "apple", "elma")

        response = client.get(f"/api/FlashCardGroup/{group['id']}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["card_count"] == 1

    def test_other_owner_cannot_see_group(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        admin_user: User,
        admin_headers: dict[str, str],
    ) -> None:
        """Groups of another owner look the same as missing ones."""
        group = _create_group(client, auth_headers)

        response = client.get(f"/api/FlashCardGroup/{group['id']}", headers=admin_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        listed = client.get("/api/FlashCardGroup", headers=admin_headers).json()["data"]
        assert listed == []

    def test_missing_group(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.get("/api/FlashCardGroup/99999", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestUpdateGroup:
    """Test suite for PUT /FlashCardGroup/{id}."""

    def test_rename_and_update_details(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        group = _create_group(client, auth_headers)

        response = client.put(
            f"/api/FlashCardGroup/{group['id']}",
            json={"name": "Groceries", "target_language": "DE"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["name"] == "Groceries"
        assert data["target_language"] == "DE"
        assert data["source_language"] == "EN"
        assert data["description"] == "Words from the market episode"

    def test_rename_to_existing_name_conflicts(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        _create_group(client, auth_headers, name="Food")
        other = _create_group(client, auth_headers, name="Animals")

        response = client.put(
            f"/api/FlashCardGroup/{other['id']}", json={"name": "Food"}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_keep_own_name(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        group = _create_group(client, auth_headers)

        response = client.put(
            f"/api/FlashCardGroup/{group['id']}",
            json={"name": "Food", "description": "Updated"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["description"] == "Updated"


class TestDeleteGroup:
    """Test suite for DELETE /FlashCardGroup/{id}."""

    def test_delete_group_with_cards(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        group = _create_group(client, auth_headers)
        _add_card(client, auth_headers, group["id"], "cheese", "peynir")

        response = client.delete(f"/api/FlashCardGroup/{group['id']}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["success"] is True
        missing = client.get(f"/api/FlashCardGroup/{group['id']}", headers=auth_headers)
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_foreign_group(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        anonymous_user: AnonymousUser,
        anonymous_headers: dict[str, str],
    ) -> None:
        group = _create_group(client, auth_headers)

        response = client.delete(
            f"/api/FlashCardGroup/{group['id']}", headers=anonymous_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        still_there = client.get(f"/api/FlashCardGroup/{group['id']}", headers=auth_headers)
        assert still_there.status_code == status.HTTP_200_OK


class TestCards:
    """Test suite for the /FlashCardGroup/{id}/cards endpoints."""

    def test_list_cards_in_creation_order(
        self,
        client: TestClient,
        anonymous_user: AnonymousUser,
        anonymous_headers: dict[str, str],
    ) -> None:
        group = _create_group(client, anonymous_headers)
        _add_card(client, anonymous_headers, group["id"], "tea", "çay")
        _add_card(client, anonymous_headers, group["id"], "coffee", "kahve")

        response = client.get(
            f"/api/FlashCardGroup/{group['id']}/cards", headers=anonymous_headers
        )

        assert response.status_code == status.HTTP_200_OK
        cards = response.json()["data"]
        assert [c["source_word"] for c in cards] == ["tea", "coffee"]
        assert cards[0]["target_word"] == "çay"
        assert cards[0]["group_id"] == group["id"]

    def test_add_card_to_missing_group(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        response = client.post(
            "/api/FlashCardGroup/424242/cards",
            json={"source_word": "a", "target_word": "b"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_add_card_with_empty_word(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        group = _create_group(client, auth_headers)

        response = client.post(
            f"/api/FlashCardGroup/{group['id']}/cards",
            json={"source_word": "", "target_word": "b"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

    def test_delete_card(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        group = _create_group(client, auth_headers)
        card = _add_card(client, auth_headers, group["id"], "salt", "tuz")

        response = client.delete(
            f"/api/FlashCardGroup/{group['id']}/cards/{card['id']}", headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        remaining = client.get(
            f"/api/FlashCardGroup/{group['id']}/cards", headers=auth_headers
        ).json()["data"]
        assert remaining == []

    def test_delete_missing_card(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        group = _create_group(client, auth_headers)

        response = client.delete(
            f"/api/FlashCardGroup/{group['id']}/cards/777", headers=auth_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
