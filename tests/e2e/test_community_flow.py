"""End-to-end tests for community and membership endpoints."""

import pytest
from fastapi.testclient import TestClient

from rolo.interface.api.app import create_app
from tests.di import build_test_container
from tests.helpers import auth_header, community_payload, new_user


@pytest.fixture
def client():
    """Test client backed by the mocked container."""
    with TestClient(create_app(build_test_container())) as test_client:
        yield test_client


def _create(client, owner, handle="testcorp", **overrides) -> dict:
    response = client.post(
        "/communities",
        json=community_payload(handle, **overrides),
        headers=auth_header(owner),
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCommunityEndpoints:
    def test_create_community_grants_owner(self, client):
        # Arrange
        owner = new_user()

        # Act
        body = _create(client, owner)

        # Assert
        assert body["community"]["handle"] == "testcorp"
        assert body["community"]["owner_id"] == str(owner)
        assert body["owner"]["role"] == "owner"
        assert body["owner"]["status"] == "approved"
        assert body["failed_invitees"] == []

    def test_handle_is_normalized_and_unique(self, client):
        _create(client, new_user(), handle="TestCorp")

        response = client.post(
            "/communities",
            json=community_payload("testcorp"),
            headers=auth_header(new_user()),
        )

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    def test_check_handle_availability(self, client):
        _create(client, new_user())

        taken = client.get("/communities/handles/testcorp/availability").json()
        free = client.get("/communities/handles/othercorp/availability").json()

        assert taken["available"] is False
        assert free["available"] is True

    def test_join_then_approve(self, client):
        # Arrange
        owner = new_user()
        joiner = new_user()
        community_id = _create(client, owner)["community"]["community_id"]

        # Act
        join = client.post(
            "/communities/join",
            json={"handle": "testcorp"},
            headers=auth_header(joiner),
        )
        before = client.get("/me/access", headers=auth_header(joiner)).json()
        review = client.post(
            f"/communities/{community_id}/collaborators/{joiner}/review",
            json={"approve": True, "role": "viewer"},
            headers=auth_header(owner),
        )
        after = client.get("/me/access", headers=auth_header(joiner)).json()

        # Assert
        assert join.status_code == 201
        assert join.json()["status"] == "pending"
        assert before["has_access"] is False
        assert review.status_code == 200
        assert review.json()["status"] == "approved"
        assert after["has_access"] is True
        assert after["memberships"][0]["handle"] == "testcorp"

    def test_join_twice_conflicts(self, client):
        _create(client, new_user())
        joiner = new_user()
        client.post(
            "/communities/join", json={"handle": "testcorp"}, headers=auth_header(joiner)
        )

        response = client.post(
            "/communities/join", json={"handle": "testcorp"}, headers=auth_header(joiner)
        )

        assert response.status_code == 409

    def test_join_unknown_community(self, client):
        response = client.post(
            "/communities/join",
            json={"handle": "nowhere"},
            headers=auth_header(new_user()),
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_update_and_delete(self, client):
        # Arrange
        owner = new_user()
        community_id = _create(client, owner)["community"]["community_id"]

        # Act
        update = client.patch(
            f"/communities/{community_id}",
            json={"name": "Test Corporation", "city": "Dublin"},
            headers=auth_header(owner),
        )
        delete = client.delete(
            f"/communities/{community_id}", headers=auth_header(owner)
        )
        access = client.get("/me/access", headers=auth_header(owner)).json()

        # Assert
        assert update.status_code == 200
        assert update.json()["name"] == "Test Corporation"
        assert update.json()["handle"] == "testcorp"
        assert delete.status_code == 204
        assert access["memberships"] == []


class TestCollaboratorEndpoints:
    def test_add_change_role_and_remove(self, client):
        # Arrange
        owner = new_user()
        member = new_user()
        community_id = _create(client, owner)["community"]["community_id"]
        base = f"/communities/{community_id}/collaborators"

        # Act
        added = client.post(
            base,
            json={"user_id": str(member), "role": "viewer"},
            headers=auth_header(owner),
        )
        changed = client.patch(
            f"{base}/{member}/role", json={"role": "admin"}, headers=auth_header(owner)
        )
        listed = client.get(base, headers=auth_header(member)).json()
        removed = client.delete(f"{base}/{member}", headers=auth_header(owner))

        # Assert
        assert added.status_code == 201
        assert added.json()["invited_by"] == str(owner)
        assert changed.json()["role"] == "admin"
        assert listed["total"] == 2
        assert removed.status_code == 204

    def test_transfer_ownership(self, client):
        # Arrange
        owner = new_user()
        admin = new_user()
        community_id = _create(client, owner)["community"]["community_id"]
        client.post(
            f"/communities/{community_id}/collaborators",
            json={"user_id": str(admin), "role": "admin"},
            headers=auth_header(owner),
        )

        # Act
        response = client.post(
            f"/communities/{community_id}/ownership",
            json={"new_owner_id": str(admin)},
            headers=auth_header(owner),
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["owner"]["user_id"] == str(admin)
        assert body["owner"]["role"] == "owner"
        assert body["previous_owner"]["role"] == "admin"

    def test_owner_cannot_be_removed(self, client):
        owner = new_user()
        admin = new_user()
        community_id = _create(client, owner)["community"]["community_id"]
        client.post(
            f"/communities/{community_id}/collaborators",
            json={"user_id": str(admin), "role": "admin"},
            headers=auth_header(owner),
        )

        response = client.delete(
            f"/communities/{community_id}/collaborators/{owner}",
            headers=auth_header(admin),
        )

        assert response.status_code == 409
