"""End-to-end tests for subscription and audit endpoints."""

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


@pytest.fixture
def community(client):
    owner = new_user()
    response = client.post(
        "/communities", json=community_payload(), headers=auth_header(owner)
    )
    return response.json()["community"]["community_id"], owner


class TestSubscriptionEndpoints:
    def test_list_plans_is_public(self, client):
        response = client.get("/subscriptions/plans")

        assert response.status_code == 200
        names = [plan["name"] for plan in response.json()["plans"]]
        assert names == ["free", "starter", "professional", "enterprise"]

    def test_usage_on_free_plan(self, client, community):
        community_id, owner = community

        response = client.get(
            f"/communities/{community_id}/subscription/usage",
            headers=auth_header(owner),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["plan_name"] == "free"
        assert body["status"] == "free"
        assert body["team_members"] == 1
        assert body["max_team_members"] == 5
        assert body["team_usage_percent"] == 20.0

    def test_upgrade_cancel_reactivate(self, client, community):
        # Arrange
        community_id, owner = community
        base = f"/communities/{community_id}/subscription"

        # Act
        upgraded = client.put(
            base,
            json={"plan_name": "starter", "billing_cycle": "yearly"},
            headers=auth_header(owner),
        )
        canceled = client.post(f"{base}/cancel", headers=auth_header(owner))
        reactivated = client.post(f"{base}/reactivate", headers=auth_header(owner))
        usage = client.get(f"{base}/usage", headers=auth_header(owner)).json()

        # Assert
        assert upgraded.status_code == 200
        assert upgraded.json()["status"] == "active"
        assert canceled.json()["cancel_at_period_end"] is True
        assert reactivated.json()["cancel_at_period_end"] is False
        assert usage["max_team_members"] == 25

    def test_cancel_free_plan_conflicts(self, client, community):
        community_id, owner = community
        client.put(
            f"/communities/{community_id}/subscription",
            json={"plan_name": "free"},
            headers=auth_header(owner),
        )

        response = client.post(
            f"/communities/{community_id}/subscription/cancel",
            headers=auth_header(owner),
        )

        assert response.status_code == 409
        assert response.json()["error"] == "invalid_transition"

    def test_unknown_plan(self, client, community):
        community_id, owner = community

        response = client.put(
            f"/communities/{community_id}/subscription",
            json={"plan_name": "platinum"},
            headers=auth_header(owner),
        )

        assert response.status_code == 404


class TestAuditEndpoints:
    def test_membership_changes_are_audited(self, client, community):
        # Arrange
        community_id, owner = community
        member = new_user()
        client.post(
            f"/communities/{community_id}/collaborators",
            json={"user_id": str(member), "role": "viewer"},
            headers=auth_header(owner),
        )

        # Act
        response = client.get(
            f"/communities/{community_id}/audit-logs",
            params={"action": "collaborator_added"},
            headers=auth_header(owner),
        )

        # Assert
        assert response.status_code == 200
        entries = response.json()["entries"]
        assert len(entries) == 1
        assert entries[0]["new_values"]["user_id"] == str(member)

    def test_viewer_cannot_read_audit_logs(self, client, community):
        community_id, owner = community
        viewer = new_user()
        client.post(
            f"/communities/{community_id}/collaborators",
            json={"user_id": str(viewer), "role": "viewer"},
            headers=auth_header(owner),
        )

        response = client.get(
            f"/communities/{community_id}/audit-logs", headers=auth_header(viewer)
        )

        assert response.status_code == 403
