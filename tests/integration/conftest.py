"""Integration tests run against a migrated Postgres.

Point ROLO_INTEGRATION_DATABASE_URL at it (``alembic upgrade head`` first);
without it every test here is skipped.
"""

import os

import pytest

INTEGRATION_DATABASE_URL = os.environ.get("ROLO_INTEGRATION_DATABASE_URL")


@pytest.fixture(autouse=True)
def integration_database(monkeypatch):
    """Route Settings to the integration database before containers are built."""
    if not INTEGRATION_DATABASE_URL:
        pytest.skip("ROLO_INTEGRATION_DATABASE_URL not set")
    monkeypatch.setenv("DATABASE__URL", INTEGRATION_DATABASE_URL)
