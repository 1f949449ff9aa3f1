"""Test harness for unit, integration and E2E tests.

Unit tests need nothing running. Integration tests expect a migrated Postgres
reachable through the DATABASE__URL setting.
"""

import pytest_asyncio

from rolo.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Yields request-scoped container for service access
    - Closes the container afterwards (disposes engines, drains audit writes)

    Args:
        unmock: Components to use real implementations for

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - everything mocked
        unit_env = create_env_fixture()

        # Integration tests - real persistence, assumes postgres running
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_create_community(unit_env):
            access_control = await unit_env.get(AccessControlService)
            community, owner = await access_control.create_community(...)
            assert owner.role == Role.OWNER
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(unmock=unmock or set())

        try:
            async with container() as request_container:
                yield request_container
        finally:
            await container.close()

    return _test_environment
