"""Unit tests for AccessEventBus."""

from uuid import uuid4

import pytest

from rolo.domain.model import AccessEvent, AccessEventKind
from rolo.domain.service import AccessEventBus
from rolo.domain.value import CollaboratorStatus, Role


def make_event(kind: AccessEventKind = AccessEventKind.COLLABORATOR_ADDED) -> AccessEvent:
    return AccessEvent(
        kind=kind,
        community_id=uuid4(),
        user_id=uuid4(),
        role=Role.VIEWER,
        status=CollaboratorStatus.APPROVED,
    )


class TestAccessEventBus:
    @pytest.mark.asyncio
    async def test_handlers_called_once_in_order(self):
        bus = AccessEventBus()
        calls = []

        async def first(event):
            calls.append(("first", event.kind))

        async def second(event):
            calls.append(("second", event.kind))

        bus.subscribe(first)
        bus.subscribe(second)

        await bus.publish(make_event())

        assert calls == [
            ("first", AccessEventKind.COLLABORATOR_ADDED),
            ("second", AccessEventKind.COLLABORATOR_ADDED),
        ]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self):
        """Delivery is at most once; a failure is never retried or raised."""
        bus = AccessEventBus()
        received = []
        attempts = []

        async def broken(event):
            attempts.append(event)
            raise RuntimeError("subscriber down")

        async def healthy(event):
            received.append(event)

        bus.subscribe(broken)
        bus.subscribe(healthy)

        await bus.publish(make_event())

        assert len(attempts) == 1
        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        bus = AccessEventBus()
        received = []

        async def handler(event):
            received.append(event)

        unsubscribe = bus.subscribe(handler)
        unsubscribe()
        unsubscribe()

        await bus.publish(make_event())

        assert received == []
