"""Shared in-memory store backing the in-memory repositories.

Writes made inside ``atomic()`` are journaled and undone if the block raises.
Nested blocks hand their journal to the enclosing block on success, like
savepoints. Community locks are held until the outermost block exits.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any, Callable, Optional
from uuid import uuid4

from rolo.domain.model import SubscriptionPlan
from rolo.domain.value import CommunityId, PlanId
from rolo.persistence.seed import DEFAULT_PLANS

_MISSING = object()


class _Transaction:
    def __init__(self, parent: Optional["_Transaction"]) -> None:
        self.parent = parent
        self.undo: list[Callable[[], None]] = []
        self.locks: dict[CommunityId, asyncio.Lock] = {}

    def holds(self, community_id: CommunityId) -> bool:
        tx: Optional[_Transaction] = self
        while tx is not None:
            if community_id in tx.locks:
                return True
            tx = tx.parent
        return False

    def rollback(self) -> None:
        for undo in reversed(self.undo):
            undo()
        self.undo.clear()

    def release_locks(self) -> None:
        for lock in self.locks.values():
            lock.release()
        self.locks.clear()


class InMemoryDatabase:
    """Tables as dicts keyed by primary key, plus transaction support."""

    def __init__(self, seed_plans: bool = True) -> None:
        self.communities: dict[Any, Any] = {}
        self.collaborators: dict[Any, Any] = {}
        self.invites: dict[Any, Any] = {}
        self.plans: dict[Any, Any] = {}
        self.subscriptions: dict[Any, Any] = {}
        self.audit_logs: dict[Any, Any] = {}

        self._community_locks: dict[CommunityId, asyncio.Lock] = {}
        self._current: ContextVar[Optional[_Transaction]] = ContextVar(
            f"inmemory_tx_{id(self)}", default=None
        )

        if seed_plans:
            for plan in DEFAULT_PLANS:
                plan_id = PlanId(uuid4())
                self.plans[plan_id] = SubscriptionPlan(id=plan_id, **plan)

    def put(self, table: dict[Any, Any], key: Any, value: Any) -> None:
        """Insert or replace a row, journaling the previous value."""
        previous = table.get(key, _MISSING)
        table[key] = value
        self._journal(table, key, previous)

    def remove(self, table: dict[Any, Any], key: Any) -> bool:
        """Delete a row, journaling it. Returns whether it existed."""
        previous = table.pop(key, _MISSING)
        if previous is _MISSING:
            return False
        self._journal(table, key, previous)
        return True

    def _journal(self, table: dict[Any, Any], key: Any, previous: Any) -> None:
        tx = self._current.get()
        if tx is None:
            return

        def undo() -> None:
            if previous is _MISSING:
                table.pop(key, None)
            else:
                table[key] = previous

        tx.undo.append(undo)

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        outer = self._current.get()
        tx = _Transaction(parent=outer)
        token = self._current.set(tx)
        try:
            yield
        except BaseException:
            tx.rollback()
            raise
        else:
            if outer is not None:
                outer.undo.extend(tx.undo)
        finally:
            self._current.reset(token)
            if outer is not None:
                outer.locks.update(tx.locks)
            else:
                tx.release_locks()

    async def lock_community(self, community_id: CommunityId) -> None:
        tx = self._current.get()
        if tx is None:
            raise RuntimeError("lock_community must be called inside atomic()")
        if tx.holds(community_id):
            return

        lock = self._community_locks.setdefault(community_id, asyncio.Lock())
        await lock.acquire()
        tx.locks[community_id] = lock
