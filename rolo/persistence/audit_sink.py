"""Database-backed audit sink.

Entries are written by background tasks through their own sessions, so an
audit write never blocks or fails the request that produced it.
"""

import asyncio

import logfire
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rolo.domain.model import AuditLog
from rolo.domain.repository import AuditSink
from rolo.persistence.repository.audit import PostgresAuditLogRepository


class DatabaseAuditSink(AuditSink):
    """Fire-and-forget AuditSink writing to the audit_logs table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory
        self._pending: set[asyncio.Task[None]] = set()

    def submit(self, entry: AuditLog) -> None:
        try:
            task = asyncio.get_running_loop().create_task(self._write(entry))
        except RuntimeError:
            logfire.warn(
                "Audit entry dropped, no running event loop",
                action=entry.action.value,
            )
            return

        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _write(self, entry: AuditLog) -> None:
        try:
            async with self.session_factory() as session:
                await PostgresAuditLogRepository(session).save(entry)
                await session.commit()
        except Exception as e:
            logfire.warn(
                "Audit entry write failed",
                action=entry.action.value,
                table_name=entry.table_name,
                error=str(e),
            )
