"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from rolo.config import Settings
from rolo.domain.repository import (
    AuditLogRepository,
    AuditSink,
    CollaboratorRepository,
    CommunityRepository,
    InviteRepository,
    SubscriptionRepository,
    TransactionManager,
)
from rolo.persistence.audit_sink import DatabaseAuditSink
from rolo.persistence.database import create_engine, create_session_factory
from rolo.persistence.repository import (
    PostgresAuditLogRepository,
    PostgresCollaboratorRepository,
    PostgresCommunityRepository,
    PostgresInviteRepository,
    PostgresSubscriptionRepository,
)
from rolo.persistence.transaction import PostgresTransactionManager
from rolo.util.di.base import ProviderBase
from rolo.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the app container closes."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    async def get_audit_sink(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AuditSink]:
        """Provide the audit sink; pending writes are flushed on shutdown."""
        sink = DatabaseAuditSink(session_factory)
        yield sink
        await sink.drain()

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is automatically committed at the end of the request
        if no exception occurred, or rolled back if an exception was raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.debug("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_transaction_manager(self, session: AsyncSession) -> TransactionManager:
        """Provide savepoint-based transaction manager."""
        return PostgresTransactionManager(session)

    @provide(scope=Scope.REQUEST)
    def get_community_repository(
        self, session: AsyncSession, settings: Settings
    ) -> CommunityRepository:
        """Provide Community repository."""
        return PostgresCommunityRepository(session, settings.database.read_retries)

    @provide(scope=Scope.REQUEST)
    def get_collaborator_repository(
        self, session: AsyncSession, settings: Settings
    ) -> CollaboratorRepository:
        """Provide Collaborator repository."""
        return PostgresCollaboratorRepository(session, settings.database.read_retries)

    @provide(scope=Scope.REQUEST)
    def get_invite_repository(
        self, session: AsyncSession, settings: Settings
    ) -> InviteRepository:
        """Provide Invite repository."""
        return PostgresInviteRepository(session, settings.database.read_retries)

    @provide(scope=Scope.REQUEST)
    def get_subscription_repository(
        self, session: AsyncSession, settings: Settings
    ) -> SubscriptionRepository:
        """Provide Subscription repository."""
        return PostgresSubscriptionRepository(session, settings.database.read_retries)

    @provide(scope=Scope.REQUEST)
    def get_audit_log_repository(
        self, session: AsyncSession, settings: Settings
    ) -> AuditLogRepository:
        """Provide AuditLog repository."""
        return PostgresAuditLogRepository(session, settings.database.read_retries)
