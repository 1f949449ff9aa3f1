"""Async engine and session factory for PostgreSQL (asyncpg driver)."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from rolo.config import Settings

APPLICATION_NAME = "rolo-access"


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the engine shared by the request sessions and the audit sink.

    Statements are bounded by ``database.command_timeout`` and pool checkouts
    by ``database.pool_timeout``; both surface as transient store failures.
    """
    db = settings.database
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_timeout=db.pool_timeout,
        connect_args={
            "command_timeout": db.command_timeout,
            # Shows up in pg_stat_activity next to advisory lock waits
            "server_settings": {"application_name": APPLICATION_NAME},
        },
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions flush explicitly and keep rows usable after the request commits."""
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
