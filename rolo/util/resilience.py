"""Store call wrappers: timeout translation and a single retry for reads.

Idempotent reads are retried ``read_retries`` times (1 by default) when the
database fails or times out. Writes are never retried. Either way a failure
that survives is raised as ``DependencyFailureError``.
"""

import asyncio
import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import logfire
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from rolo.domain.error import DependencyFailureError

T = TypeVar("T")

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    PoolTimeoutError,
    asyncio.TimeoutError,
    TimeoutError,
    ConnectionError,
)


def store_read(
    method: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """Decorate a repository read.

    The read runs inside a savepoint so a failed attempt can be rolled back
    and retried on the same session. The repository must expose ``session``
    and may set ``read_retries``.
    """

    @functools.wraps(method)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
        attempts = 1 + max(0, getattr(self, "read_retries", 1))
        for attempt in range(1, attempts + 1):
            try:
                async with self.session.begin_nested():
                    return await method(self, *args, **kwargs)
            except TRANSIENT_ERRORS as e:
                if attempt < attempts:
                    logfire.warn(
                        "Store read failed, retrying",
                        operation=method.__qualname__,
                        attempt=attempt,
                        error=str(e),
                    )
                    continue
                logfire.error(
                    "Store read failed",
                    operation=method.__qualname__,
                    attempts=attempts,
                    error=str(e),
                )
                raise DependencyFailureError("database", str(e), retryable=True) from e
        raise AssertionError("unreachable")

    return wrapper


def store_write(
    method: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """Decorate a repository write. Transient failures are translated, never retried."""

    @functools.wraps(method)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
        try:
            return await method(self, *args, **kwargs)
        except TRANSIENT_ERRORS as e:
            logfire.error(
                "Store write failed",
                operation=method.__qualname__,
                error=str(e),
            )
            raise DependencyFailureError("database", str(e), retryable=True) from e

    return wrapper
