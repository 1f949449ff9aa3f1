"""In-process channel for membership change events."""

from collections.abc import Awaitable, Callable

import logfire

from rolo.domain.model import AccessEvent

AccessEventHandler = Callable[[AccessEvent], Awaitable[None]]


class AccessEventBus:
    """Publishes access events to subscribed handlers.

    Delivery is at most once: each handler present at publish time is awaited
    once, in subscription order. A failing handler is logged and skipped; it is
    never retried and never affects the publisher or other handlers.
    """

    def __init__(self) -> None:
        self._handlers: list[AccessEventHandler] = []

    def subscribe(self, handler: AccessEventHandler) -> Callable[[], None]:
        """Register a handler.

        Returns:
            Callable that removes the handler again
        """
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    async def publish(self, event: AccessEvent) -> None:
        for handler in list(self._handlers):
            try:
                await handler(event)
            except Exception as e:
                logfire.warn(
                    "Access event handler failed",
                    kind=event.kind.value,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    error=str(e),
                )
