"""Synchronous publish/subscribe channel shared by the managers.

Handlers run in subscription order on the publisher's thread. A handler
that raises is logged and skipped; the remaining handlers still run.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]

STORAGE_ERROR = "storage_error"
MONTH_CHANGED = "month_changed"


class EventBus:
    """Named-channel observer registry."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def subscribe(self, event: str, handler: Handler) -> Callable[[], bool]:
        """Register ``handler`` for ``event``.

        Returns a callable that unsubscribes it again.
        """
        self._handlers.setdefault(event, []).append(handler)
        return lambda: self.unsubscribe(event, handler)

    def unsubscribe(self, event: str, handler: Handler) -> bool:
        """Remove the first registration of ``handler``. False if absent."""
        handlers = self._handlers.get(event)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        if not handlers:
            del self._handlers[event]
        return True

    def publish(self, event: str, payload: Any = None) -> int:
        """Deliver ``payload`` to every handler of ``event``.

        Returns the number of handlers that completed without raising.
        """
        delivered = 0
        # Copy so handlers may (un)subscribe while we iterate
        for handler in list(self._handlers.get(event, ())):
            try:
                handler(payload)
            except Exception:
                logger.exception("Handler %r for %r failed", handler, event)
                continue
            delivered += 1
        return delivered

    def handlers(self, event: str) -> list[Handler]:
        return list(self._handlers.get(event, ()))
