"""Event sink that fans game events out to subscribers."""

import logging
from collections.abc import Callable

from nightfall.models import GameEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[GameEvent], None]


class EventBus:
    """Delivers every emitted event to each subscriber, in subscription order.

    A subscriber that raises is logged and skipped so presentation bugs
    never stop a game.
    """

    def __init__(self):
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a subscriber.

        Returns:
            A callable that removes the subscriber again
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def emit(self, event: GameEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("Event subscriber %r failed on %r", callback, event)
