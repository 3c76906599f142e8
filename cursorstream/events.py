"""
Event subscription for search sessions.

A SearchClient reports everything it does through four event kinds. Consumers
subscribe per kind on a SearchEvents instance, which the client owns or is
handed at construction time.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ._logging import logger

Listener = Callable[..., Any]


class EventType(str, Enum):
    """Events emitted by a SearchClient during a session."""

    RESULT_COUNT = "resultCount"  # payload: int total, at most once per session
    RESULTS = "results"  # payload: list of items
    ERROR = "error"  # payload: the exception
    END = "end"  # no payload, terminal


@dataclass(eq=False)
class _Subscription:
    listener: Listener
    once: bool = False


class SearchEvents:
    """
    Typed registry of listeners keyed by EventType.

    Listeners run synchronously, in registration order, inside emit().
    Event kinds can be given as EventType members or their string values
    ("resultCount", "results", "error", "end").

    Usage:
        events = SearchEvents()
        unsubscribe = events.on(EventType.RESULTS, lambda items: print(len(items)))
        events.once("end", lambda: print("done"))
        ...
        unsubscribe()
    """

    def __init__(self) -> None:
        self._subscriptions: dict[EventType, list[_Subscription]] = {
            event: [] for event in EventType
        }

    @staticmethod
    def _event_type(event: EventType | str) -> EventType:
        try:
            return EventType(event)
        except ValueError:
            raise ValueError(
                f"Unknown event '{event}', expected one of {[e.value for e in EventType]}"
            ) from None

    def on(self, event: EventType | str, listener: Listener) -> Callable[[], None]:
        """
        Subscribe a listener to an event.

        Returns:
            A callable that removes this subscription
        """
        return self._subscribe(event, listener, once=False)

    def once(self, event: EventType | str, listener: Listener) -> Callable[[], None]:
        """Subscribe a listener that is removed after its first call."""
        return self._subscribe(event, listener, once=True)

    def _subscribe(
        self, event: EventType | str, listener: Listener, once: bool
    ) -> Callable[[], None]:
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")

        event_type = self._event_type(event)
        subscription = _Subscription(listener, once)
        self._subscriptions[event_type].append(subscription)

        def unsubscribe() -> None:
            subs = self._subscriptions[event_type]
            if subscription in subs:
                subs.remove(subscription)

        return unsubscribe

    def off(self, event: EventType | str, listener: Listener | None = None) -> None:
        """
        Remove a listener from an event, or every listener when none is given.
        """
        event_type = self._event_type(event)
        if listener is None:
            self._subscriptions[event_type].clear()
            return
        self._subscriptions[event_type] = [
            sub for sub in self._subscriptions[event_type] if sub.listener != listener
        ]

    def emit(self, event: EventType | str, *args: Any) -> None:
        """
        Call every listener of an event with the given payload.

        A listener that raises is logged and skipped; the remaining listeners
        still run and the exception does not reach the emitter.
        """
        event_type = self._event_type(event)
        # Snapshot: listeners may subscribe or unsubscribe while we iterate
        subscriptions = list(self._subscriptions[event_type])

        for subscription in subscriptions:
            if subscription.once:
                try:
                    self._subscriptions[event_type].remove(subscription)
                except ValueError:
                    # Already removed by an earlier listener
                    continue
            try:
                subscription.listener(*args)
            except Exception:
                logger.exception(
                    "Event listener failed",
                    extra={"event": event_type.value},
                )

    def listener_count(self, event: EventType | str) -> int:
        """Number of listeners currently subscribed to an event."""
        return len(self._subscriptions[self._event_type(event)])
