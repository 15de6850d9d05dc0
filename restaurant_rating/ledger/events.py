from __future__ import annotations

import logging
import threading
import time
from typing import Any, Protocol

logger = logging.getLogger(__name__)

RESTAURANT_REGISTERED = "RestaurantRegistered"
REVIEW_SUBMITTED = "ReviewSubmitted"
REVIEW_VERIFIED = "ReviewVerified"


class EventSink(Protocol):
    def publish(self, event: dict[str, Any]) -> None: ...


def make_event(event_type: str, data: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": event_type,
        "timestamp": time.time(),
        **data,
    }


class NullSink:
    def publish(self, event: dict[str, Any]) -> None:
        return None


class InMemoryEventLog:
    """Keeps every published event in arrival order."""

    def __init__(self) -> None:
        self._events: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def publish(self, event: dict[str, Any]) -> None:
        with self._lock:
            self._events.append(event)

    def get_events(self, event_type: str | None = None) -> list[dict[str, Any]]:
        with self._lock:
            if event_type is None:
                return list(self._events)
            return [e for e in self._events if e["type"] == event_type]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


def dispatch(sink: EventSink, event: dict[str, Any]) -> None:
    """Deliver *event* to *sink*, logging and dropping any sink failure."""
    try:
        sink.publish(event)
    except Exception:
        logger.warning("Event sink failed for %s", event.get("type"), exc_info=True)
