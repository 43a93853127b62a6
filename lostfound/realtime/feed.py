"""In-process change feed mirroring the backend's row-insert subscriptions."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping

logger = logging.getLogger(__name__)

INSERT = "INSERT"


@dataclass(frozen=True)
class RowEvent:
    """A row change delivered to feed subscribers."""

    collection: str
    event: str
    row: Dict[str, Any]


@dataclass(frozen=True)
class Subscription:
    id: str
    collection: str
    event: str
    callback: Callable[[RowEvent], None] = field(compare=False)
    filters: Mapping[str, Any] = field(default_factory=dict)

    def matches(self, event: RowEvent) -> bool:
        if event.collection != self.collection or event.event != self.event:
            return False
        # Rows are JSON-dumped, so compare on the string form (UUIDs, enums)
        return all(
            str(event.row.get(key)) == str(getattr(value, "value", value))
            for key, value in self.filters.items()
        )


class RealtimeFeed:
    """Route row events to the subscribers whose collection, kind and filters match.

    Delivery happens synchronously on the publishing thread. Subscribers that
    need to hand the event to an event loop must do so themselves.
    """

    def __init__(self) -> None:
        self._subscriptions: Dict[str, Subscription] = {}
        self._lock = threading.Lock()

    def subscribe(
        self,
        collection: str,
        event: str,
        filters: Mapping[str, Any] | None,
        on_event: Callable[[RowEvent], None],
    ) -> str:
        """Register ``on_event`` and return the handle used to unsubscribe."""

        handle = uuid.uuid4().hex
        subscription = Subscription(
            id=handle,
            collection=collection,
            event=event.upper(),
            filters=dict(filters or {}),
            callback=on_event,
        )
        with self._lock:
            self._subscriptions[handle] = subscription
        return handle

    def unsubscribe(self, handle: str) -> None:
        with self._lock:
            self._subscriptions.pop(handle, None)

    def publish(self, collection: str, event: str, row: Dict[str, Any]) -> int:
        """Deliver a row event and return how many subscribers received it."""

        row_event = RowEvent(collection=collection, event=event.upper(), row=row)
        with self._lock:
            targets = [sub for sub in self._subscriptions.values() if sub.matches(row_event)]

        delivered = 0
        for subscription in targets:
            try:
                subscription.callback(row_event)
            except Exception:
                # A broken listener must not fail the write that triggered it
                logger.exception("Realtime subscriber %s failed", subscription.id)
                continue
            delivered += 1
        return delivered

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)


realtime_feed = RealtimeFeed()


__all__ = ["INSERT", "RowEvent", "Subscription", "RealtimeFeed", "realtime_feed"]
