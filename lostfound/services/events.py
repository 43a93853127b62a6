"""Domain events emitted by the workflow once its writes have committed."""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, DefaultDict, List, Optional, Type

from lostfound.models.claim import ClaimStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClaimSubmitted:
    claim_id: uuid.UUID
    item_id: uuid.UUID
    owner_id: uuid.UUID
    claimant_id: uuid.UUID


@dataclass(frozen=True)
class ClaimDecided:
    claim_id: uuid.UUID
    item_id: uuid.UUID
    owner_id: uuid.UUID
    claimant_id: uuid.UUID
    decision: ClaimStatus


@dataclass(frozen=True)
class ItemResolved:
    item_id: uuid.UUID
    owner_id: uuid.UUID
    # None when the owner resolved the item by hand
    claim_id: Optional[uuid.UUID] = None


@dataclass(frozen=True)
class MessagePosted:
    message_id: uuid.UUID
    item_id: uuid.UUID
    sender_id: uuid.UUID
    recipient_id: uuid.UUID


Handler = Callable[[object], None]


class EventBus:
    """Synchronous publish/subscribe keyed on the event class. Handler errors propagate."""

    def __init__(self) -> None:
        self._handlers: DefaultDict[Type, List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def publish(self, event: object) -> None:
        handlers = list(self._handlers.get(type(event), ()))
        logger.debug("Publishing %s to %d handler(s)", type(event).__name__, len(handlers))
        for handler in handlers:
            handler(event)


__all__ = [
    "ClaimSubmitted",
    "ClaimDecided",
    "ItemResolved",
    "MessagePosted",
    "EventBus",
]
