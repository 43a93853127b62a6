"""Turns workflow events into notification rows for their recipients."""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from lostfound.db.gateway import Gateway
from lostfound.models.claim import ClaimStatus
from lostfound.models.notification import NotificationType
from lostfound.services.events import ClaimDecided, ClaimSubmitted, EventBus, MessagePosted

logger = logging.getLogger(__name__)


class NotificationFanout:
    def __init__(self, gateway: Gateway) -> None:
        self.gateway = gateway

    def register(self, bus: EventBus) -> EventBus:
        bus.subscribe(MessagePosted, self.on_message_posted)
        bus.subscribe(ClaimSubmitted, self.on_claim_submitted)
        bus.subscribe(ClaimDecided, self.on_claim_decided)
        return bus

    def _notify(
        self,
        user_id: uuid.UUID,
        kind: NotificationType,
        content: str,
        item_id: uuid.UUID,
        actor_id: Optional[uuid.UUID],
    ):
        notification, = self.gateway.insert("notifications", [{
            "user_id": user_id,
            "type": kind,
            "content": content,
            "item_id": item_id,
            "actor_id": actor_id,
        }])
        logger.info("Notified %s (%s) about item %s", user_id, kind.value, item_id)
        return notification

    def on_message_posted(self, event: MessagePosted):
        return self._notify(
            event.recipient_id,
            NotificationType.message,
            "You have a new message",
            event.item_id,
            event.sender_id,
        )

    def on_claim_submitted(self, event: ClaimSubmitted):
        return self._notify(
            event.owner_id,
            NotificationType.claim_submitted,
            "Someone submitted a claim on your item",
            event.item_id,
            event.claimant_id,
        )

    def on_claim_decided(self, event: ClaimDecided):
        if event.decision == ClaimStatus.approved:
            kind, content = NotificationType.claim_approved, "Your claim was approved"
        else:
            kind, content = NotificationType.claim_rejected, "Your claim was rejected"

        return self._notify(event.claimant_id, kind, content, event.item_id, event.owner_id)


def build_event_bus(gateway: Gateway) -> EventBus:
    return NotificationFanout(gateway).register(EventBus())
