"""Item-scoped direct messages and public comments."""

from __future__ import annotations

import logging
import uuid

from lostfound.db.gateway import Gateway
from lostfound.errors import RemoteError, ValidationError
from lostfound.models.comment import Comment
from lostfound.models.message import Message
from lostfound.services.auth import SessionContext
from lostfound.services.events import EventBus, MessagePosted
from lostfound.services.items import ItemService

logger = logging.getLogger(__name__)


def _clean(content: str, what: str) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError(f"{what} cannot be empty")
    return content


class MessagingService:
    def __init__(self, gateway: Gateway, bus: EventBus) -> None:
        self.gateway = gateway
        self.bus = bus
        self.items = ItemService(gateway, bus)

    def post_message(
        self,
        context: SessionContext,
        item_id: uuid.UUID,
        recipient_id: uuid.UUID,
        content: str,
    ) -> Message:
        content = _clean(content, "Message")
        if recipient_id == context.user_id:
            raise ValidationError("You cannot message yourself")
        self.items.get_item(item_id)

        message, = self.gateway.insert("messages", [{
            "item_id": item_id,
            "sender_id": context.user_id,
            "recipient_id": recipient_id,
            "content": content,
        }])

        try:
            self.bus.publish(MessagePosted(
                message_id=message.id,
                item_id=item_id,
                sender_id=context.user_id,
                recipient_id=recipient_id,
            ))
        except RemoteError:
            # Not atomic: the message stays stored
            logger.warning("Message %s stored but its notification was not", message.id)
            raise

        return self.gateway.select_one("messages", {"id": message.id})

    def list_messages(self, context: SessionContext, item_id: uuid.UUID) -> list[Message]:
        messages = self.gateway.select("messages", {"item_id": item_id}, order_by="created_at")
        return [
            message for message in messages
            if context.user_id in (message.sender_id, message.recipient_id)
        ]

    def add_comment(self, context: SessionContext, item_id: uuid.UUID, content: str) -> Comment:
        content = _clean(content, "Comment")
        self.items.get_item(item_id)

        comment, = self.gateway.insert("comments", [{
            "item_id": item_id,
            "user_id": context.user_id,
            "content": content,
        }])
        return comment

    def list_comments(self, item_id: uuid.UUID) -> list[dict]:
        comments = self.gateway.select("comments", {"item_id": item_id}, order_by="created_at")

        author_ids = {comment.user_id for comment in comments}
        profiles = {
            profile.id: profile
            for profile in self.gateway.select("profiles", {"id": author_ids})
        } if author_ids else {}

        results = []
        for comment in comments:
            author = profiles.get(comment.user_id)
            results.append({
                **comment.model_dump(),
                "author": {
                    "full_name": author.full_name if author else None,
                    "avatar_url": author.avatar_url if author else None,
                },
            })
        return results
