from __future__ import annotations

import uuid

from lostfound.db.gateway import Gateway
from lostfound.errors import NotFoundError, PermissionDeniedError
from lostfound.models.notification import Notification
from lostfound.services.auth import SessionContext

DEFAULT_LIMIT = 10


class NotificationService:
    def __init__(self, gateway: Gateway) -> None:
        self.gateway = gateway

    def list_notifications(self, context: SessionContext, limit: int = DEFAULT_LIMIT) -> list[dict]:
        notifications = self.gateway.select(
            "notifications",
            {"user_id": context.user_id},
            order_by="created_at",
            descending=True,
            limit=limit,
        )

        actor_ids = {n.actor_id for n in notifications if n.actor_id}
        actors = {
            profile.id: profile
            for profile in self.gateway.select("profiles", {"id": actor_ids})
        } if actor_ids else {}

        results = []
        for notification in notifications:
            actor = actors.get(notification.actor_id)
            results.append({
                **notification.model_dump(),
                "actor_profile": {
                    "full_name": actor.full_name,
                    "avatar_url": actor.avatar_url,
                } if actor else None,
            })
        return results

    def unread_count(self, context: SessionContext) -> int:
        return len(self.gateway.select("notifications", {"user_id": context.user_id, "read": False}))

    def mark_notification_read(self, context: SessionContext, notification_id: uuid.UUID) -> Notification:
        notification = self.gateway.select_one("notifications", {"id": notification_id})
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification.user_id != context.user_id:
            raise PermissionDeniedError("You can only update your own notifications")

        if not notification.read:
            self.gateway.update("notifications", {"read": True}, {"id": notification_id})

        return self.gateway.select_one("notifications", {"id": notification_id})

    def mark_all_read(self, context: SessionContext) -> int:
        return self.gateway.update(
            "notifications", {"read": True}, {"user_id": context.user_id, "read": False}
        )
