from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from lostfound.db.gateway import Gateway
from lostfound.errors import NotFoundError, PermissionDeniedError, ValidationError
from lostfound.models.item import Item, ItemStatus
from lostfound.services.auth import SessionContext
from lostfound.services.events import EventBus, ItemResolved

logger = logging.getLogger(__name__)

ALL = "all"
SORT_ORDERS = ("newest", "oldest")
EDITABLE_FIELDS = ("title", "description", "category", "type", "location", "date", "image_url")


def require_item_owner(item: Item, context: SessionContext, action: str) -> None:
    if item.user_id != context.user_id:
        raise PermissionDeniedError(f"Only the item owner can {action}")


def _wanted(value: Optional[str]) -> bool:
    return value is not None and value != ALL


class ItemService:
    def __init__(self, gateway: Gateway, bus: Optional[EventBus] = None) -> None:
        self.gateway = gateway
        self.bus = bus or EventBus()

    def get_item(self, item_id: uuid.UUID, for_update: bool = False) -> Item:
        item = self.gateway.select_one("items", {"id": item_id}, for_update=for_update)
        if item is None:
            raise NotFoundError("Item not found")
        return item

    def get_item_with_owner(self, item_id: uuid.UUID):
        item = self.get_item(item_id)
        owner = self.gateway.select_one("profiles", {"id": item.user_id})
        return item, owner

    def list_items(
        self,
        category: Optional[str] = None,
        type: Optional[str] = None,
        status: Optional[str] = None,
        sort: str = "newest",
        search: Optional[str] = None,
    ) -> list[Item]:
        if sort not in SORT_ORDERS:
            raise ValidationError(f"Unknown sort order '{sort}'")

        filters: dict[str, Any] = {}
        if _wanted(category):
            filters["category"] = category
        if _wanted(type):
            filters["type"] = type
        if _wanted(status):
            filters["status"] = status

        items = self.gateway.select(
            "items",
            filters,
            order_by="created_at",
            descending=sort == "newest",
        )

        term = (search or "").strip().lower()
        if not term:
            return items

        return [
            item for item in items
            if term in item.title.lower()
            or term in item.description.lower()
            or term in item.location.lower()
        ]

    def list_user_items(self, user_id: uuid.UUID) -> dict[str, list[Item]]:
        items = self.gateway.select(
            "items", {"user_id": user_id}, order_by="created_at", descending=True
        )

        # Separate by type
        return {
            "lost_items": [item for item in items if item.type == "lost"],
            "found_items": [item for item in items if item.type == "found"],
        }

    def report_item(self, context: SessionContext, data: Mapping[str, Any]) -> Item:
        row = {key: data[key] for key in EDITABLE_FIELDS if key in data}
        item, = self.gateway.insert("items", [{
            **row,
            "user_id": context.user_id,
            "status": ItemStatus.open,
        }])

        logger.info("User %s reported %s item %s", context.user_id, item.type, item.id)
        return item

    def update_item(self, context: SessionContext, item_id: uuid.UUID, patch: Mapping[str, Any]) -> Item:
        item = self.get_item(item_id)
        require_item_owner(item, context, "edit it")

        changes = {key: value for key, value in patch.items() if key in EDITABLE_FIELDS}
        if changes:
            changes["updated_at"] = datetime.now(timezone.utc)
            self.gateway.update("items", changes, {"id": item_id})

        return self.get_item(item_id)

    def change_item_status(self, context: SessionContext, item_id: uuid.UUID, new_status: ItemStatus) -> Item:
        # No transition table: owners may resolve without an approved claim
        new_status = ItemStatus(new_status)
        item = self.get_item(item_id)
        require_item_owner(item, context, "change its status")
        previous = item.status

        self.gateway.update(
            "items",
            {"status": new_status, "updated_at": datetime.now(timezone.utc)},
            {"id": item_id},
        )
        logger.info("Item %s status %s -> %s by owner", item_id, previous.value, new_status.value)

        if new_status == ItemStatus.resolved and previous != ItemStatus.resolved:
            self.bus.publish(ItemResolved(item_id=item_id, owner_id=context.user_id))

        return self.get_item(item_id)

    def delete_item(self, context: SessionContext, item_id: uuid.UUID) -> None:
        item = self.get_item(item_id)
        require_item_owner(item, context, "delete it")

        with self.gateway.transaction():
            for collection in ("notifications", "messages", "comments", "item_claims"):
                self.gateway.delete(collection, {"item_id": item_id})
            self.gateway.delete("items", {"id": item_id, "user_id": context.user_id})

        logger.info("Item %s deleted by owner", item_id)
