from enum import Enum
from typing import Optional
import uuid
from sqlmodel import Field, SQLModel
from datetime import date as dt_date, datetime, timezone

class ItemType(str, Enum):
    lost = "lost"
    found = "found"

class ItemStatus(str, Enum):
    open = "open"
    in_progress = "in_progress"
    resolved = "resolved"

class ItemCategory(str, Enum):
    electronics = "electronics"
    clothing = "clothing"
    accessories = "accessories"
    documents = "documents"
    other = "other"

class Item(SQLModel, table=True):
    __tablename__ = "items"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Reporter info
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    # Item fields
    title: str
    description: str
    category: ItemCategory = Field(index=True)
    location: str
    type: ItemType = Field(index=True)
    date: dt_date
    image_url: Optional[str] = Field(default=None)

    # Lifecycle: open -> in_progress -> resolved (owner may move freely, claim approval resolves)
    status: ItemStatus = Field(default=ItemStatus.open, index=True)
