from enum import Enum
from typing import Optional
import uuid
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone

class NotificationType(str, Enum):
    message = "message"
    claim_submitted = "claim_submitted"
    claim_approved = "claim_approved"
    claim_rejected = "claim_rejected"

class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Recipient
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    # Notification fields
    type: NotificationType = Field(index=True) # only for icon selection

    content: str

    item_id: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="items.id",
        index=True,
        ondelete="CASCADE"
    )

    # Who triggered it (sender, claimant, item owner)
    actor_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id")

    read: bool = Field(default=False)
