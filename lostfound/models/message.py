import uuid
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class Message(SQLModel, table=True):
    __tablename__ = "messages"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Messages are always about one item
    item_id: uuid.UUID = Field(foreign_key="items.id", index=True, ondelete="CASCADE")

    sender_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    recipient_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    content: str
