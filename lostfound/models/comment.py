import uuid
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class Comment(SQLModel, table=True):
    __tablename__ = "comments"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    item_id: uuid.UUID = Field(foreign_key="items.id", index=True, ondelete="CASCADE")
    user_id: uuid.UUID = Field(foreign_key="users.id")

    content: str
