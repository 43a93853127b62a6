from typing import Optional
import uuid
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Credentials
    email: str = Field(index=True, unique=True)  # stored lower-cased
    password_hash: str


class UserSession(SQLModel, table=True):
    __tablename__ = "user_sessions"

    # Doubles as the ``jti`` of the access token issued for this session
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    user_id: uuid.UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")

    expires_at: datetime
    revoked_at: Optional[datetime] = Field(default=None)
