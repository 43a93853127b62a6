from typing import Optional
import uuid
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class Profile(SQLModel, table=True):
    __tablename__ = "profiles"

    # Same id as the owning user
    id: uuid.UUID = Field(foreign_key="users.id", primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Profile fields
    full_name: Optional[str] = Field(default=None)
    student_id: Optional[str] = Field(default=None)
    department: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    year_of_study: Optional[int] = Field(default=None)
    avatar_url: Optional[str] = Field(default=None)
