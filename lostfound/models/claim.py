from enum import Enum
from typing import Optional
import uuid
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone

class ClaimStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"

class ItemClaim(SQLModel, table=True):
    __tablename__ = "item_claims"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Linked item
    item_id: uuid.UUID = Field(foreign_key="items.id", index=True, ondelete="CASCADE")

    # Claimant
    claimed_by: uuid.UUID = Field(foreign_key="users.id", index=True) # for sending notifications

    # Public URL of an image in the "proofs" bucket
    proof_of_ownership: str

    status: ClaimStatus = Field(default=ClaimStatus.pending, index=True)
    admin_notes: Optional[str] = None
