import uuid
from typing import Literal, Optional
from pydantic import BaseModel, Field


class ClaimCreateRequest(BaseModel):
    item_id: uuid.UUID
    proof_of_ownership: str = Field(min_length=1)

class ClaimDecisionRequest(BaseModel):
    item_id: uuid.UUID
    decision: Literal["approved", "rejected"]
    admin_notes: Optional[str] = Field(None, max_length=280)
