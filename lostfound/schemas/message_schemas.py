import uuid
from pydantic import BaseModel, Field


class MessageCreateRequest(BaseModel):
    item_id: uuid.UUID
    recipient_id: uuid.UUID
    content: str = Field(max_length=2000)

class CommentCreateRequest(BaseModel):
    content: str = Field(max_length=2000)
