from datetime import date as dt_date
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

Category = Literal["electronics", "clothing", "accessories", "documents", "other"]


class ItemCreateSchema(BaseModel):
    title: str = Field(min_length=3, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    category: Category = "electronics"
    type: Literal["lost", "found"] = "lost"
    location: str = Field(min_length=2, max_length=100)
    date: dt_date
    image_url: Optional[str] = None

    @field_validator("title", "location", "description", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class ItemUpdateSchema(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    location: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    category: Optional[Category] = None
    type: Optional[Literal["lost", "found"]] = None
    date: Optional[dt_date] = None
    image_url: Optional[str] = None

    @field_validator("title", "location", "description", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class ItemStatusSchema(BaseModel):
    status: Literal["open", "in_progress", "resolved"]
