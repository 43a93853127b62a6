import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class SignUpPayload(BaseModel):
    email: str
    password: str = Field(max_length=128)
    full_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        if not isinstance(v, str):
            raise ValueError("Email must be a string")

        email = v.strip().lower()
        if not re.fullmatch(r"[^@\s]+@[^@\s]+\.[^@\s]+", email):
            raise ValueError("Invalid email address")

        return email


class SignInPayload(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user_id: str
