import re
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class ProfileUpdatePayload(BaseModel):
    full_name: Optional[str] = Field(None, max_length=100)
    student_id: Optional[str] = Field(None, max_length=30)
    department: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = None
    year_of_study: Optional[int] = Field(None, ge=1, le=10)

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v):
        if v is None:
            return v
        if not isinstance(v, str):
            raise ValueError("Phone number must be a string")

        phone = v.strip()
        phone = re.sub(r"[ \-\(\)]", "", phone)

        # E.164: + followed by 8–15 digits
        if not re.fullmatch(r"\+[1-9]\d{7,14}", phone):
            raise ValueError(
                "Invalid phone number. Use format: +<countrycode><number>"
            )

        return phone
