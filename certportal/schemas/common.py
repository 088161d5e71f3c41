"""
Pydantic schemas shared by the named lookup entities (courses, colleges, companies).
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


def strip_required(value: str) -> str:
    """Trim a required text field and reject it when nothing is left."""
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class NamedEntityCreate(BaseModel):
    """Create/update payload for an entity identified by a unique name."""
    name: str = Field(..., description="Unique display name", min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return strip_required(v)

    class Config:
        json_schema_extra = {"example": {"name": "Anna University"}}


class NamedEntityResponse(BaseModel):
    id: int = Field(..., description="Primary key")
    name: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
