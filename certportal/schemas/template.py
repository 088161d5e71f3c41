"""
Pydantic schemas for certificate templates.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, StrictBool


class TemplateResponse(BaseModel):
    id: int
    template: str = Field(..., description="Image as a base64 data URL")
    company_id: int
    company_name: Optional[str] = None
    is_selected: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TemplateSelectionUpdate(BaseModel):
    is_selected: StrictBool
