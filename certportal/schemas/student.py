"""
Pydantic schemas for student endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, StrictBool, field_validator

from certportal.schemas.common import strip_required


class StudentCreate(BaseModel):
    """Schema for the add-student dialog."""
    name: str = Field(..., min_length=1, max_length=255, description="Student name")
    phone: str = Field(..., min_length=1, max_length=32, description="Phone number (unique)")
    year: Optional[int] = Field(None, ge=1, le=9999, description="Year of study or passing")
    branch: Optional[str] = Field(None, max_length=255)
    college_id: Optional[int] = Field(None, description="College reference")

    @field_validator("name", "phone")
    @classmethod
    def required_not_blank(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("branch")
    @classmethod
    def blank_branch_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Priya Sharma",
                "phone": "9876543210",
                "year": 2024,
                "branch": "Computer Science",
                "college_id": 1
            }
        }


class StudentUpdate(BaseModel):
    """Schema for the edit-student dialog. Only provided fields are updated."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, min_length=1, max_length=32)
    year: Optional[int] = Field(None, ge=1, le=9999)
    branch: Optional[str] = Field(None, max_length=255)
    college_id: Optional[int] = None
    certificate_id: Optional[str] = Field(None, max_length=64)
    downloaded_count: Optional[int] = Field(None, ge=0)

    @field_validator("name", "phone")
    @classmethod
    def required_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return strip_required(v) if v is not None else None


class StudentResponse(BaseModel):
    id: int
    name: str
    phone: str
    year: Optional[int] = None
    branch: Optional[str] = None
    college_id: Optional[int] = None
    college_name: Optional[str] = None
    certificate_id: Optional[str] = None
    eligible: bool = False
    certificate_approved: bool = False
    has_certificate: bool = False
    downloaded_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CertificateData(BaseModel):
    """Certificate row as fetched by the preview pipeline."""
    student_id: int
    name: str
    eligible: bool
    certificate_approved: bool
    certificate: Optional[str] = Field(None, description="Base64-encoded certificate image")


class ApprovalUpdate(BaseModel):
    approved: StrictBool


class EligibilityUpdate(BaseModel):
    """Body of PUT /v1/students/{id}/eligibility."""
    eligible: StrictBool

    class Config:
        json_schema_extra = {"example": {"eligible": True}}


class EligibilityResponse(BaseModel):
    success: bool = True
    student_id: int
    eligible: bool
