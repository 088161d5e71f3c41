"""
Pydantic schemas for authentication endpoints.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from certportal.db.models.user import UserRole


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: UserRole


class UserCreate(BaseModel):
    """Admin-issued login for an admin or a student."""
    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    role: UserRole = Field(UserRole.STUDENT, description="admin or student")
    student_id: Optional[int] = Field(None, description="Student row this login belongs to")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """Validate password length in bytes (bcrypt limit is 72 bytes)."""
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password too long (bcrypt limit 72 bytes)")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "email": "student@example.com",
                "password": "SecurePass123",
                "role": "student",
                "student_id": 1
            }
        }


class UserResponse(BaseModel):
    id: int
    email: str
    role: UserRole
    student_id: Optional[int] = None

    class Config:
        from_attributes = True
