from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from store_rating.models.user import Role


class LoginRequest(BaseModel):
    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="User password")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "user@example.com",
                "password": "Secret@123"
            }
        }


class RegisterRequest(BaseModel):
    name: Optional[str] = Field(None, description="Full name (20-60 characters)")
    email: Optional[str] = Field(None, description="Email address")
    password: Optional[str] = Field(None, description="8-16 characters, one uppercase letter and one special character")
    address: Optional[str] = Field(None, description="Address (max 400 characters)")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Jonathan Alexander Smith",
                "email": "jonathan@example.com",
                "password": "Secret@123",
                "address": "1 Main Street, Springfield"
            }
        }


class TokenData(BaseModel):
    subject_id: int
    role: Role
    issued_at: datetime
    expires_at: datetime


class Identity(BaseModel):
    """Caller identity attached to the request once the bearer token checks out."""
    subject_id: int
    role: Role
