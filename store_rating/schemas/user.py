from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from store_rating.database import MAX_ID
from store_rating.models.user import Role


class UserCreateRequest(BaseModel):
    name: Optional[str] = Field(None, description="Full name (20-60 characters)")
    email: Optional[str] = Field(None, description="Email address")
    password: Optional[str] = Field(None, description="8-16 characters, one uppercase letter and one special character")
    address: Optional[str] = Field(None, description="Address (max 400 characters)")
    role: Optional[str] = Field(None, description="SYSTEM_ADMIN, NORMAL_USER or STORE_OWNER (default NORMAL_USER)")
    store_id: Optional[int] = Field(None, ge=1, le=MAX_ID, description="Store owned by the user (store owners only)")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Margaret Elizabeth Owner",
                "email": "owner@example.com",
                "password": "Owner@1234",
                "address": "22 Market Road",
                "role": "STORE_OWNER",
                "store_id": 1
            }
        }


class PasswordUpdateRequest(BaseModel):
    new_password: Optional[str] = Field(None, description="New password")


class StoreSummary(BaseModel):
    id: int
    name: str
    email: str
    address: str

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    address: str
    role: Role
    store_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserDetail(UserResponse):
    store: Optional[StoreSummary] = None


class UserCredentials(UserResponse):
    """Only produced for the login lookup."""
    hashed_password: str


class UserWithRating(UserResponse):
    average_rating: Optional[float] = None
