from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class StoreCreateRequest(BaseModel):
    name: Optional[str] = Field(None, description="Store name (20-60 characters)")
    email: Optional[str] = Field(None, description="Store email address")
    address: Optional[str] = Field(None, description="Store address (max 400 characters)")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Springfield General Grocery",
                "email": "grocery@example.com",
                "address": "10 Elm Street, Springfield"
            }
        }


class StoreResponse(BaseModel):
    id: int
    name: str
    email: str
    address: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserRatingSummary(BaseModel):
    id: int
    value: int

    class Config:
        from_attributes = True


class StoreWithRatings(StoreResponse):
    average_rating: Optional[float] = None
    total_ratings: int = 0
    user_rating: Optional[UserRatingSummary] = None
