from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from store_rating.database import MAX_ID


class RatingCreateRequest(BaseModel):
    store_id: Optional[int] = Field(None, ge=1, le=MAX_ID, description="Store being rated")
    # Checked by the rating validator so that 3.5 or "4" get the same messages as elsewhere
    value: Any = Field(None, description="Rating value, integer 1-5")

    class Config:
        json_schema_extra = {
            "example": {"store_id": 1, "value": 4}
        }


class RatingUpdateRequest(BaseModel):
    value: Any = Field(None, description="New rating value, integer 1-5")


class RatingResponse(BaseModel):
    id: int
    value: int
    user_id: int
    store_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RatingUser(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class RatingWithUser(RatingResponse):
    user: RatingUser
