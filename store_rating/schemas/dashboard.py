from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class AdminStats(BaseModel):
    total_users: int
    total_stores: int
    total_ratings: int


class OwnerRating(BaseModel):
    id: int
    value: int
    user_name: str
    user_email: str
    created_at: Optional[datetime] = None


class OwnerStats(BaseModel):
    average_rating: Optional[float] = None
    total_ratings: int
    ratings: List[OwnerRating]
