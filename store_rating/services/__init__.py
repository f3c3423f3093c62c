from store_rating.services.dashboard_service import DashboardService
from store_rating.services.rating_service import RatingService
from store_rating.services.store_service import StoreService
from store_rating.services.user_service import UserService

__all__ = [
    "DashboardService",
    "RatingService",
    "StoreService",
    "UserService",
]
