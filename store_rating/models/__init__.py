# package marker for store_rating.models

# Import all models to ensure relationships are properly initialized
from store_rating.models.user import Role, User
from store_rating.models.stores import Store
from store_rating.models.ratings import Rating

__all__ = [
    "Role",
    "User",
    "Store",
    "Rating",
]
