import logging

from store_rating.core.exceptions import ForbiddenError, UserNotFoundError
from store_rating.models.user import Role
from store_rating.repositories import DataAccess
from store_rating.schemas.dashboard import AdminStats, OwnerRating, OwnerStats

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, data: DataAccess):
        self.data = data

    def get_admin_stats(self) -> AdminStats:
        return AdminStats(
            total_users=self.data.users.count(),
            total_stores=self.data.stores.count(),
            total_ratings=self.data.ratings.count(),
        )

    def get_owner_stats(self, owner_id: int) -> OwnerStats:
        """Rating summary for the owner's own store only."""
        owner = self.data.users.get(owner_id)
        if owner is None:
            raise UserNotFoundError()
        if owner.role != Role.STORE_OWNER:
            raise ForbiddenError("User is not a store owner")
        if owner.store_id is None:
            raise ForbiddenError("Store owner has no associated store")

        average, total = self.data.ratings.aggregate_for_store(owner.store_id)
        ratings = [
            OwnerRating(
                id=rating.id,
                value=rating.value,
                user_name=rating.user.name,
                user_email=rating.user.email,
                created_at=rating.created_at,
            )
            for rating in self.data.ratings.list_for_store(owner.store_id)
        ]
        return OwnerStats(average_rating=average, total_ratings=total, ratings=ratings)
