import logging
from typing import Any, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError

from store_rating.core.exceptions import (
    DuplicateRatingError,
    ForbiddenError,
    RatingNotFoundError,
    StoreNotFoundError,
    UserNotFoundError,
)
from store_rating.repositories import DataAccess
from store_rating.schemas.ratings import RatingResponse, RatingWithUser
from store_rating.services.common import ensure_valid
from store_rating.utils.validation import validate_rating

logger = logging.getLogger(__name__)


class RatingService:
    """
    One rating per (user, store) pair.

    A pair starts without a rating, ``create_rating`` moves it to rated and
    ``update_rating`` changes the value in place. There is no delete.
    """

    def __init__(self, data: DataAccess):
        self.data = data

    def create_rating(self, user_id: int, store_id: int, value: Any) -> RatingResponse:
        ensure_valid(validate_rating(value))

        if self.data.users.get(user_id) is None:
            raise UserNotFoundError()
        if self.data.stores.get(store_id) is None:
            raise StoreNotFoundError()

        # Advisory check; uq_rating_user_store settles concurrent submissions
        if self.data.ratings.get_by_user_and_store(user_id, store_id) is not None:
            logger.warning(f"User {user_id} already rated store {store_id}")
            raise DuplicateRatingError()

        try:
            rating = self.data.ratings.create(value=int(value), user_id=user_id, store_id=store_id)
        except IntegrityError:
            logger.warning(f"Duplicate rating for user {user_id} and store {store_id} rejected by the database")
            raise DuplicateRatingError()

        logger.info(f"User {user_id} rated store {store_id} with {rating.value}")
        return RatingResponse.model_validate(rating)

    def update_rating(self, rating_id: int, user_id: int, value: Any) -> RatingResponse:
        ensure_valid(validate_rating(value))

        rating = self.data.ratings.get(rating_id)
        if rating is None:
            raise RatingNotFoundError()

        if rating.user_id != user_id:
            logger.warning(f"User {user_id} tried to update rating {rating_id} owned by user {rating.user_id}")
            raise ForbiddenError("You can only update your own ratings")

        rating = self.data.ratings.update(rating, value=int(value))
        logger.info(f"Rating {rating.id} updated to {rating.value}")
        return RatingResponse.model_validate(rating)

    def get_rating_by_user_and_store(self, user_id: int, store_id: int) -> Optional[RatingResponse]:
        rating = self.data.ratings.get_by_user_and_store(user_id, store_id)
        if rating is None:
            return None
        return RatingResponse.model_validate(rating)

    def get_ratings_for_store(self, store_id: int) -> List[RatingWithUser]:
        """Ratings for the store with minimal rater info, newest first."""
        return [RatingWithUser.model_validate(rating) for rating in self.data.ratings.list_for_store(store_id)]

    def get_user_ratings_for_stores(self, user_id: int, store_ids: Iterable[int]) -> List[RatingResponse]:
        ratings = self.data.ratings.list_for_user_and_stores(user_id, store_ids)
        return [RatingResponse.model_validate(rating) for rating in ratings]
