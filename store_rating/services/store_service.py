import logging
from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError

from store_rating.core.exceptions import DuplicateEmailError
from store_rating.repositories import DataAccess
from store_rating.schemas.stores import StoreResponse, StoreWithRatings, UserRatingSummary
from store_rating.services.common import check_sort, ensure_valid
from store_rating.utils.validation import validate_address, validate_email, validate_name

logger = logging.getLogger(__name__)

DUPLICATE_STORE_EMAIL = "Store email already exists"


class StoreService:
    def __init__(self, data: DataAccess):
        self.data = data

    def create_store(self, name: Any, email: Any, address: Any) -> StoreResponse:
        ensure_valid(validate_name(name))
        ensure_valid(validate_email(email))
        ensure_valid(validate_address(address))

        if self.data.stores.get_by_email(email) is not None:
            logger.warning("Rejected store creation: email already registered")
            raise DuplicateEmailError(DUPLICATE_STORE_EMAIL)

        try:
            store = self.data.stores.create(name=name.strip(), email=email, address=address.strip())
        except IntegrityError:
            raise DuplicateEmailError(DUPLICATE_STORE_EMAIL)

        logger.info(f"Created store {store.id}")
        return StoreResponse.model_validate(store)

    def get_store_by_id(self, store_id: int) -> Optional[StoreResponse]:
        store = self.data.stores.get(store_id)
        if store is None:
            return None
        return StoreResponse.model_validate(store)

    def get_all_stores(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> List[StoreResponse]:
        """
        List stores.

        ``search`` matches name or address case-insensitively and, when
        given, the name/email/address filters are ignored.
        """
        sort_by, sort_order = check_sort(sort_by, sort_order)
        stores = self.data.stores.find(
            name=name,
            email=email,
            address=address,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return [StoreResponse.model_validate(store) for store in stores]

    def calculate_average_rating(self, store_id: int) -> Optional[float]:
        """Mean rating value for the store, or None when it has no ratings."""
        average, _ = self.data.ratings.aggregate_for_store(store_id)
        return average

    def get_store_with_ratings(self, store_id: int, user_id: Optional[int] = None) -> Optional[StoreWithRatings]:
        store = self.data.stores.get(store_id)
        if store is None:
            return None

        average, total = self.data.ratings.aggregate_for_store(store_id)

        user_rating = None
        if user_id is not None:
            rating = self.data.ratings.get_by_user_and_store(user_id, store_id)
            if rating is not None:
                user_rating = UserRatingSummary.model_validate(rating)

        return StoreWithRatings(
            **StoreResponse.model_validate(store).model_dump(),
            average_rating=average,
            total_ratings=total,
            user_rating=user_rating,
        )

    def get_all_stores_with_ratings(self, user_id: Optional[int] = None, **filters) -> List[StoreWithRatings]:
        """Store listing where every store carries its rating summary and the caller's own rating."""
        stores = self.get_all_stores(**filters)
        store_ids = [store.id for store in stores]
        aggregates = self.data.ratings.aggregate_for_stores(store_ids)

        own_ratings = {}
        if user_id is not None:
            ratings = self.data.ratings.list_for_user_and_stores(user_id, store_ids)
            own_ratings = {rating.store_id: rating for rating in ratings}

        results = []
        for store in stores:
            average, total = aggregates.get(store.id, (None, 0))
            rating = own_ratings.get(store.id)
            results.append(
                StoreWithRatings(
                    **store.model_dump(),
                    average_rating=average,
                    total_ratings=total,
                    user_rating=UserRatingSummary.model_validate(rating) if rating is not None else None,
                )
            )
        return results
