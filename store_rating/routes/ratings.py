import logging

from fastapi import APIRouter, Depends, Path, status

from store_rating.core.dependencies import (
    authenticate,
    authorize,
    get_data_access,
    get_rating_service,
)
from store_rating.core.exceptions import ForbiddenError, StoreNotFoundError, ValidationError
from store_rating.core.responses import success
from store_rating.database import MAX_ID
from store_rating.models.user import Role
from store_rating.repositories import DataAccess
from store_rating.schemas.auth import Identity
from store_rating.schemas.ratings import RatingCreateRequest, RatingUpdateRequest
from store_rating.services import RatingService

router = APIRouter(tags=["ratings"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=status.HTTP_201_CREATED, dependencies=[Depends(authenticate)])
async def create_rating(
    payload: RatingCreateRequest,
    current_user: Identity = Depends(authorize(Role.NORMAL_USER)),
    rating_service: RatingService = Depends(get_rating_service),
):
    """Submit a rating - normal users only"""
    if payload.store_id is None or payload.value is None:
        raise ValidationError("Store ID and rating value are required")

    rating = rating_service.create_rating(current_user.subject_id, payload.store_id, payload.value)
    return success({"rating": rating})


@router.put("/{rating_id}", dependencies=[Depends(authenticate)])
async def update_rating(
    payload: RatingUpdateRequest,
    rating_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: Identity = Depends(authorize(Role.NORMAL_USER)),
    rating_service: RatingService = Depends(get_rating_service),
):
    """Change the value of your own rating - normal users only"""
    if payload.value is None:
        raise ValidationError("Rating value is required")

    rating = rating_service.update_rating(rating_id, current_user.subject_id, payload.value)
    return success({"rating": rating})


@router.get("/store/{store_id}", dependencies=[Depends(authenticate)])
async def get_ratings_for_store(
    store_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: Identity = Depends(authorize(Role.STORE_OWNER, Role.SYSTEM_ADMIN)),
    data: DataAccess = Depends(get_data_access),
    rating_service: RatingService = Depends(get_rating_service),
):
    """Ratings for a store - store owners for their own store, admins for any store"""
    if data.stores.get(store_id) is None:
        raise StoreNotFoundError()

    if current_user.role == Role.STORE_OWNER:
        owner = data.users.get(current_user.subject_id)
        if owner is None or owner.store_id != store_id:
            raise ForbiddenError("You can only view ratings for your own store")

    ratings = rating_service.get_ratings_for_store(store_id)
    return success({"ratings": ratings})
