import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, status

from store_rating.core.dependencies import (
    authenticate,
    authorize,
    get_store_service,
    get_user_service,
)
from store_rating.core.exceptions import ForbiddenError, UserNotFoundError, ValidationError
from store_rating.core.responses import success
from store_rating.database import MAX_ID
from store_rating.models.user import Role
from store_rating.schemas.auth import Identity
from store_rating.schemas.user import PasswordUpdateRequest, UserCreateRequest
from store_rating.services import StoreService, UserService
from store_rating.services.common import parse_role

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/", status_code=status.HTTP_201_CREATED, dependencies=[Depends(authenticate)])
async def create_user(
    payload: UserCreateRequest,
    current_user: Identity = Depends(authorize(Role.SYSTEM_ADMIN)),
    user_service: UserService = Depends(get_user_service),
):
    """Create a user with any role - requires admin role"""
    role = parse_role(payload.role) if payload.role else Role.NORMAL_USER
    user = user_service.create_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        address=payload.address,
        role=role,
        store_id=payload.store_id,
    )
    logger.info(f"Admin {current_user.subject_id} created user {user.id}")
    return success({"user": user})


@router.get("/", dependencies=[Depends(authenticate), Depends(authorize(Role.SYSTEM_ADMIN))])
async def get_users(
    name: Optional[str] = None,
    email: Optional[str] = None,
    address: Optional[str] = None,
    role: Optional[str] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    user_service: UserService = Depends(get_user_service),
):
    """Get all users with filtering and sorting - requires admin role"""
    users = user_service.get_all_users_with_ratings(
        name=name,
        email=email,
        address=address,
        role=role,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return success({"users": users})


@router.get("/{user_id}", dependencies=[Depends(authenticate), Depends(authorize(Role.SYSTEM_ADMIN))])
async def get_user(
    user_id: int = Path(..., ge=1, le=MAX_ID),
    user_service: UserService = Depends(get_user_service),
    store_service: StoreService = Depends(get_store_service),
):
    """Get a specific user - requires admin role. Store owners include their store's average rating"""
    user = user_service.get_user_by_id(user_id)
    if user is None:
        raise UserNotFoundError()

    user_data = user.model_dump()
    if user.role == Role.STORE_OWNER and user.store_id is not None:
        user_data["average_rating"] = store_service.calculate_average_rating(user.store_id)
    return success({"user": user_data})


@router.put("/{user_id}/password")
async def update_password(
    payload: PasswordUpdateRequest,
    user_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: Identity = Depends(authenticate),
    user_service: UserService = Depends(get_user_service),
):
    """Users can only update their own password unless admin"""
    if current_user.subject_id != user_id and current_user.role != Role.SYSTEM_ADMIN:
        raise ForbiddenError("You can only update your own password")

    if not payload.new_password:
        raise ValidationError("New password is required")

    user = user_service.update_password(user_id, payload.new_password)
    return success({"user": user}, message="Password updated successfully")
