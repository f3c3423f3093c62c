import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, status

from store_rating.core.dependencies import authenticate, authorize, get_store_service
from store_rating.core.exceptions import StoreNotFoundError
from store_rating.core.responses import success
from store_rating.database import MAX_ID
from store_rating.models.user import Role
from store_rating.schemas.auth import Identity
from store_rating.schemas.stores import StoreCreateRequest
from store_rating.services import StoreService

router = APIRouter(tags=["stores"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=status.HTTP_201_CREATED, dependencies=[Depends(authenticate)])
async def create_store(
    store_data: StoreCreateRequest,
    current_user: Identity = Depends(authorize(Role.SYSTEM_ADMIN)),
    store_service: StoreService = Depends(get_store_service),
):
    """Create a new store - only admin can create"""
    store = store_service.create_store(
        name=store_data.name,
        email=store_data.email,
        address=store_data.address,
    )
    logger.info(f"Admin {current_user.subject_id} created store {store.id}")
    return success({"store": store})


@router.get("/")
async def get_stores(
    name: Optional[str] = None,
    email: Optional[str] = None,
    address: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    current_user: Identity = Depends(authenticate),
    store_service: StoreService = Depends(get_store_service),
):
    """Get all stores with filtering, search and sorting - all authenticated users can view"""
    stores = store_service.get_all_stores_with_ratings(
        user_id=current_user.subject_id,
        name=name,
        email=email,
        address=address,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return success({"stores": stores})


@router.get("/{store_id}")
async def get_store(
    store_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: Identity = Depends(authenticate),
    store_service: StoreService = Depends(get_store_service),
):
    """Get a specific store with its rating summary and the caller's own rating"""
    store = store_service.get_store_with_ratings(store_id, user_id=current_user.subject_id)
    if store is None:
        raise StoreNotFoundError()
    return success({"store": store})
