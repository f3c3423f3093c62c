from fastapi import APIRouter, Depends

from store_rating.core.dependencies import authenticate, authorize, get_dashboard_service
from store_rating.core.responses import success
from store_rating.models.user import Role
from store_rating.schemas.auth import Identity
from store_rating.services import DashboardService

router = APIRouter(tags=["dashboard"])


@router.get("/admin", dependencies=[Depends(authenticate), Depends(authorize(Role.SYSTEM_ADMIN))])
async def get_admin_dashboard(dashboard_service: DashboardService = Depends(get_dashboard_service)):
    return success(dashboard_service.get_admin_stats())


@router.get("/owner", dependencies=[Depends(authenticate)])
async def get_owner_dashboard(
    current_user: Identity = Depends(authorize(Role.STORE_OWNER)),
    dashboard_service: DashboardService = Depends(get_dashboard_service),
):
    return success(dashboard_service.get_owner_stats(current_user.subject_id))
