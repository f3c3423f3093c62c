import logging
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from store_rating.core.exceptions import (
    ForbiddenError,
    InvalidTokenFormatError,
    MissingTokenError,
    UnauthenticatedError,
)
from store_rating.core.security import verify_access_token
from store_rating.database import get_db
from store_rating.models.user import Role
from store_rating.repositories import DataAccess
from store_rating.schemas.auth import Identity
from store_rating.services import DashboardService, RatingService, StoreService, UserService

logger = logging.getLogger(__name__)


def authenticate(request: Request) -> Identity:
    """
    Dependency that verifies the ``Authorization: Bearer <token>`` header.

    On success the caller identity is stored on ``request.state.identity``
    and returned. Any failure ends the request with a 401.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise MissingTokenError()

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise InvalidTokenFormatError()

    settings = getattr(request.app.state, "settings", None)
    token_data = verify_access_token(parts[1], settings=settings)

    identity = Identity(subject_id=token_data.subject_id, role=token_data.role)
    request.state.identity = identity
    return identity


def authorize(*allowed_roles) -> Callable[[Request], Identity]:
    """
    Dependency factory to check the caller has one of the allowed roles.
    Usage: Depends(authorize(Role.SYSTEM_ADMIN, Role.STORE_OWNER))

    Must run after ``authenticate``; without an identity on the request the
    guard answers 401.
    """
    roles = frozenset(Role(role) for role in allowed_roles)
    if not roles:
        raise ValueError("authorize() needs at least one role")

    def role_checker(request: Request) -> Identity:
        identity = getattr(request.state, "identity", None)
        if identity is None:
            raise UnauthenticatedError()
        if identity.role not in roles:
            logger.warning(f"User {identity.subject_id} with role {identity.role.value} denied access to {request.url.path}")
            raise ForbiddenError()
        return identity

    return role_checker


def get_data_access(db: Session = Depends(get_db)) -> DataAccess:
    return DataAccess(db)


def get_user_service(data: DataAccess = Depends(get_data_access)) -> UserService:
    return UserService(data)


def get_store_service(data: DataAccess = Depends(get_data_access)) -> StoreService:
    return StoreService(data)


def get_rating_service(data: DataAccess = Depends(get_data_access)) -> RatingService:
    return RatingService(data)


def get_dashboard_service(data: DataAccess = Depends(get_data_access)) -> DashboardService:
    return DashboardService(data)
