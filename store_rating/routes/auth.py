import logging

from fastapi import APIRouter, Depends, Request, status

from store_rating.core.dependencies import authenticate, get_user_service
from store_rating.core.exceptions import InvalidCredentialsError, UserNotFoundError, ValidationError
from store_rating.core.responses import success
from store_rating.core.security import create_access_token, verify_password
from store_rating.models.user import Role
from store_rating.schemas.auth import Identity, LoginRequest, RegisterRequest
from store_rating.schemas.user import UserResponse
from store_rating.services import UserService

router = APIRouter()
logger = logging.getLogger(__name__)


def _public_user(user) -> dict:
    return UserResponse.model_validate(user).model_dump(include={"id", "name", "email", "address", "role", "store_id"})


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    request: Request,
    user_service: UserService = Depends(get_user_service),
):
    """Public endpoint to register a normal user"""
    user = user_service.create_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        address=payload.address,
        role=Role.NORMAL_USER,
    )
    token = create_access_token(user.id, user.role, settings=request.app.state.settings)
    return success({"token": token, "user": _public_user(user)})


@router.post("/login")
async def login(
    payload: LoginRequest,
    request: Request,
    user_service: UserService = Depends(get_user_service),
):
    if not payload.email or not payload.password:
        raise ValidationError("Email and password are required")

    user = user_service.get_user_by_email(payload.email, include_password=True)
    # same answer for unknown email and wrong password
    if user is None or not verify_password(payload.password, user.hashed_password):
        logger.info("Failed login attempt")
        raise InvalidCredentialsError()

    token = create_access_token(user.id, user.role, settings=request.app.state.settings)
    logger.info(f"User {user.id} logged in with role {user.role.value}")
    return success({"token": token, "user": _public_user(user)})


@router.post("/logout")
async def logout():
    # Tokens are stateless; the client drops its token
    return success(message="Logged out successfully")


@router.get("/me")
async def me(
    identity: Identity = Depends(authenticate),
    user_service: UserService = Depends(get_user_service),
):
    user = user_service.get_user_by_id(identity.subject_id)
    if user is None:
        raise UserNotFoundError()
    return success({"user": _public_user(user)})
