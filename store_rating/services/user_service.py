import logging
from typing import Any, List, Optional, Union

from sqlalchemy.exc import IntegrityError

from store_rating.core.exceptions import (
    DuplicateEmailError,
    StoreAlreadyOwnedError,
    StoreNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from store_rating.core.security import hash_password, verify_password
from store_rating.models.user import Role
from store_rating.repositories import DataAccess
from store_rating.schemas.user import UserCredentials, UserDetail, UserResponse, UserWithRating
from store_rating.services.common import check_sort, ensure_valid, parse_role
from store_rating.utils.validation import (
    validate_address,
    validate_email,
    validate_name,
    validate_password,
)

logger = logging.getLogger(__name__)

SAME_PASSWORD_MESSAGE = (
    "New password cannot be the same as your current password. "
    "Please choose a different password."
)


class UserService:
    def __init__(self, data: DataAccess):
        self.data = data

    def create_user(
        self,
        name: Any,
        email: Any,
        password: Any,
        address: Any,
        role: Role = Role.NORMAL_USER,
        store_id: Optional[int] = None,
    ) -> UserResponse:
        """
        Validate and persist a new user.

        Validators run in order name, email, password, address and the first
        failure is raised. The returned record never carries the password.
        """
        ensure_valid(validate_name(name))
        ensure_valid(validate_email(email))
        ensure_valid(validate_password(password))
        ensure_valid(validate_address(address))
        role = parse_role(role)

        if store_id is not None:
            if role != Role.STORE_OWNER:
                raise ValidationError("Only store owners can be linked to a store")
            if self.data.stores.get(store_id) is None:
                raise StoreNotFoundError()
            if self.data.users.get_by_store(store_id) is not None:
                raise StoreAlreadyOwnedError()

        if self.data.users.get_by_email(email) is not None:
            logger.warning("Rejected user creation: email already registered")
            raise DuplicateEmailError("Email already exists")

        hashed = hash_password(password)
        try:
            user = self.data.users.create(
                name=name.strip(),
                email=email,
                hashed_password=hashed,
                address=address.strip(),
                role=role,
                store_id=store_id,
            )
        except IntegrityError:
            # Lost a race with a concurrent insert; the constraint is authoritative
            if self.data.users.get_by_email(email) is not None:
                raise DuplicateEmailError("Email already exists")
            if store_id is not None and self.data.stores.get(store_id) is None:
                raise StoreNotFoundError()
            raise StoreAlreadyOwnedError()

        logger.info(f"Created user {user.id} with role {user.role.value}")
        return UserResponse.model_validate(user)

    def get_user_by_id(self, user_id: int) -> Optional[UserDetail]:
        user = self.data.users.get_with_store(user_id)
        if user is None:
            return None
        return UserDetail.model_validate(user)

    def get_user_by_email(
        self, email: str, include_password: bool = False
    ) -> Optional[Union[UserResponse, UserCredentials]]:
        user = self.data.users.get_by_email(email)
        if user is None:
            return None
        if include_password:
            return UserCredentials.model_validate(user)
        return UserResponse.model_validate(user)

    def update_password(self, user_id: int, new_password: Any) -> UserResponse:
        ensure_valid(validate_password(new_password))

        user = self.data.users.get(user_id)
        if user is None:
            raise UserNotFoundError()

        if verify_password(new_password, user.hashed_password):
            raise ValidationError(SAME_PASSWORD_MESSAGE)

        user = self.data.users.update(user, hashed_password=hash_password(new_password))
        logger.info(f"Password updated for user {user.id}")
        return UserResponse.model_validate(user)

    def get_all_users(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[str] = None,
        role: Optional[Role] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> List[UserResponse]:
        sort_by, sort_order = check_sort(sort_by, sort_order)
        users = self.data.users.find(
            name=name,
            email=email,
            address=address,
            role=parse_role(role) if role else None,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return [UserResponse.model_validate(user) for user in users]

    def get_all_users_with_ratings(self, **filters) -> List[UserWithRating]:
        """Admin listing: store owners carry their store's average rating."""
        users = self.get_all_users(**filters)
        aggregates = self.data.ratings.aggregate_for_stores(
            user.store_id for user in users if user.role == Role.STORE_OWNER and user.store_id is not None
        )

        results = []
        for user in users:
            entry = UserWithRating(**user.model_dump())
            if user.store_id in aggregates:
                entry.average_rating = aggregates[user.store_id][0]
            results.append(entry)
        return results
