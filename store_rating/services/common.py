from typing import Any, Tuple

from store_rating.core.exceptions import InvalidRoleError, ValidationError
from store_rating.models.user import Role

SORTABLE_FIELDS = ("name", "email", "created_at")
SORT_ORDERS = ("asc", "desc")


def ensure_valid(*results) -> None:
    """Raise ValidationError with the message of the first failed check."""
    for result in results:
        if not result.valid:
            raise ValidationError(result.error)


def check_sort(sort_by: str, sort_order: str) -> Tuple[str, str]:
    sort_by = sort_by or "created_at"
    sort_order = (sort_order or "desc").lower()
    if sort_by not in SORTABLE_FIELDS:
        raise ValidationError(f"Invalid sort field. Must be one of: {', '.join(SORTABLE_FIELDS)}")
    if sort_order not in SORT_ORDERS:
        raise ValidationError("Invalid sort order. Must be asc or desc")
    return sort_by, sort_order


def parse_role(role: Any) -> Role:
    try:
        return Role(role)
    except ValueError:
        raise InvalidRoleError()
