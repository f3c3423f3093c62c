"""
Field validation rules for users, stores and ratings.

Each validator is pure and returns the first rule the value breaks.
"""
import re
from typing import Any, NamedTuple, Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
UPPERCASE_PATTERN = re.compile(r"[A-Z]")
SPECIAL_CHAR_PATTERN = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")

NAME_MIN_LENGTH = 20
NAME_MAX_LENGTH = 60
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 16
ADDRESS_MAX_LENGTH = 400
RATING_MIN = 1
RATING_MAX = 5


class ValidationResult(NamedTuple):
    valid: bool
    error: Optional[str] = None


VALID = ValidationResult(True)


def _invalid(message: str) -> ValidationResult:
    return ValidationResult(False, message)


def validate_name(name: Any) -> ValidationResult:
    """Name must be 20-60 characters after trimming."""
    if not name or not isinstance(name, str):
        return _invalid("Name is required and must be a string")

    trimmed = name.strip()
    if len(trimmed) < NAME_MIN_LENGTH:
        return _invalid(f"Name must be at least {NAME_MIN_LENGTH} characters long")
    if len(trimmed) > NAME_MAX_LENGTH:
        return _invalid(f"Name must not exceed {NAME_MAX_LENGTH} characters")
    return VALID


def validate_email(email: Any) -> ValidationResult:
    """Basic ``local@domain.tld`` shape, not full RFC validation."""
    if not email or not isinstance(email, str):
        return _invalid("Email is required and must be a string")

    if not EMAIL_PATTERN.match(email):
        return _invalid("Email must be in valid format")
    return VALID


def validate_password(password: Any) -> ValidationResult:
    """8-16 characters (untrimmed), one uppercase letter and one special character."""
    if not password or not isinstance(password, str):
        return _invalid("Password is required and must be a string")

    if len(password) < PASSWORD_MIN_LENGTH:
        return _invalid(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if len(password) > PASSWORD_MAX_LENGTH:
        return _invalid(f"Password must not exceed {PASSWORD_MAX_LENGTH} characters")
    if not UPPERCASE_PATTERN.search(password):
        return _invalid("Password must contain at least one uppercase letter")
    if not SPECIAL_CHAR_PATTERN.search(password):
        return _invalid("Password must contain at least one special character")
    return VALID


def validate_address(address: Any) -> ValidationResult:
    if not address or not isinstance(address, str):
        return _invalid("Address is required and must be a string")

    trimmed = address.strip()
    if not trimmed:
        return _invalid("Address cannot be empty")
    if len(trimmed) > ADDRESS_MAX_LENGTH:
        return _invalid(f"Address must not exceed {ADDRESS_MAX_LENGTH} characters")
    return VALID


def validate_rating(rating: Any) -> ValidationResult:
    """Integer in [1, 5]. Integral floats such as ``4.0`` are accepted."""
    if rating is None:
        return _invalid("Rating is required")

    # bool is an int subclass but never a rating
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        return _invalid("Rating must be a number")
    if isinstance(rating, float) and not rating.is_integer():
        return _invalid("Rating must be an integer")
    if rating < RATING_MIN or rating > RATING_MAX:
        return _invalid(f"Rating must be between {RATING_MIN} and {RATING_MAX}")
    return VALID
