"""
Error taxonomy shared by services, dependencies and routes.

Every error carries a short, user-safe message. The HTTP layer maps the
``status_code`` and ``code`` class attributes to the response.
"""


class AppError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class InvalidRoleError(ValidationError):
    code = "INVALID_ROLE"
    default_message = "Invalid role. Must be SYSTEM_ADMIN, NORMAL_USER, or STORE_OWNER"


# Conflicts

class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class DuplicateEmailError(ConflictError):
    code = "DUPLICATE_EMAIL"
    default_message = "Email already exists"


class StoreAlreadyOwnedError(ConflictError):
    code = "STORE_ALREADY_OWNED"
    default_message = "Store already has an owner"


class DuplicateRatingError(ConflictError):
    code = "DUPLICATE_RATING"
    default_message = "Rating already exists for this store. Use update instead."


# Missing entities

class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"
    default_message = "User not found"


class StoreNotFoundError(NotFoundError):
    code = "STORE_NOT_FOUND"
    default_message = "Store not found"


class RatingNotFoundError(NotFoundError):
    code = "RATING_NOT_FOUND"
    default_message = "Rating not found"


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "You do not have permission to access this resource"


# Authentication

class AuthenticationError(AppError):
    status_code = 401
    code = "UNAUTHENTICATED"
    default_message = "Authentication required"


class UnauthenticatedError(AuthenticationError):
    pass


class MissingTokenError(AuthenticationError):
    code = "MISSING_TOKEN"
    default_message = "Authorization header is required"


class InvalidTokenFormatError(AuthenticationError):
    code = "INVALID_TOKEN_FORMAT"
    default_message = "Authorization header must be in format: Bearer <token>"


class InvalidTokenError(AuthenticationError):
    code = "INVALID_TOKEN"
    default_message = "Invalid or expired token"


class InvalidCredentialsError(AuthenticationError):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"
