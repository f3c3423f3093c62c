import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from store_rating.core.config import Settings, get_settings
from store_rating.core.exceptions import InvalidTokenError
from store_rating.models.user import Role
from store_rating.schemas.auth import TokenData

logger = logging.getLogger(__name__)


@lru_cache()
def _password_context(scheme: str) -> CryptContext:
    return CryptContext(
        schemes=[scheme],
        default=scheme,
        deprecated="auto",
    )


def hash_password(plain_password: str, settings: Optional[Settings] = None) -> str:
    """One-way salted hash; two calls on the same password give different hashes."""
    settings = settings or get_settings()
    return _password_context(settings.password_hash_scheme).hash(plain_password)


def verify_password(plain_password: str, hashed_password: str, settings: Optional[Settings] = None) -> bool:
    settings = settings or get_settings()
    try:
        return _password_context(settings.password_hash_scheme).verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # unrecognised or malformed hash
        return False


def create_access_token(
    subject_id: int,
    role: Role,
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
) -> str:
    settings = settings or get_settings()
    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expiration_minutes)

    payload = {
        "sub": str(subject_id),
        "role": Role(role).value,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + expires_delta).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str, settings: Optional[Settings] = None) -> TokenData:
    """
    Decode and verify a bearer token.

    Raises InvalidTokenError when the signature does not match, the token is
    malformed or expired, or the subject/role claims are missing.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return TokenData(
            subject_id=int(payload["sub"]),
            role=Role(payload["role"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (JWTError, KeyError, ValueError, TypeError) as e:
        logger.info(f"Rejected access token: {type(e).__name__}")
        raise InvalidTokenError() from e
