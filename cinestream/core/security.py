"""Password hashing and JWT helpers.

Hashing uses pwdlib with the bcrypt hasher; tokens are HS256 JWTs via PyJWT.
Neither function reads global configuration: callers pass the secret, the
algorithm and the cost factor explicitly.
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict

import jwt
from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError
from pwdlib.hashers.bcrypt import BcryptHasher
from pydantic import BaseModel, ConfigDict, Field

from cinestream.core.exceptions import UnauthorizedError

DEFAULT_BCRYPT_ROUNDS = 10


class TokenData(BaseModel):
    """Decoded JWT payload."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    email: str
    iat: int
    exp: int


@lru_cache(maxsize=None)
def get_password_hasher(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> PasswordHash:
    """Get the shared PasswordHash instance for the given bcrypt cost factor."""
    return PasswordHash((BcryptHasher(rounds=rounds),))


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password with a per-password salt.

    Example:

            hashed = hash_password("my_secure_password", rounds=12)
            user.password = hashed
    """
    return get_password_hasher(rounds).hash(password)


@lru_cache(maxsize=None)
def dummy_hash(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """A throwaway bcrypt hash to verify against when no user matched, so the miss costs the same."""
    return hash_password("cinestream-no-such-user", rounds)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored bcrypt hash.

    Returns False (never raises) for unknown hash formats or inputs bcrypt rejects.
    """
    if not hashed_password:
        return False
    try:
        return get_password_hasher().verify(plain_password, hashed_password)
    except (UnknownHashError, ValueError):
        return False


def create_access_token(
    user_id: str,
    email: str,
    *,
    secret: str,
    algorithm: str = "HS256",
    expires_in: int = 3600,
) -> str:
    """Create a signed JWT carrying the user's id and email."""
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "userId": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token: str, *, secret: str, algorithm: str = "HS256") -> TokenData:
    """Decode and validate a JWT, returning a typed payload."""
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token")

    try:
        return TokenData.model_validate(payload)
    except ValueError:
        raise UnauthorizedError("Invalid token")
