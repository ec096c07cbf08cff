"""Password hashing and JWT session tokens for staff, admin and customer logins."""

from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings
from app.core.exceptions import AuthenticationError

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Argon2 hash for storage in ``users.password_hash``."""
    return pwd_context.hash(password)


def _lifetime(token_type: TokenType) -> timedelta:
    if token_type is TokenType.REFRESH:
        return timedelta(days=settings.refresh_token_expire_days)
    return timedelta(minutes=settings.access_token_expire_minutes)


def create_token(
    claims: dict[str, Any],
    token_type: TokenType = TokenType.ACCESS,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign ``claims`` with an expiry and the token type."""
    payload = {
        **claims,
        "type": token_type.value,
        "exp": datetime.now(UTC) + (expires_delta or _lifetime(token_type)),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(claims: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    return create_token(claims, TokenType.ACCESS, expires_delta)


def create_refresh_token(claims: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    return create_token(claims, TokenType.REFRESH, expires_delta)


def verify_token(token: str, token_type: str = "access") -> dict[str, Any]:
    """Decode a token and check that it is of the expected type.

    Raises:
        AuthenticationError: Bad signature, expired, or wrong type
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {e}")

    if payload.get("type") != TokenType(token_type).value:
        raise AuthenticationError("Invalid token type")
    return payload


def create_tokens(user_id: str, email: str, role: str) -> dict[str, str]:
    """Access and refresh tokens for a signed-in user; the role travels as a claim."""
    claims = {"sub": user_id, "email": email, "role": role}
    return {
        "access_token": create_access_token(claims),
        "refresh_token": create_refresh_token(claims),
        "token_type": "bearer",
    }
