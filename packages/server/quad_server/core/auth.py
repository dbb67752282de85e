"""
Authentication and Authorization for The Quad.

Supports:
- Email/Password accounts (bcrypt hashes)
- Bearer JWT sessions with a Redis revocation list
- Staff authorization dependency for the review endpoints
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from quad_server.core.config import get_settings
from quad_server.core.database import get_session
from quad_server.core.errors import Forbidden, Unauthenticated
from quad_server.core.redis import get_redis, revoked_key
from quad_server.models.staff import Staff

log = structlog.get_logger()
settings = get_settings()

api_key_header = APIKeyHeader(name="Authorization", auto_error=False)

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str) -> str:
    """Hash a password using bcrypt with cost factor 12."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=12)).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode(), hashed.encode())


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def create_jwt(
    user_id: int,
    *,
    expires_delta: timedelta | None = None,
) -> tuple[str, str, datetime]:
    """Create a signed JWT. Returns (token, jti, expires_at)."""
    jti = str(uuid.uuid4())
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        # PyJWT requires a string subject.
        "sub": str(user_id),
        "iat": now,
        "exp": exp,
        "jti": jti,
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
    return token, jti, exp


def decode_jwt(token: str) -> dict:
    """Decode and verify a JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


# ---------------------------------------------------------------------------
# JWT Revocation (Redis)
# ---------------------------------------------------------------------------

async def revoke_jwt(jti: str, ttl_seconds: int = 3600) -> None:
    """Add a JWT ID to the revocation list in Redis."""
    redis = await get_redis()
    await redis.setex(revoked_key(jti), max(ttl_seconds, 1), "1")


async def is_jwt_revoked(jti: str) -> bool:
    """Check if a JWT ID has been revoked."""
    redis = await get_redis()
    return await redis.exists(revoked_key(jti)) > 0


# ---------------------------------------------------------------------------
# Authentication dependencies
# ---------------------------------------------------------------------------

class AuthenticatedUser:
    """Container for the verified caller of a request."""

    def __init__(self, user_id: int, jti: Optional[str], expires_at: datetime):
        self.user_id = user_id
        self.jti = jti
        self.expires_at = expires_at

    def seconds_remaining(self) -> int:
        return int((self.expires_at - datetime.now(timezone.utc)).total_seconds())


async def authenticate_token(token: str) -> AuthenticatedUser:
    """Verify a bearer token and return who it belongs to."""
    try:
        payload = decode_jwt(token)
    except jwt.PyJWTError:
        raise Unauthenticated("Invalid or expired token")

    jti = payload.get("jti")
    if jti and await is_jwt_revoked(jti):
        raise Unauthenticated("Token has been revoked")

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise Unauthenticated("Invalid or expired token")

    expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    return AuthenticatedUser(user_id=user_id, jti=jti, expires_at=expires_at)


async def get_authenticated_user(
    authorization: Optional[str] = Depends(api_key_header),
) -> AuthenticatedUser:
    """Main authentication dependency: ``Authorization: Bearer <jwt>``."""
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthenticated()
    token = authorization[7:].strip()
    if not token:
        raise Unauthenticated()
    return await authenticate_token(token)


# ---------------------------------------------------------------------------
# Authorization dependencies
# ---------------------------------------------------------------------------

async def is_staff(user_id: int, session: AsyncSession) -> bool:
    result = await session.execute(select(Staff).where(Staff.user_id == user_id))
    return result.scalar_one_or_none() is not None


async def require_staff(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
) -> AuthenticatedUser:
    """Requires the caller to be platform staff."""
    if not await is_staff(auth.user_id, session):
        log.info("auth.staff_denied", user_id=auth.user_id)
        raise Forbidden("Staff access required")
    return auth
