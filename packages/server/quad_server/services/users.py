"""
User service: accounts, credentials and profile lookups.
"""

from __future__ import annotations

import structlog
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from quad_server.core.auth import hash_password, is_staff, verify_password
from quad_server.core.errors import Conflict, InvalidRequest, NotFound, Unauthenticated
from quad_server.models.memberships import OrgAdmin
from quad_server.models.user import User

from quad_shared.schemas.users import SignupRequest

log = structlog.get_logger()

MIN_PASSWORD_LENGTH = 8


def _normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(email: str, session: AsyncSession) -> User | None:
    result = await session.execute(
        select(User).where(func.lower(User.email) == _normalize_email(email))
    )
    return result.scalar_one_or_none()


async def create_user(req: SignupRequest, session: AsyncSession) -> User:
    """Register a new account with an email and password."""
    if await get_user_by_email(req.email, session) is not None:
        raise Conflict("Email already registered")

    if len(req.password) < MIN_PASSWORD_LENGTH:
        raise InvalidRequest(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    user = User(
        email=_normalize_email(req.email),
        password_hash=hash_password(req.password),
        first_name=req.first_name.strip(),
        last_name=req.last_name.strip(),
    )
    session.add(user)
    await session.flush()

    log.info("auth.signup", user_id=user.id)
    return user


async def authenticate(email: str, password: str, session: AsyncSession) -> User:
    """Return the user for valid credentials; never says which part was wrong."""
    user = await get_user_by_email(email, session)
    if user is None or not verify_password(password, user.password_hash):
        log.info("auth.login_failure", email=_normalize_email(email))
        raise Unauthenticated("Invalid email or password")
    log.info("auth.login_success", user_id=user.id)
    return user


async def get_profile(user_id: int, session: AsyncSession) -> tuple[User, list[int], bool]:
    """The user row, the ids of organizations they administer, and staff status."""
    user = await session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")

    result = await session.execute(
        select(OrgAdmin.org_id).where(OrgAdmin.user_id == user_id).order_by(OrgAdmin.org_id)
    )
    admin_org_ids = list(result.scalars().all())
    return user, admin_org_ids, await is_staff(user_id, session)
