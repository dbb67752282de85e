"""
Authentication endpoints.

- Email/Password signup & login, returning a bearer JWT
- Logout (JWT revocation)
- Profile of the authenticated user
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Query
from pydantic import EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from quad_server.core.auth import (
    AuthenticatedUser,
    create_jwt,
    get_authenticated_user,
    revoke_jwt,
)
from quad_server.core.database import get_session
from quad_server.services import users as user_service
from quad_shared.schemas.common import ExistsResponse, SuccessResponse
from quad_shared.schemas.users import (
    LoginRequest,
    ProfileResponse,
    SignupRequest,
    TokenResponse,
    UserProfile,
)

log = structlog.get_logger()
router = APIRouter()


@router.post("/signup", response_model=TokenResponse, status_code=201)
async def signup(
    body: SignupRequest,
    session: AsyncSession = Depends(get_session),
):
    """Create an account and sign it in."""
    user = await user_service.create_user(body, session)
    token, _, expires_at = create_jwt(user.id)
    return TokenResponse(
        message="User registered successfully",
        token=token,
        user_id=user.id,
        expires_at=expires_at,
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
):
    user = await user_service.authenticate(body.email, body.password, session)
    token, _, expires_at = create_jwt(user.id)
    return TokenResponse(
        message="Login successful",
        token=token,
        user_id=user.id,
        expires_at=expires_at,
    )


@router.post("/logout", response_model=SuccessResponse)
async def logout(auth: AuthenticatedUser = Depends(get_authenticated_user)):
    """Revoke the presented token for the rest of its lifetime."""
    if auth.jti:
        await revoke_jwt(auth.jti, ttl_seconds=auth.seconds_remaining())
    log.info("auth.logout", user_id=auth.user_id)
    return SuccessResponse(message="Logged out")


@router.get("/user-profile", response_model=ProfileResponse)
async def user_profile(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    user, admin_org_ids, staff = await user_service.get_profile(auth.user_id, session)
    return ProfileResponse(
        user=UserProfile(
            user_id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            created_at=user.created_at,
            admin_org_ids=admin_org_ids,
            is_staff=staff,
        )
    )


@router.get("/check-email", response_model=ExistsResponse)
async def check_email(
    email: EmailStr = Query(...),
    session: AsyncSession = Depends(get_session),
):
    exists = await user_service.get_user_by_email(email, session) is not None
    return ExistsResponse(exists=exists)
