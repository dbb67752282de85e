"""Account schemas: signup, login and profile."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from .common import CamelModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class SignupRequest(CamelModel):
    email: EmailStr
    password: str
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class TokenResponse(CamelModel):
    """Returned by signup and login. The token goes in ``Authorization: Bearer``."""
    success: bool = True
    message: str
    token: str
    user_id: int = Field(alias="userID")
    expires_at: datetime


class UserProfile(CamelModel):
    user_id: int = Field(alias="userID")
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: datetime
    admin_org_ids: list[int] = Field(default_factory=list, alias="adminOrgIDs")
    is_staff: bool = False


class ProfileResponse(CamelModel):
    success: bool = True
    user: UserProfile
