"""
Organization schemas shared between the server and API clients.

Covers: organization registration, listing and detail payloads.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel, OrgPrivacy


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class OrganizationCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100, description="Unique organization name")
    description: Optional[str] = Field(None, max_length=2000)
    thumbnail: Optional[str] = Field(None, description="Image reference for the thumbnail")
    banner: Optional[str] = Field(None, description="Image reference for the banner")
    privacy: OrgPrivacy = OrgPrivacy.PUBLIC


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class OrganizationOut(CamelModel):
    org_id: int = Field(alias="orgID")
    name: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    banner: Optional[str] = None
    privacy: OrgPrivacy
    created_at: datetime


class OrganizationSummary(OrganizationOut):
    member_count: int = 0


class OrganizationResponse(CamelModel):
    success: bool = True
    organization: OrganizationSummary


class OrganizationListResponse(CamelModel):
    success: bool = True
    organizations: list[OrganizationSummary]


class OrganizationCreatedResponse(CamelModel):
    success: bool = True
    message: str = "Organization created successfully"
    org_id: int = Field(alias="orgID")
