"""
Organization endpoints.

GET    /api/organizations                   List public organizations
POST   /api/organizations                   Register an organization
GET    /api/organizations/{orgId}           Organization with member count
DELETE /api/organizations/{orgId}           Delete (organization admins only)
GET    /api/organizations/{orgId}/events    Events of an organization
POST   /api/organizations/{orgId}/join      Become a member
GET    /api/user-organizations              Organizations the caller administers
GET    /api/user-member-organizations       Organizations a user has joined
GET    /api/check-organization-name         Is a name taken?
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quad_server.api.serializers import event_out, organization_fields
from quad_server.core.auth import AuthenticatedUser, get_authenticated_user
from quad_server.core.database import get_session
from quad_server.core.errors import InvalidRequest
from quad_server.services import organizations as org_service
from quad_shared.schemas.common import ExistsResponse, SuccessResponse
from quad_shared.schemas.events import EventListResponse
from quad_shared.schemas.organizations import (
    OrganizationCreateRequest,
    OrganizationCreatedResponse,
    OrganizationListResponse,
    OrganizationResponse,
    OrganizationSummary,
)

router = APIRouter()


@router.get("/organizations", response_model=OrganizationListResponse)
async def list_organizations(session: AsyncSession = Depends(get_session)):
    rows = await org_service.list_public_organizations(session)
    return OrganizationListResponse(
        organizations=[
            OrganizationSummary(**organization_fields(org), member_count=count)
            for org, count in rows
        ]
    )


@router.post("/organizations", response_model=OrganizationCreatedResponse, status_code=201)
async def register_organization(
    body: OrganizationCreateRequest,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """Create a new organization. The creator becomes an admin."""
    org = await org_service.create_organization(body, auth.user_id, session)
    return OrganizationCreatedResponse(org_id=org.id)


@router.get("/organizations/{orgId}", response_model=OrganizationResponse)
async def get_organization(orgId: int, session: AsyncSession = Depends(get_session)):
    org = await org_service.get_organization(orgId, session)
    count = await org_service.member_count(orgId, session)
    return OrganizationResponse(
        organization=OrganizationSummary(**organization_fields(org), member_count=count)
    )


@router.delete("/organizations/{orgId}", response_model=SuccessResponse)
async def delete_organization(
    orgId: int,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    await org_service.delete_organization(orgId, auth.user_id, session)
    return SuccessResponse(message="Organization deleted successfully")


@router.get("/organizations/{orgId}/events", response_model=EventListResponse)
async def get_organization_events(orgId: int, session: AsyncSession = Depends(get_session)):
    events = await org_service.list_organization_events(orgId, session)
    return EventListResponse(events=[event_out(e) for e in events])


@router.post("/organizations/{orgId}/join", response_model=SuccessResponse)
async def join_organization(
    orgId: int,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    joined = await org_service.join_organization(orgId, auth.user_id, session)
    return SuccessResponse(message="Joined organization" if joined else "Already a member")


@router.get("/user-organizations", response_model=OrganizationListResponse)
async def user_organizations(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    orgs = await org_service.list_admin_organizations(auth.user_id, session)
    return OrganizationListResponse(
        organizations=[
            OrganizationSummary(
                **organization_fields(org),
                member_count=await org_service.member_count(org.id, session),
            )
            for org in orgs
        ]
    )


@router.get("/user-member-organizations", response_model=OrganizationListResponse)
async def user_member_organizations(
    userID: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_session),
):
    """Public; the user is named by ``?userID=`` rather than the bearer token."""
    if userID is None:
        raise InvalidRequest("User ID is required")
    orgs = await org_service.list_member_organizations(userID, session)
    return OrganizationListResponse(
        organizations=[
            OrganizationSummary(
                **organization_fields(org),
                member_count=await org_service.member_count(org.id, session),
            )
            for org in orgs
        ]
    )


@router.get("/check-organization-name", response_model=ExistsResponse)
async def check_organization_name(
    name: str = Query(..., min_length=1),
    session: AsyncSession = Depends(get_session),
):
    return ExistsResponse(exists=await org_service.name_exists(name, session))
