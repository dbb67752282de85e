"""
Organization service: business logic for organization CRUD and membership.
"""

from __future__ import annotations

import structlog
from sqlalchemy import delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from quad_server.core.errors import Conflict, Forbidden, NotFound
from quad_server.models.event import Event
from quad_server.models.memberships import EventAdmin, OrgAdmin, OrgMember
from quad_server.models.official import Official, OfficialPending
from quad_server.models.organization import Organization
from quad_server.models.rsvp import EventRSVP

from quad_shared.schemas.common import OrgPrivacy
from quad_shared.schemas.organizations import OrganizationCreateRequest

log = structlog.get_logger()


async def name_exists(name: str, session: AsyncSession) -> bool:
    """Case-insensitive organization name lookup."""
    result = await session.execute(
        select(Organization.id).where(func.lower(Organization.name) == name.strip().lower())
    )
    return result.first() is not None


async def create_organization(
    req: OrganizationCreateRequest, creator_id: int, session: AsyncSession
) -> Organization:
    """Create an organization. The creator becomes its admin and first member."""
    if await name_exists(req.name, session):
        raise Conflict("Organization name already exists")

    org = Organization(
        name=req.name.strip(),
        description=req.description,
        thumbnail=req.thumbnail,
        banner=req.banner,
        privacy=req.privacy.value,
    )
    session.add(org)
    await session.flush()

    session.add(OrgAdmin(user_id=creator_id, org_id=org.id))
    session.add(OrgMember(user_id=creator_id, org_id=org.id))
    await session.flush()

    log.info("org.created", org_id=org.id, name=org.name, creator=creator_id)
    return org


async def member_count(org_id: int, session: AsyncSession) -> int:
    count = await session.scalar(
        select(func.count()).select_from(OrgMember).where(OrgMember.org_id == org_id)
    )
    return count or 0


async def get_organization(org_id: int, session: AsyncSession) -> Organization:
    """Get an organization by id; raises 404 if not found."""
    org = await session.get(Organization, org_id)
    if org is None:
        raise NotFound("Organization not found")
    return org


async def list_public_organizations(session: AsyncSession) -> list[tuple[Organization, int]]:
    """Public organizations with their member counts, by name."""
    members = (
        select(OrgMember.org_id, func.count().label("member_count"))
        .group_by(OrgMember.org_id)
        .subquery()
    )
    result = await session.execute(
        select(Organization, func.coalesce(members.c.member_count, 0))
        .outerjoin(members, members.c.org_id == Organization.id)
        .where(Organization.privacy == OrgPrivacy.PUBLIC.value)
        .order_by(Organization.name)
    )
    return [(org, count) for org, count in result.all()]


async def list_admin_organizations(user_id: int, session: AsyncSession) -> list[Organization]:
    """Organizations the user administers."""
    result = await session.execute(
        select(Organization)
        .join(OrgAdmin, OrgAdmin.org_id == Organization.id)
        .where(OrgAdmin.user_id == user_id)
        .order_by(Organization.name)
    )
    return list(result.scalars().all())


async def list_member_organizations(user_id: int, session: AsyncSession) -> list[Organization]:
    """Organizations the user has joined, whatever their role."""
    result = await session.execute(
        select(Organization)
        .join(OrgMember, OrgMember.org_id == Organization.id)
        .where(OrgMember.user_id == user_id)
        .order_by(Organization.name)
    )
    return list(result.scalars().all())


async def list_organization_events(org_id: int, session: AsyncSession) -> list[Event]:
    await get_organization(org_id, session)
    result = await session.execute(
        select(Event).where(Event.organization_id == org_id).order_by(Event.start_date)
    )
    return list(result.scalars().all())


async def join_organization(org_id: int, user_id: int, session: AsyncSession) -> bool:
    """Add the user as a member. Returns False when they already were one."""
    await get_organization(org_id, session)
    existing = await session.get(OrgMember, {"user_id": user_id, "org_id": org_id})
    if existing is not None:
        return False
    session.add(OrgMember(user_id=user_id, org_id=org_id))
    await session.flush()
    log.info("org.member_joined", org_id=org_id, user_id=user_id)
    return True


async def delete_organization(org_id: int, user_id: int, session: AsyncSession) -> None:
    """Delete an organization with its events and every row that points at them."""
    await get_organization(org_id, session)

    if await session.get(OrgAdmin, {"user_id": user_id, "org_id": org_id}) is None:
        raise Forbidden("Only organization admins can delete the organization")

    event_ids = select(Event.id).where(Event.organization_id == org_id)

    await session.execute(delete(EventRSVP).where(EventRSVP.event_id.in_(event_ids)))
    await session.execute(delete(EventAdmin).where(EventAdmin.event_id.in_(event_ids)))
    for model in (OfficialPending, Official):
        await session.execute(
            delete(model).where(or_(model.org_id == org_id, model.event_id.in_(event_ids)))
        )
    await session.execute(delete(Event).where(Event.organization_id == org_id))
    await session.execute(delete(OrgAdmin).where(OrgAdmin.org_id == org_id))
    await session.execute(delete(OrgMember).where(OrgMember.org_id == org_id))
    await session.execute(delete(Organization).where(Organization.id == org_id))

    log.info("org.deleted", org_id=org_id, user_id=user_id)
