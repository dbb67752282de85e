"""
Event service: event registration, lookup, RSVPs and the official events feed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from quad_server.core.errors import Forbidden, InvalidRequest, NotFound
from quad_server.models.event import Event
from quad_server.models.landmark import Landmark
from quad_server.models.memberships import EventAdmin, OrgAdmin
from quad_server.models.official import Official
from quad_server.models.organization import Organization
from quad_server.models.rsvp import EventRSVP
from quad_server.services import official as official_service

from quad_shared.schemas.common import RSVPStatus
from quad_shared.schemas.events import EventCreateRequest
from quad_shared.schemas.official import OfficialTarget

log = structlog.get_logger()

INVALID_RSVP = "Invalid RSVP status. Must be 'attending', 'maybe', or 'declined'."


async def create_event(
    req: EventCreateRequest, creator_id: int, session: AsyncSession
) -> Event:
    """Create an event under an organization the creator administers.

    With ``submit_for_official_status`` the new event is queued for review
    in the same transaction, so a failed submission leaves no event behind.
    """
    org = await session.get(Organization, req.organization_id)
    if org is None:
        raise NotFound("Organization not found")

    admin = await session.get(OrgAdmin, {"user_id": creator_id, "org_id": org.id})
    if admin is None:
        raise Forbidden("User is not an admin of this organization")

    if req.submit_for_official_status:
        if not req.thumbnail:
            raise InvalidRequest("Thumbnail is required when submitting for official status")
        if not req.banner:
            raise InvalidRequest("Banner is required when submitting for official status")

    if req.landmark_id is not None and await session.get(Landmark, req.landmark_id) is None:
        raise InvalidRequest("Landmark not found")

    event = Event(
        organization_id=org.id,
        title=req.title.strip(),
        description=req.description,
        start_date=req.start_date,
        end_date=req.end_date,
        thumbnail=req.thumbnail,
        banner=req.banner,
        privacy=req.privacy.value,
        landmark_id=req.landmark_id,
        custom_location=req.custom_location,
    )
    session.add(event)
    await session.flush()

    session.add(EventAdmin(user_id=creator_id, event_id=event.id))
    await session.flush()

    log.info("event.created", event_id=event.id, org_id=org.id, creator=creator_id)

    if req.submit_for_official_status:
        await official_service.submit_for_official(
            creator_id, OfficialTarget(event_id=event.id), session
        )

    return event


async def get_event(event_id: int, session: AsyncSession) -> tuple[Event, Optional[str]]:
    """An event and the name of its organization."""
    result = await session.execute(
        select(Event, Organization.name)
        .outerjoin(Organization, Organization.id == Event.organization_id)
        .where(Event.id == event_id)
    )
    row = result.first()
    if row is None:
        raise NotFound("Event not found")
    event, org_name = row
    return event, org_name


async def list_events(
    session: AsyncSession,
    *,
    limit: int = 100,
    organization_id: Optional[int] = None,
) -> list[tuple[Event, str]]:
    """Events with their organization names, latest start first."""
    query = select(Event, Organization.name).join(
        Organization, Organization.id == Event.organization_id
    )
    if organization_id is not None:
        query = query.where(Event.organization_id == organization_id)
    result = await session.execute(query.order_by(Event.start_date.desc(), Event.id).limit(limit))
    return [(event, org_name) for event, org_name in result.all()]


async def list_user_events(user_id: int, session: AsyncSession) -> list[dict]:
    """Events the user organizes or has RSVP'd to, latest start first.

    An event that is both appears once, as organized, carrying the RSVP.
    """
    admin_query = (
        select(Event, Organization.name)
        .join(Organization, Organization.id == Event.organization_id)
        .join(EventAdmin, EventAdmin.event_id == Event.id)
        .where(EventAdmin.user_id == user_id)
    )
    rsvp_query = (
        select(Event, Organization.name, EventRSVP.status)
        .join(Organization, Organization.id == Event.organization_id)
        .join(EventRSVP, EventRSVP.event_id == Event.id)
        .where(EventRSVP.user_id == user_id)
    )
    admin_rows = (await session.execute(admin_query)).all()
    rsvp_rows = (await session.execute(rsvp_query)).all()

    by_id: dict[int, dict] = {}
    for event, org_name in admin_rows:
        by_id[event.id] = {
            "event": event,
            "organization_name": org_name,
            "is_organizer": True,
            "rsvp_status": None,
        }
    for event, org_name, status in rsvp_rows:
        entry = by_id.setdefault(
            event.id,
            {"event": event, "organization_name": org_name, "is_organizer": False},
        )
        entry["rsvp_status"] = status

    return sorted(
        by_id.values(),
        key=lambda entry: (entry["event"].start_date, entry["event"].id),
        reverse=True,
    )


# ---------------------------------------------------------------------------
# RSVPs
# ---------------------------------------------------------------------------

async def set_rsvp(
    event_id: int, user_id: int, status: str, session: AsyncSession
) -> bool:
    """Create or update the caller's RSVP. Returns True when it was created."""
    try:
        status = RSVPStatus(status).value
    except ValueError:
        raise InvalidRequest(INVALID_RSVP)

    if await session.get(Event, event_id) is None:
        raise NotFound("Event not found")

    rsvp = await session.get(EventRSVP, {"event_id": event_id, "user_id": user_id})
    created = rsvp is None
    if created:
        rsvp = EventRSVP(event_id=event_id, user_id=user_id, status=status)
    else:
        rsvp.status = status
        rsvp.updated_at = datetime.now(timezone.utc)
    session.add(rsvp)
    await session.flush()

    log.info("rsvp.updated", event_id=event_id, user_id=user_id, status=status, created=created)
    return created


async def get_rsvp(event_id: int, user_id: int, session: AsyncSession) -> Optional[str]:
    if await session.get(Event, event_id) is None:
        raise NotFound("Event not found")
    rsvp = await session.get(EventRSVP, {"event_id": event_id, "user_id": user_id})
    return rsvp.status if rsvp else None


# ---------------------------------------------------------------------------
# Feeds and reference data
# ---------------------------------------------------------------------------

async def list_official_events(
    session: AsyncSession,
    *,
    limit: int = 4,
    show_past: bool = False,
    now: Optional[datetime] = None,
) -> list[Event]:
    """Events with official status, soonest first; past events only on request."""
    query = select(Event).join(Official, Official.event_id == Event.id)
    if not show_past:
        query = query.where(Event.end_date >= (now or datetime.now(timezone.utc)))
    result = await session.execute(query.order_by(Event.start_date, Event.id).limit(limit))
    return list(result.scalars().all())


async def list_landmarks(session: AsyncSession) -> list[Landmark]:
    result = await session.execute(select(Landmark).order_by(Landmark.name))
    return list(result.scalars().all())
