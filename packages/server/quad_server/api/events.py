"""
Event, RSVP and landmark endpoints.

GET    /api/events                  All events, latest first
POST   /api/events                  Register an event (organization admins)
GET    /api/events/official         Official events, soonest first
GET    /api/events/{eventId}        Event with its organization name
POST   /api/events/{eventId}/rsvp   Create or update the caller's RSVP
GET    /api/events/{eventId}/rsvp   The caller's RSVP status
GET    /api/user/events             Events the caller organizes or RSVP'd to
GET    /api/landmarks               Campus landmarks
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quad_server.api.serializers import event_fields, event_out, landmark_out
from quad_server.core.auth import AuthenticatedUser, get_authenticated_user
from quad_server.core.database import get_session
from quad_server.services import events as event_service
from quad_shared.schemas.common import SuccessResponse
from quad_shared.schemas.events import (
    EventCreateRequest,
    EventCreatedResponse,
    EventDetail,
    EventDetailListResponse,
    EventListResponse,
    EventResponse,
    LandmarkListResponse,
    RSVPRequest,
    RSVPResponse,
    UserEventListResponse,
    UserEventOut,
)

router = APIRouter()


@router.get("/events", response_model=EventDetailListResponse)
async def list_events(
    limit: int = Query(100, ge=1, le=500),
    organizationID: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_session),
):
    rows = await event_service.list_events(session, limit=limit, organization_id=organizationID)
    return EventDetailListResponse(
        events=[
            EventDetail(**event_fields(event), organization_name=org_name)
            for event, org_name in rows
        ]
    )


@router.post("/events", response_model=EventCreatedResponse, status_code=201)
async def register_event(
    body: EventCreateRequest,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """Create an event; optionally submit it for official status at once."""
    event = await event_service.create_event(body, auth.user_id, session)
    message = (
        "Event created and submitted for official status"
        if body.submit_for_official_status
        else "Event created successfully"
    )
    return EventCreatedResponse(event_id=event.id, message=message)


# Declared before /events/{eventId} so "official" is not read as an id.
@router.get("/events/official", response_model=EventListResponse)
async def list_official_events(
    limit: int = Query(4, ge=1, le=50),
    showPast: bool = Query(False),
    session: AsyncSession = Depends(get_session),
):
    events = await event_service.list_official_events(session, limit=limit, show_past=showPast)
    return EventListResponse(events=[event_out(e) for e in events])


@router.get("/events/{eventId}", response_model=EventResponse)
async def get_event(eventId: int, session: AsyncSession = Depends(get_session)):
    event, org_name = await event_service.get_event(eventId, session)
    return EventResponse(event=EventDetail(**event_fields(event), organization_name=org_name))


@router.post("/events/{eventId}/rsvp", response_model=SuccessResponse)
async def set_rsvp(
    eventId: int,
    body: RSVPRequest,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    created = await event_service.set_rsvp(eventId, auth.user_id, body.rsvp_status, session)
    return SuccessResponse(
        message="RSVP created successfully" if created else "RSVP updated successfully"
    )


@router.get("/events/{eventId}/rsvp", response_model=RSVPResponse)
async def get_rsvp(
    eventId: int,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    status = await event_service.get_rsvp(eventId, auth.user_id, session)
    return RSVPResponse(rsvp_status=status)


@router.get("/user/events", response_model=UserEventListResponse)
async def list_user_events(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    entries = await event_service.list_user_events(auth.user_id, session)
    return UserEventListResponse(
        events=[
            UserEventOut(
                **event_fields(entry["event"]),
                organization_name=entry["organization_name"],
                is_organizer=entry["is_organizer"],
                rsvp_status=entry["rsvp_status"],
            )
            for entry in entries
        ]
    )


@router.get("/landmarks", response_model=LandmarkListResponse)
async def list_landmarks(session: AsyncSession = Depends(get_session)):
    landmarks = await event_service.list_landmarks(session)
    return LandmarkListResponse(landmarks=[landmark_out(landmark) for landmark in landmarks])
