"""ORM row to wire schema conversions shared by the routers."""

from __future__ import annotations

from quad_server.models.event import Event
from quad_server.models.landmark import Landmark
from quad_server.models.organization import Organization

from quad_shared.schemas.events import EventOut, LandmarkOut
from quad_shared.schemas.organizations import OrganizationOut


def organization_fields(org: Organization) -> dict:
    return {
        "org_id": org.id,
        "name": org.name,
        "description": org.description,
        "thumbnail": org.thumbnail,
        "banner": org.banner,
        "privacy": org.privacy,
        "created_at": org.created_at,
    }


def event_fields(event: Event) -> dict:
    return {
        "event_id": event.id,
        "organization_id": event.organization_id,
        "title": event.title,
        "description": event.description,
        "start_date": event.start_date,
        "end_date": event.end_date,
        "thumbnail": event.thumbnail,
        "banner": event.banner,
        "privacy": event.privacy,
        "landmark_id": event.landmark_id,
        "custom_location": event.custom_location,
        "created_at": event.created_at,
    }


def organization_out(org: Organization) -> OrganizationOut:
    return OrganizationOut(**organization_fields(org))


def event_out(event: Event) -> EventOut:
    return EventOut(**event_fields(event))


def landmark_out(landmark: Landmark) -> LandmarkOut:
    return LandmarkOut(
        landmark_id=landmark.id,
        name=landmark.name,
        description=landmark.description,
    )
