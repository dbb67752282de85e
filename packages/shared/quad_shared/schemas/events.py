"""
Event, RSVP and landmark schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from .common import CamelModel, EventPrivacy


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class EventCreateRequest(CamelModel):
    organization_id: int = Field(alias="organizationID")
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    start_date: datetime
    end_date: datetime
    thumbnail: Optional[str] = None
    banner: Optional[str] = None
    privacy: EventPrivacy = EventPrivacy.PUBLIC
    landmark_id: Optional[int] = Field(None, alias="landmarkID")
    custom_location: Optional[str] = Field(None, max_length=300)
    submit_for_official_status: bool = False

    @model_validator(mode="after")
    def _check_dates(self) -> "EventCreateRequest":
        if (self.start_date.tzinfo is None) != (self.end_date.tzinfo is None):
            raise ValueError("startDate and endDate must both include or both omit a timezone")
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class RSVPRequest(CamelModel):
    # Checked against RSVPStatus by the service so the error names the choices.
    rsvp_status: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class EventOut(CamelModel):
    event_id: int = Field(alias="eventID")
    organization_id: int = Field(alias="organizationID")
    title: str
    description: Optional[str] = None
    start_date: datetime
    end_date: datetime
    thumbnail: Optional[str] = None
    banner: Optional[str] = None
    privacy: EventPrivacy
    landmark_id: Optional[int] = Field(None, alias="landmarkID")
    custom_location: Optional[str] = None
    created_at: datetime


class EventDetail(EventOut):
    organization_name: Optional[str] = None


class EventResponse(CamelModel):
    success: bool = True
    event: EventDetail


class EventListResponse(CamelModel):
    success: bool = True
    events: list[EventOut]


class EventDetailListResponse(CamelModel):
    success: bool = True
    events: list[EventDetail]


class UserEventOut(EventDetail):
    """An event on the caller's calendar: organized by them, RSVP'd, or both."""

    is_organizer: bool = False
    rsvp_status: Optional[str] = None


class UserEventListResponse(CamelModel):
    success: bool = True
    events: list[UserEventOut]


class EventCreatedResponse(CamelModel):
    success: bool = True
    message: str = "Event created successfully"
    event_id: int = Field(alias="eventID")


class RSVPResponse(CamelModel):
    success: bool = True
    rsvp_status: Optional[str] = None


class LandmarkOut(CamelModel):
    landmark_id: int = Field(alias="landmarkID")
    name: str
    description: Optional[str] = None


class LandmarkListResponse(CamelModel):
    success: bool = True
    landmarks: list[LandmarkOut]
