"""
Official-status schemas shared between the server and API clients.

Covers: submission targets, the official-status lifecycle, the staff review
queue and review payloads.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .common import CamelModel
from .events import EventOut
from .organizations import OrganizationOut


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TargetKind(str, Enum):
    ORGANIZATION = "organization"
    EVENT = "event"


class OfficialState(str, Enum):
    UNSUBMITTED = "unsubmitted"
    PENDING = "pending"
    OFFICIAL = "official"


# ---------------------------------------------------------------------------
# Lifecycle transitions
# ---------------------------------------------------------------------------

# Rejection returns a target to UNSUBMITTED with no history, so it may be
# submitted again. OFFICIAL is terminal.
OFFICIAL_TRANSITIONS: dict[OfficialState, list[OfficialState]] = {
    OfficialState.UNSUBMITTED: [OfficialState.PENDING],
    OfficialState.PENDING: [OfficialState.OFFICIAL, OfficialState.UNSUBMITTED],
    OfficialState.OFFICIAL: [],
}


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class OfficialTarget(CamelModel):
    """Exactly one of ``orgID`` / ``eventID`` names the target.

    Both fields are optional here so that the service, not request parsing,
    reports a missing or doubled identifier with the workflow's own error.
    """

    org_id: Optional[int] = Field(None, alias="orgID")
    event_id: Optional[int] = Field(None, alias="eventID")


class DecisionRequest(CamelModel):
    submission_id: int = Field(alias="submissionID")
    approved: bool


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class PendingOrganization(OrganizationOut):
    submission_id: int = Field(alias="submissionID")
    submitted_at: datetime


class PendingEvent(EventOut):
    submission_id: int = Field(alias="submissionID")
    submitted_at: datetime


class PendingRequestsResponse(CamelModel):
    success: bool = True
    pending_organizations: list[PendingOrganization] = []
    pending_events: list[PendingEvent] = []


class PendingCountsResponse(CamelModel):
    success: bool = True
    org_count: int = 0
    event_count: int = 0


class RSVPStats(CamelModel):
    attending: int = 0
    maybe: int = 0
    declined: int = 0


class OrganizationReviewResponse(CamelModel):
    success: bool = True
    organization: OrganizationOut
    admins: list[int] = []
    member_count: int = 0
    events: list[EventOut] = []
    events_count: int = 0
    total_rsvps: int = Field(0, alias="totalRSVPs")


class EventReviewResponse(CamelModel):
    success: bool = True
    event: EventOut
    organization: Optional[OrganizationOut] = None
    admins: list[int] = []
    rsvp_stats: RSVPStats = Field(default_factory=RSVPStats)


class PendingStatusResponse(CamelModel):
    success: bool = True
    is_pending: bool


class OfficialStatusResponse(CamelModel):
    success: bool = True
    is_official: bool


class SubmissionOut(CamelModel):
    submission_id: int = Field(alias="submissionID")
    org_id: Optional[int] = Field(None, alias="orgID")
    event_id: Optional[int] = Field(None, alias="eventID")
    created_at: datetime


class SubmissionDetails(CamelModel):
    type: TargetKind
    organization: Optional[OrganizationOut] = None
    event: Optional[EventOut] = None


class SubmissionReviewResponse(CamelModel):
    success: bool = True
    submission: SubmissionOut
    details: SubmissionDetails


class StaffCheckResponse(CamelModel):
    success: bool = True
    user_id: int = Field(alias="userID")
    is_staff: bool
