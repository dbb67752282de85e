"""
Staff review endpoints for official status.

POST   /api/admin/submit-for-official      Admin of a target submits it
GET    /api/admin/pending-requests         Pending organizations and events
GET    /api/admin/pending-counts           Pending counts per kind
GET    /api/admin/org-details/{orgId}      Organization review payload
GET    /api/admin/event-details/{eventId}  Event review payload
POST   /api/admin/approve-official         Grant official status
POST   /api/admin/reject-official          Drop a pending request
GET    /api/admin/staff-check              Whether the caller is staff
GET    /api/admin/submissions/{id}         One pending request by id
POST   /api/admin/decision                 Approve/reject a request by id
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quad_server.api.serializers import event_fields, event_out, organization_fields, organization_out
from quad_server.core.auth import (
    AuthenticatedUser,
    get_authenticated_user,
    is_staff,
    require_staff,
)
from quad_server.core.database import get_session
from quad_server.services import official as official_service
from quad_shared.schemas.common import SuccessResponse
from quad_shared.schemas.official import (
    DecisionRequest,
    EventReviewResponse,
    OfficialTarget,
    OrganizationReviewResponse,
    PendingCountsResponse,
    PendingEvent,
    PendingOrganization,
    PendingRequestsResponse,
    RSVPStats,
    StaffCheckResponse,
    SubmissionDetails,
    SubmissionOut,
    SubmissionReviewResponse,
    TargetKind,
)

router = APIRouter()


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

@router.post("/submit-for-official", response_model=SuccessResponse)
async def submit_for_official(
    body: Optional[OfficialTarget] = None,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """Submit an organization or event the caller administers for review."""
    await official_service.submit_for_official(
        auth.user_id, body or OfficialTarget(), session
    )
    return SuccessResponse(message="Successfully submitted for official status")


# ---------------------------------------------------------------------------
# Review queue (staff only)
# ---------------------------------------------------------------------------

@router.get("/pending-requests", response_model=PendingRequestsResponse)
async def list_pending_requests(
    auth: AuthenticatedUser = Depends(require_staff),
    session: AsyncSession = Depends(get_session),
):
    orgs, events = await official_service.list_pending_requests(session)
    return PendingRequestsResponse(
        pending_organizations=[
            PendingOrganization(
                **organization_fields(org),
                submission_id=pending.id,
                submitted_at=pending.created_at,
            )
            for org, pending in orgs
        ],
        pending_events=[
            PendingEvent(
                **event_fields(event),
                submission_id=pending.id,
                submitted_at=pending.created_at,
            )
            for event, pending in events
        ],
    )


@router.get("/pending-counts", response_model=PendingCountsResponse)
async def get_pending_counts(
    auth: AuthenticatedUser = Depends(require_staff),
    session: AsyncSession = Depends(get_session),
):
    org_count, event_count = await official_service.get_pending_counts(session)
    return PendingCountsResponse(org_count=org_count, event_count=event_count)


@router.get("/org-details/{orgId}", response_model=OrganizationReviewResponse)
async def get_organization_details(
    orgId: int,
    auth: AuthenticatedUser = Depends(require_staff),
    session: AsyncSession = Depends(get_session),
):
    details = await official_service.get_organization_review_details(orgId, session)
    return OrganizationReviewResponse(
        organization=organization_out(details["organization"]),
        admins=details["admins"],
        member_count=details["member_count"],
        events=[event_out(e) for e in details["events"]],
        events_count=details["events_count"],
        total_rsvps=details["total_rsvps"],
    )


@router.get("/event-details/{eventId}", response_model=EventReviewResponse)
async def get_event_details(
    eventId: int,
    auth: AuthenticatedUser = Depends(require_staff),
    session: AsyncSession = Depends(get_session),
):
    details = await official_service.get_event_review_details(eventId, session)
    org = details["organization"]
    return EventReviewResponse(
        event=event_out(details["event"]),
        organization=organization_out(org) if org is not None else None,
        admins=details["admins"],
        rsvp_stats=RSVPStats(**details["rsvp_stats"]),
    )


# ---------------------------------------------------------------------------
# Decisions (staff only)
# ---------------------------------------------------------------------------

@router.post("/approve-official", response_model=SuccessResponse)
async def approve_official(
    body: Optional[OfficialTarget] = None,
    auth: AuthenticatedUser = Depends(require_staff),
    session: AsyncSession = Depends(get_session),
):
    await official_service.approve_official(
        body or OfficialTarget(), session, reviewer_id=auth.user_id
    )
    return SuccessResponse(message="Official status approved")


@router.post("/reject-official", response_model=SuccessResponse)
async def reject_official(
    body: Optional[OfficialTarget] = None,
    auth: AuthenticatedUser = Depends(require_staff),
    session: AsyncSession = Depends(get_session),
):
    await official_service.reject_official(
        body or OfficialTarget(), session, reviewer_id=auth.user_id
    )
    return SuccessResponse(message="Official status request rejected")


# ---------------------------------------------------------------------------
# Submissions by id
# ---------------------------------------------------------------------------

@router.get("/staff-check", response_model=StaffCheckResponse)
async def staff_check(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """Report whether the caller holds staff rights."""
    return StaffCheckResponse(
        user_id=auth.user_id, is_staff=await is_staff(auth.user_id, session)
    )


@router.get("/submissions/{submissionId}", response_model=SubmissionReviewResponse)
async def review_submission(
    submissionId: int,
    auth: AuthenticatedUser = Depends(require_staff),
    session: AsyncSession = Depends(get_session),
):
    pending, kind, row = await official_service.get_submission(submissionId, session)
    if kind is TargetKind.ORGANIZATION:
        details = SubmissionDetails(
            type=kind, organization=organization_out(row) if row is not None else None
        )
    else:
        details = SubmissionDetails(type=kind, event=event_out(row) if row is not None else None)
    return SubmissionReviewResponse(
        submission=SubmissionOut(
            submission_id=pending.id,
            org_id=pending.org_id,
            event_id=pending.event_id,
            created_at=pending.created_at,
        ),
        details=details,
    )


@router.post("/decision", response_model=SuccessResponse)
async def process_decision(
    body: DecisionRequest,
    auth: AuthenticatedUser = Depends(require_staff),
    session: AsyncSession = Depends(get_session),
):
    message = await official_service.decide_submission(
        body.submission_id, body.approved, session, reviewer_id=auth.user_id
    )
    return SuccessResponse(message=message)
