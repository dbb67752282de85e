"""
Official status service: submission, staff review, approval and rejection.

A target is exactly one organization or one event. Requests wait in
``official_pending`` until staff approve them (moving them to ``official``)
or reject them (dropping them, after which the target may submit again).

Every precondition is checked before anything is written, in a fixed order,
and the first failure is raised. Staff authorization is enforced by the
routers through ``require_staff``.
"""

from __future__ import annotations

from typing import Callable, Optional, Union

import structlog
from sqlalchemy import Select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from quad_server.core.errors import Conflict, Forbidden, InvalidRequest, NotFound, PreconditionFailed
from quad_server.models.event import Event
from quad_server.models.memberships import EventAdmin, OrgAdmin, OrgMember
from quad_server.models.official import Official, OfficialPending
from quad_server.models.organization import Organization
from quad_server.models.rsvp import EventRSVP

from quad_shared.schemas.common import RSVPStatus
from quad_shared.schemas.official import (
    OFFICIAL_TRANSITIONS,
    OfficialState,
    OfficialTarget,
    TargetKind,
)

log = structlog.get_logger()

TARGET_REQUIRED = "Either orgID or eventID must be provided"
TARGET_PARAM_REQUIRED = "Either orgID or eventID parameter is required"
ALREADY_PENDING = "Already pending official approval"
ALREADY_OFFICIAL = "Already has official status"
NO_PENDING_REQUEST = "No pending official status request found"

Target = Union[Organization, Event]


# ---------------------------------------------------------------------------
# Target helpers
# ---------------------------------------------------------------------------

def resolve_target(
    target: OfficialTarget, message: str = TARGET_REQUIRED
) -> tuple[TargetKind, int]:
    """Return which kind of target was named and its id.

    Naming neither or both identifiers is an ``InvalidRequest``.
    """
    has_org = target.org_id is not None
    has_event = target.event_id is not None
    if has_org == has_event:
        raise InvalidRequest(message)
    if has_org:
        return TargetKind.ORGANIZATION, target.org_id
    return TargetKind.EVENT, target.event_id


def _matches(model, kind: TargetKind, target_id: int):
    column = model.org_id if kind is TargetKind.ORGANIZATION else model.event_id
    return column == target_id


async def _find_pending(
    kind: TargetKind, target_id: int, session: AsyncSession
) -> Optional[OfficialPending]:
    result = await session.execute(
        select(OfficialPending).where(_matches(OfficialPending, kind, target_id))
    )
    return result.scalar_one_or_none()


async def _find_official(
    kind: TargetKind, target_id: int, session: AsyncSession
) -> Optional[Official]:
    result = await session.execute(
        select(Official).where(_matches(Official, kind, target_id))
    )
    return result.scalar_one_or_none()


async def _is_target_admin(
    user_id: int, kind: TargetKind, target_id: int, session: AsyncSession
) -> bool:
    if kind is TargetKind.ORGANIZATION:
        query = select(OrgAdmin).where(OrgAdmin.user_id == user_id, OrgAdmin.org_id == target_id)
    else:
        query = select(EventAdmin).where(
            EventAdmin.user_id == user_id, EventAdmin.event_id == target_id
        )
    result = await session.execute(query)
    return result.scalar_one_or_none() is not None


async def _load_target(
    kind: TargetKind, target_id: int, session: AsyncSession
) -> Optional[Target]:
    model = Organization if kind is TargetKind.ORGANIZATION else Event
    return await session.get(model, target_id)


async def _current_state(
    kind: TargetKind, target_id: int, session: AsyncSession
) -> tuple[OfficialState, Optional[OfficialPending]]:
    """Where the target sits in the lifecycle, plus its pending row if any."""
    pending = await _find_pending(kind, target_id, session)
    if pending is not None:
        return OfficialState.PENDING, pending
    if await _find_official(kind, target_id, session) is not None:
        return OfficialState.OFFICIAL, None
    return OfficialState.UNSUBMITTED, None


def _can_move(current: OfficialState, to: OfficialState) -> bool:
    return to in OFFICIAL_TRANSITIONS.get(current, [])


def _has_image(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def _target_fields(kind: TargetKind, target_id: int) -> dict:
    if kind is TargetKind.ORGANIZATION:
        return {"org_id": target_id, "event_id": None}
    return {"org_id": None, "event_id": target_id}


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

async def submit_for_official(
    user_id: int, target: OfficialTarget, session: AsyncSession
) -> OfficialPending:
    """Queue a target for staff review on behalf of one of its admins."""
    kind, target_id = resolve_target(target)

    if not await _is_target_admin(user_id, kind, target_id, session):
        raise Forbidden("Only admins can submit for official status")

    row = await _load_target(kind, target_id, session)
    if row is None or not (_has_image(row.thumbnail) and _has_image(row.banner)):
        label = "Organizations" if kind is TargetKind.ORGANIZATION else "Events"
        raise PreconditionFailed(
            f"{label} must have both thumbnail and banner to be submitted for official status"
        )

    state, _ = await _current_state(kind, target_id, session)
    if not _can_move(state, OfficialState.PENDING):
        raise Conflict(ALREADY_OFFICIAL if state is OfficialState.OFFICIAL else ALREADY_PENDING)

    pending = OfficialPending(**_target_fields(kind, target_id))
    try:
        async with session.begin_nested():
            session.add(pending)
    except IntegrityError:
        # A concurrent submission for the same target inserted first.
        log.info("official.submit_race_lost", kind=kind.value, target_id=target_id)
        raise Conflict(ALREADY_PENDING)

    log.info(
        "official.submitted",
        kind=kind.value,
        target_id=target_id,
        submission_id=pending.id,
        user_id=user_id,
    )
    return pending


# ---------------------------------------------------------------------------
# Review queue
# ---------------------------------------------------------------------------

async def list_pending_requests(
    session: AsyncSession,
) -> tuple[list[tuple[Organization, OfficialPending]], list[tuple[Event, OfficialPending]]]:
    """Pending organizations and events, oldest submission first."""
    orgs = await session.execute(
        select(Organization, OfficialPending)
        .join(OfficialPending, OfficialPending.org_id == Organization.id)
        .order_by(OfficialPending.created_at, OfficialPending.id)
    )
    events = await session.execute(
        select(Event, OfficialPending)
        .join(OfficialPending, OfficialPending.event_id == Event.id)
        .order_by(OfficialPending.created_at, OfficialPending.id)
    )
    return [tuple(row) for row in orgs.all()], [tuple(row) for row in events.all()]


async def get_pending_counts(session: AsyncSession) -> tuple[int, int]:
    """Number of pending (organizations, events)."""
    org_count = await session.scalar(
        select(func.count()).select_from(OfficialPending).where(OfficialPending.org_id.is_not(None))
    )
    event_count = await session.scalar(
        select(func.count()).select_from(OfficialPending).where(OfficialPending.event_id.is_not(None))
    )
    return org_count or 0, event_count or 0


# ---------------------------------------------------------------------------
# Review details
# ---------------------------------------------------------------------------

async def _safe_count(
    build: Callable[[], Select], session: AsyncSession, *, label: str, **context
) -> int:
    """Run a display-only count; a failure is logged and reads as 0.

    Each count runs in its own SAVEPOINT so a failed statement does not
    poison the rest of the request's transaction.
    """
    try:
        async with session.begin_nested():
            value = await session.scalar(build())
    except SQLAlchemyError as exc:
        log.warning("review.count_failed", count=label, error=str(exc), **context)
        return 0
    return value or 0


def _member_count_query(org_id: int) -> Select:
    return select(func.count()).select_from(OrgMember).where(OrgMember.org_id == org_id)


def _event_count_query(org_id: int) -> Select:
    return select(func.count()).select_from(Event).where(Event.organization_id == org_id)


def _org_rsvp_count_query(org_id: int) -> Select:
    return (
        select(func.count())
        .select_from(EventRSVP)
        .join(Event, Event.id == EventRSVP.event_id)
        .where(Event.organization_id == org_id)
    )


def _rsvp_count_query(event_id: int, status: str) -> Select:
    return (
        select(func.count())
        .select_from(EventRSVP)
        .where(EventRSVP.event_id == event_id, EventRSVP.status == status)
    )


async def _admin_ids(model, column, target_id: int, session: AsyncSession) -> list[int]:
    result = await session.execute(
        select(model.user_id).where(column == target_id).order_by(model.user_id)
    )
    return list(result.scalars().all())


async def get_organization_review_details(org_id: int, session: AsyncSession) -> dict:
    """Everything staff look at before deciding on an organization."""
    org = await session.get(Organization, org_id)
    if org is None:
        raise NotFound("Organization not found")

    admins = await _admin_ids(OrgAdmin, OrgAdmin.org_id, org_id, session)
    result = await session.execute(
        select(Event).where(Event.organization_id == org_id).order_by(Event.start_date)
    )
    events = list(result.scalars().all())

    return {
        "organization": org,
        "admins": admins,
        "member_count": await _safe_count(
            lambda: _member_count_query(org_id), session, label="members", org_id=org_id
        ),
        "events": events,
        "events_count": await _safe_count(
            lambda: _event_count_query(org_id), session, label="events", org_id=org_id
        ),
        "total_rsvps": await _safe_count(
            lambda: _org_rsvp_count_query(org_id), session, label="rsvps", org_id=org_id
        ),
    }


async def get_event_review_details(event_id: int, session: AsyncSession) -> dict:
    """Everything staff look at before deciding on an event.

    Each RSVP status is counted on its own; one failing count zeroes only
    that status.
    """
    event = await session.get(Event, event_id)
    if event is None:
        raise NotFound("Event not found")

    organization = None
    if event.organization_id is not None:
        organization = await session.get(Organization, event.organization_id)

    admins = await _admin_ids(EventAdmin, EventAdmin.event_id, event_id, session)

    rsvp_stats = {}
    for status in RSVPStatus:
        rsvp_stats[status.value] = await _safe_count(
            lambda status=status: _rsvp_count_query(event_id, status.value),
            session,
            label=f"rsvp_{status.value}",
            event_id=event_id,
        )

    return {
        "event": event,
        "organization": organization,
        "admins": admins,
        "rsvp_stats": rsvp_stats,
    }


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------

async def _require_pending(
    target: OfficialTarget, to: OfficialState, session: AsyncSession
) -> tuple[TargetKind, int, OfficialPending]:
    """The pending row of a target that may move to ``to``; NotFound otherwise."""
    kind, target_id = resolve_target(target)
    state, pending = await _current_state(kind, target_id, session)
    if pending is None or not _can_move(state, to):
        raise NotFound(NO_PENDING_REQUEST)
    return kind, target_id, pending


async def approve_official(
    target: OfficialTarget, session: AsyncSession, *, reviewer_id: Optional[int] = None
) -> Official:
    """Grant official status and clear the pending request.

    The insert and the delete share the request transaction, so they commit
    or roll back together.
    """
    kind, target_id, pending = await _require_pending(target, OfficialState.OFFICIAL, session)

    official = Official(**_target_fields(kind, target_id))
    session.add(official)
    await session.delete(pending)
    await session.flush()

    log.info(
        "official.approved",
        kind=kind.value,
        target_id=target_id,
        submission_id=pending.id,
        reviewer_id=reviewer_id,
    )
    return official


async def reject_official(
    target: OfficialTarget, session: AsyncSession, *, reviewer_id: Optional[int] = None
) -> None:
    """Drop the pending request. Nothing else is recorded."""
    kind, target_id, pending = await _require_pending(target, OfficialState.UNSUBMITTED, session)

    await session.delete(pending)
    await session.flush()

    log.info(
        "official.rejected",
        kind=kind.value,
        target_id=target_id,
        submission_id=pending.id,
        reviewer_id=reviewer_id,
    )


# ---------------------------------------------------------------------------
# Submissions by id
# ---------------------------------------------------------------------------

def target_of(pending: OfficialPending) -> OfficialTarget:
    return OfficialTarget(org_id=pending.org_id, event_id=pending.event_id)


async def get_submission(
    submission_id: int, session: AsyncSession
) -> tuple[OfficialPending, TargetKind, Optional[Target]]:
    """A pending request plus the row it names."""
    pending = await session.get(OfficialPending, submission_id)
    if pending is None:
        raise NotFound("Submission not found")
    kind, target_id = resolve_target(target_of(pending))
    return pending, kind, await _load_target(kind, target_id, session)


async def decide_submission(
    submission_id: int, approved: bool, session: AsyncSession, *, reviewer_id: Optional[int] = None
) -> str:
    """Approve or reject a pending request addressed by its own id."""
    pending = await session.get(OfficialPending, submission_id)
    if pending is None:
        raise NotFound("Submission not found")

    target = target_of(pending)
    if approved:
        await approve_official(target, session, reviewer_id=reviewer_id)
        return "Submission approved"
    await reject_official(target, session, reviewer_id=reviewer_id)
    return "Submission rejected"


# ---------------------------------------------------------------------------
# Public status checks
# ---------------------------------------------------------------------------

async def is_pending(target: OfficialTarget, session: AsyncSession) -> bool:
    kind, target_id = resolve_target(target, TARGET_PARAM_REQUIRED)
    return await _find_pending(kind, target_id, session) is not None


async def is_official(target: OfficialTarget, session: AsyncSession) -> bool:
    kind, target_id = resolve_target(target, TARGET_PARAM_REQUIRED)
    return await _find_official(kind, target_id, session) is not None
