"""
Official status endpoints.

POST   /api/official/submit   Alias of /api/admin/submit-for-official
GET    /api/official/pending  Public: is the target awaiting review?
GET    /api/official/status   Public: does the target have official status?
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quad_server.core.auth import AuthenticatedUser, get_authenticated_user
from quad_server.core.database import get_session
from quad_server.services import official as official_service
from quad_shared.schemas.common import SuccessResponse
from quad_shared.schemas.official import (
    OfficialStatusResponse,
    OfficialTarget,
    PendingStatusResponse,
)

router = APIRouter()


def _target_params(
    orgID: Optional[int] = Query(None),
    eventID: Optional[int] = Query(None),
) -> OfficialTarget:
    return OfficialTarget(org_id=orgID, event_id=eventID)


@router.post("/submit", response_model=SuccessResponse)
async def submit(
    body: Optional[OfficialTarget] = None,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    await official_service.submit_for_official(
        auth.user_id, body or OfficialTarget(), session
    )
    return SuccessResponse(message="Successfully submitted for official status")


@router.get("/pending", response_model=PendingStatusResponse)
async def check_pending(
    target: OfficialTarget = Depends(_target_params),
    session: AsyncSession = Depends(get_session),
):
    return PendingStatusResponse(is_pending=await official_service.is_pending(target, session))


@router.get("/status", response_model=OfficialStatusResponse)
async def check_official(
    target: OfficialTarget = Depends(_target_params),
    session: AsyncSession = Depends(get_session),
):
    return OfficialStatusResponse(is_official=await official_service.is_official(target, session))

