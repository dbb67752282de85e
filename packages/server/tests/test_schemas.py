"""
Wire schema behaviour: camelCase aliases and the official-status lifecycle.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from quad_shared.schemas.events import EventCreateRequest
from quad_shared.schemas.official import (
    OFFICIAL_TRANSITIONS,
    OfficialState,
    OfficialTarget,
    OrganizationReviewResponse,
)
from quad_shared.schemas.organizations import OrganizationCreatedResponse


def test_target_accepts_aliases_and_field_names():
    assert OfficialTarget.model_validate({"orgID": 4}).org_id == 4
    assert OfficialTarget(event_id=9).event_id == 9


def test_created_response_dumps_id_alias():
    dumped = OrganizationCreatedResponse(org_id=7).model_dump(by_alias=True)
    assert dumped == {"success": True, "message": "Organization created successfully", "orgID": 7}


def test_review_response_total_rsvps_alias():
    fields = OrganizationReviewResponse.model_fields
    assert fields["total_rsvps"].alias == "totalRSVPs"


def test_official_is_terminal():
    assert OFFICIAL_TRANSITIONS[OfficialState.OFFICIAL] == []
    assert OfficialState.UNSUBMITTED in OFFICIAL_TRANSITIONS[OfficialState.PENDING]
    assert OFFICIAL_TRANSITIONS[OfficialState.UNSUBMITTED] == [OfficialState.PENDING]


def test_event_dates_must_agree_on_timezone():
    with pytest.raises(ValidationError):
        EventCreateRequest(
            organization_id=1,
            title="Mixed",
            start_date=datetime(2030, 1, 1, 10),
            end_date=datetime(2030, 1, 1, 12, tzinfo=timezone.utc),
        )


def test_event_defaults():
    req = EventCreateRequest.model_validate(
        {
            "organizationID": 1,
            "title": "Talk",
            "startDate": "2030-01-01T10:00:00Z",
            "endDate": "2030-01-01T11:00:00Z",
        }
    )
    assert req.privacy.value == "public"
    assert req.submit_for_official_status is False
    assert req.landmark_id is None
