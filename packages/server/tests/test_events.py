"""
Tests for event registration, RSVPs, the official events feed and landmarks.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from quad_server.models import Event, EventAdmin, EventRSVP, Landmark, Official, OfficialPending
from quad_server.services import events as event_service

from conftest import auth_headers


def _event_body(org_id, **overrides):
    start = datetime.now(timezone.utc) + timedelta(days=10)
    body = {
        "organizationID": org_id,
        "title": "Open Mic",
        "startDate": start.isoformat(),
        "endDate": (start + timedelta(hours=3)).isoformat(),
    }
    body.update(overrides)
    return body


async def _landmark(db, name="Student Union"):
    async def _create(session):
        landmark = Landmark(name=name, description=f"The {name}")
        session.add(landmark)
        await session.flush()
        return landmark
    return await db(_create)


async def _make_official(db, event):
    async def _create(session):
        session.add(Official(event_id=event.id))
    await db(_create)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

class TestRegisterEvent:
    async def test_admin_creates_event(self, client, db, make_user, make_org, count_rows):
        admin = await make_user()
        org = await make_org(admin)
        landmark = await _landmark(db)

        response = await client.post(
            "/api/events",
            json=_event_body(org.id, landmarkID=landmark.id, customLocation="Room 2"),
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Event created successfully"
        event_id = body["eventID"]
        assert await count_rows(Event, id=event_id, landmark_id=landmark.id) == 1
        assert await count_rows(EventAdmin, event_id=event_id, user_id=admin.id) == 1
        assert await count_rows(OfficialPending) == 0

    async def test_non_admin_forbidden(self, client, make_user, make_org, count_rows):
        member = await make_user()
        org = await make_org(members=(member,))

        response = await client.post(
            "/api/events", json=_event_body(org.id), headers=auth_headers(member)
        )

        assert response.status_code == 403
        assert response.json()["error"] == "User is not an admin of this organization"
        assert await count_rows(Event) == 0

    async def test_unknown_organization(self, client, make_user):
        user = await make_user()

        response = await client.post(
            "/api/events", json=_event_body(999), headers=auth_headers(user)
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Organization not found"

    async def test_end_before_start(self, client, make_user, make_org):
        admin = await make_user()
        org = await make_org(admin)
        start = datetime.now(timezone.utc) + timedelta(days=1)

        response = await client.post(
            "/api/events",
            json=_event_body(
                org.id,
                startDate=start.isoformat(),
                endDate=(start - timedelta(hours=1)).isoformat(),
            ),
            headers=auth_headers(admin),
        )

        assert response.status_code == 400
        assert "endDate must not be before startDate" in response.json()["error"]

    async def test_unknown_landmark(self, client, make_user, make_org, count_rows):
        admin = await make_user()
        org = await make_org(admin)

        response = await client.post(
            "/api/events", json=_event_body(org.id, landmarkID=77), headers=auth_headers(admin)
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Landmark not found"
        assert await count_rows(Event) == 0

    async def test_submit_on_create_queues_event(self, client, make_user, make_org, count_rows):
        admin = await make_user()
        org = await make_org(admin)

        response = await client.post(
            "/api/events",
            json=_event_body(
                org.id, thumbnail="t.png", banner="b.png", submitForOfficialStatus=True
            ),
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Event created and submitted for official status"
        assert await count_rows(OfficialPending, event_id=body["eventID"]) == 1

    @pytest.mark.parametrize(
        "images,error",
        [
            ({"banner": "b.png"}, "Thumbnail is required when submitting for official status"),
            ({"thumbnail": "t.png"}, "Banner is required when submitting for official status"),
        ],
    )
    async def test_submit_on_create_needs_images(
        self, client, make_user, make_org, count_rows, images, error
    ):
        admin = await make_user()
        org = await make_org(admin)

        response = await client.post(
            "/api/events",
            json=_event_body(org.id, submitForOfficialStatus=True, **images),
            headers=auth_headers(admin),
        )

        assert response.status_code == 400
        assert response.json()["error"] == error
        assert await count_rows(Event) == 0


# ---------------------------------------------------------------------------
# Lookup and RSVPs
# ---------------------------------------------------------------------------

class TestGetEvent:
    async def test_includes_organization_name(self, client, make_org, make_event):
        org = await make_org(name="Glee Club")
        event = await make_event(org, title="Spring Concert")

        response = await client.get(f"/api/events/{event.id}")

        assert response.status_code == 200
        detail = response.json()["event"]
        assert detail["eventID"] == event.id
        assert detail["title"] == "Spring Concert"
        assert detail["organizationID"] == org.id
        assert detail["organizationName"] == "Glee Club"

    async def test_unknown_event(self, client):
        response = await client.get("/api/events/31337")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Event not found"}


class TestListEvents:
    async def test_latest_first_with_organization_name(self, client, make_org, make_event):
        chess = await make_org(name="Chess Club")
        glee = await make_org(name="Glee Club")
        now = datetime.now(timezone.utc)
        await make_event(chess, title="Old", start=now - timedelta(days=4))
        await make_event(glee, title="Soon", start=now + timedelta(days=1))
        await make_event(chess, title="Far", start=now + timedelta(days=30))

        body = (await client.get("/api/events")).json()

        assert [(e["title"], e["organizationName"]) for e in body["events"]] == [
            ("Far", "Chess Club"),
            ("Soon", "Glee Club"),
            ("Old", "Chess Club"),
        ]

    async def test_organization_filter_and_limit(self, client, make_org, make_event):
        org = await make_org()
        other = await make_org()
        now = datetime.now(timezone.utc)
        for days in (1, 2, 3):
            await make_event(org, title=f"D{days}", start=now + timedelta(days=days))
        await make_event(other, title="Elsewhere")

        filtered = (
            await client.get("/api/events", params={"organizationID": org.id, "limit": 2})
        ).json()

        assert [e["title"] for e in filtered["events"]] == ["D3", "D2"]
        assert {e["organizationID"] for e in filtered["events"]} == {org.id}

    async def test_limit_bounds(self, client):
        response = await client.get("/api/events", params={"limit": 0})
        assert response.status_code == 400


class TestUserEvents:
    async def test_merges_organized_and_rsvped(
        self, client, db, make_user, make_org, make_event
    ):
        user = await make_user()
        org = await make_org(name="Outing Club")
        now = datetime.now(timezone.utc)
        organized = await make_event(org, user, title="Organized", start=now + timedelta(days=1))
        both = await make_event(org, user, title="Both", start=now + timedelta(days=2))
        going = await make_event(org, title="Going", start=now + timedelta(days=3))
        await make_event(org, title="Unrelated", start=now + timedelta(days=4))

        async def _rsvps(session):
            session.add(EventRSVP(event_id=both.id, user_id=user.id, status="attending"))
            session.add(EventRSVP(event_id=going.id, user_id=user.id, status="maybe"))
        await db(_rsvps)

        body = (await client.get("/api/user/events", headers=auth_headers(user))).json()

        assert [
            (e["eventID"], e["isOrganizer"], e["rsvpStatus"]) for e in body["events"]
        ] == [
            (going.id, False, "maybe"),
            (both.id, True, "attending"),
            (organized.id, True, None),
        ]
        assert body["events"][0]["organizationName"] == "Outing Club"

    async def test_nothing_yet(self, client, make_user):
        user = await make_user()
        body = (await client.get("/api/user/events", headers=auth_headers(user))).json()
        assert body == {"success": True, "events": []}

    async def test_requires_authentication(self, client):
        response = await client.get("/api/user/events")
        assert response.status_code == 401


class TestRSVP:
    async def test_create_then_update(self, client, make_user, make_org, make_event, count_rows):
        user = await make_user()
        event = await make_event(await make_org())
        url = f"/api/events/{event.id}/rsvp"

        created = await client.post(url, json={"rsvpStatus": "maybe"}, headers=auth_headers(user))
        updated = await client.post(
            url, json={"rsvpStatus": "attending"}, headers=auth_headers(user)
        )

        assert created.json() == {"success": True, "message": "RSVP created successfully"}
        assert updated.json() == {"success": True, "message": "RSVP updated successfully"}
        assert await count_rows(EventRSVP, event_id=event.id) == 1
        assert await count_rows(EventRSVP, event_id=event.id, status="attending") == 1

    async def test_invalid_status(self, client, make_user, make_org, make_event, count_rows):
        user = await make_user()
        event = await make_event(await make_org())

        response = await client.post(
            f"/api/events/{event.id}/rsvp",
            json={"rsvpStatus": "interested"},
            headers=auth_headers(user),
        )

        assert response.status_code == 400
        assert response.json()["error"] == event_service.INVALID_RSVP
        assert await count_rows(EventRSVP) == 0

    async def test_unknown_event(self, client, make_user):
        user = await make_user()

        response = await client.post(
            "/api/events/9/rsvp", json={"rsvpStatus": "maybe"}, headers=auth_headers(user)
        )

        assert response.status_code == 404

    async def test_get_rsvp(self, client, db, make_user, make_org, make_event):
        user = await make_user()
        other = await make_user()
        event = await make_event(await make_org())

        async def _rsvp(session):
            session.add(EventRSVP(event_id=event.id, user_id=user.id, status="declined"))
        await db(_rsvp)

        mine = await client.get(f"/api/events/{event.id}/rsvp", headers=auth_headers(user))
        theirs = await client.get(f"/api/events/{event.id}/rsvp", headers=auth_headers(other))

        assert mine.json() == {"success": True, "rsvpStatus": "declined"}
        assert theirs.json() == {"success": True, "rsvpStatus": None}

    async def test_rsvp_requires_authentication(self, client, make_org, make_event):
        event = await make_event(await make_org())

        response = await client.post(f"/api/events/{event.id}/rsvp", json={"rsvpStatus": "maybe"})

        assert response.status_code == 401


# ---------------------------------------------------------------------------
# Official feed and landmarks
# ---------------------------------------------------------------------------

class TestOfficialEvents:
    async def test_only_official_upcoming_soonest_first(self, client, db, make_org, make_event):
        org = await make_org()
        now = datetime.now(timezone.utc)
        later = await make_event(org, title="Later", start=now + timedelta(days=9))
        sooner = await make_event(org, title="Sooner", start=now + timedelta(days=2))
        past = await make_event(org, title="Past", start=now - timedelta(days=5))
        await make_event(org, title="Unofficial", start=now + timedelta(days=1))
        for event in (later, sooner, past):
            await _make_official(db, event)

        body = (await client.get("/api/events/official")).json()

        assert [e["title"] for e in body["events"]] == ["Sooner", "Later"]

    async def test_show_past_and_limit(self, client, db, make_org, make_event):
        org = await make_org()
        now = datetime.now(timezone.utc)
        for days in (-3, 1, 2, 3, 4, 5):
            event = await make_event(org, title=f"D{days}", start=now + timedelta(days=days))
            await _make_official(db, event)

        default = (await client.get("/api/events/official")).json()
        with_past = (
            await client.get("/api/events/official", params={"showPast": "true", "limit": 2})
        ).json()

        assert [e["title"] for e in default["events"]] == ["D1", "D2", "D3", "D4"]
        assert [e["title"] for e in with_past["events"]] == ["D-3", "D1"]

    async def test_ongoing_event_still_listed(self, make_org, make_event, db, session):
        org = await make_org()
        now = datetime.now(timezone.utc)
        ongoing = await make_event(org, title="Ongoing", start=now - timedelta(hours=1))
        await _make_official(db, ongoing)

        events = await event_service.list_official_events(session, now=now)

        assert [e.id for e in events] == [ongoing.id]

    async def test_limit_bounds(self, client):
        response = await client.get("/api/events/official", params={"limit": 0})
        assert response.status_code == 400


class TestLandmarks:
    async def test_sorted_by_name(self, client, db):
        await _landmark(db, "Library")
        await _landmark(db, "Arena")

        body = (await client.get("/api/landmarks")).json()

        assert [landmark["name"] for landmark in body["landmarks"]] == ["Arena", "Library"]
        assert body["landmarks"][0]["description"] == "The Arena"
        assert "landmarkID" in body["landmarks"][0]
