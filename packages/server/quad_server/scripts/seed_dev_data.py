"""Seed a development database with landmarks, users, organizations and events.

Usage:
    python -m quad_server.scripts.seed_dev_data

Reads QUAD_DATABASE_URL (or defaults to localhost). Safe to run twice: rows
that already exist are left alone.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from quad_server.core.auth import hash_password
from quad_server.core.config import get_settings
from quad_server.core.database import get_session_context, init_db
from quad_server.core.logging import configure_logging
from quad_server.models import Event, EventAdmin, Landmark, Organization, OrgAdmin, OrgMember, Staff, User

log = structlog.get_logger()

DEV_PASSWORD = "quad-dev-password"

LANDMARKS = [
    ("Student Union", "Main ballroom and meeting rooms"),
    ("Main Library", "Group study rooms on the second floor"),
    ("Recreation Center", "Courts, pool and the climbing wall"),
    ("Engineering Quad", "Outdoor space between the engineering halls"),
]

USERS = [
    # email, first, last, staff
    ("alice@campus.dev", "Alice", "Admin", False),
    ("sam@campus.dev", "Sam", "Staff", True),
]

ORGANIZATIONS = [
    # name, description, thumbnail, banner
    ("Robotics Club", "Build, break and rebuild robots.", "robotics-thumb.png", "robotics-banner.png"),
    ("Chess Society", "Weekly blitz and a spring tournament.", "chess-thumb.png", None),
]


async def _get_or_create_user(session: AsyncSession, email, first, last) -> User:
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None:
        user = User(
            email=email,
            password_hash=hash_password(DEV_PASSWORD),
            first_name=first,
            last_name=last,
        )
        session.add(user)
        await session.flush()
    return user


async def seed(session: AsyncSession) -> None:
    for name, description in LANDMARKS:
        result = await session.execute(select(Landmark).where(Landmark.name == name))
        if result.scalar_one_or_none() is None:
            session.add(Landmark(name=name, description=description))

    users = {}
    for email, first, last, staff in USERS:
        user = await _get_or_create_user(session, email, first, last)
        users[email] = user
        if staff and await session.get(Staff, user.id) is None:
            session.add(Staff(user_id=user.id))

    admin = users["alice@campus.dev"]
    start = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0) + timedelta(days=7)
    for name, description, thumbnail, banner in ORGANIZATIONS:
        result = await session.execute(select(Organization).where(Organization.name == name))
        if result.scalar_one_or_none() is not None:
            continue
        org = Organization(name=name, description=description, thumbnail=thumbnail, banner=banner)
        session.add(org)
        await session.flush()
        session.add(OrgAdmin(user_id=admin.id, org_id=org.id))
        session.add(OrgMember(user_id=admin.id, org_id=org.id))

        event = Event(
            organization_id=org.id,
            title=f"{name} Kickoff",
            description=f"Meet the {name}.",
            start_date=start,
            end_date=start + timedelta(hours=2),
            thumbnail=thumbnail,
            banner=banner,
            custom_location="Student Union",
        )
        session.add(event)
        await session.flush()
        session.add(EventAdmin(user_id=admin.id, event_id=event.id))

    await session.flush()
    log.info("seed.complete", users=len(users), organizations=len(ORGANIZATIONS))


async def main():
    await init_db()
    async with get_session_context() as session:
        await seed(session)


if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings.log_level, "console")
    asyncio.run(main())
