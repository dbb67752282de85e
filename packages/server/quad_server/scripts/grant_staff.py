"""
Grant platform staff rights to a user.

Staff review official-status requests. There is no API for becoming staff;
operators run this script instead. With ``--password`` the user is created
first if no account exists for the email.

    python -m quad_server.scripts.grant_staff --email reviewer@campus.edu
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from quad_server.core.auth import hash_password
from quad_server.core.config import get_settings
from quad_server.core.database import get_session_context, init_db
from quad_server.core.logging import configure_logging
from quad_server.models.staff import Staff
from quad_server.models.user import User
from quad_server.services.users import get_user_by_email

log = structlog.get_logger()


class GrantStaffError(Exception):
    """The staff grant could not be applied."""


async def grant_staff(
    email: str, session: AsyncSession, *, password: Optional[str] = None
) -> tuple[User, bool]:
    """Make the user with ``email`` staff. Returns (user, newly_granted)."""
    user = await get_user_by_email(email, session)
    if user is None:
        if not password:
            raise GrantStaffError(f"No user with email {email}; pass --password to create one")
        user = User(email=email.strip().lower(), password_hash=hash_password(password))
        session.add(user)
        await session.flush()
        log.info("staff.user_created", user_id=user.id)

    if await session.get(Staff, user.id) is not None:
        log.info("staff.already_granted", user_id=user.id)
        return user, False

    session.add(Staff(user_id=user.id))
    await session.flush()
    log.info("staff.granted", user_id=user.id)
    return user, True


async def _main(email: str, password: Optional[str]) -> None:
    await init_db()
    async with get_session_context() as session:
        await grant_staff(email, session, password=password)


def run() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Grant staff rights to a user.")
    parser.add_argument("--email", required=True, help="Email address of the user")
    parser.add_argument("--password", help="Password, used only when creating the user")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level, "console")
    try:
        asyncio.run(_main(args.email, args.password))
    except GrantStaffError as exc:
        parser.exit(1, f"{exc}\n")


if __name__ == "__main__":
    run()
