"""Official-status tables.

``official_pending`` queues requests awaiting staff review; ``official``
records granted status. A row names exactly one target: an organization or
an event, never both.
"""

from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, IntIDMixin


class OfficialPending(IntIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "official_pending"
    __table_args__ = (
        sa.CheckConstraint(
            "(org_id IS NULL) <> (event_id IS NULL)",
            name="ck_official_pending_one_target",
        ),
    )

    # UNIQUE makes the losing side of two racing submissions fail on insert.
    org_id: Optional[int] = Field(default=None, foreign_key="organizations.id", unique=True)
    event_id: Optional[int] = Field(default=None, foreign_key="events.id", unique=True)


class Official(IntIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "official"
    __table_args__ = (
        sa.CheckConstraint(
            "(org_id IS NULL) <> (event_id IS NULL)",
            name="ck_official_one_target",
        ),
    )

    org_id: Optional[int] = Field(default=None, foreign_key="organizations.id", unique=True)
    event_id: Optional[int] = Field(default=None, foreign_key="events.id", unique=True)
