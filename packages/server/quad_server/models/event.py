"""Event model."""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import IntIDMixin, TimestampMixin


class Event(IntIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "events"

    organization_id: int = Field(foreign_key="organizations.id", nullable=False, index=True)
    title: str = Field(nullable=False)
    description: Optional[str] = None
    start_date: datetime = Field(sa_type=sa.DateTime(timezone=True), nullable=False, index=True)
    end_date: datetime = Field(sa_type=sa.DateTime(timezone=True), nullable=False)
    thumbnail: Optional[str] = None
    banner: Optional[str] = None
    privacy: str = Field(default="public", nullable=False)  # public | organization | private
    landmark_id: Optional[int] = Field(default=None, foreign_key="landmarks.id")
    custom_location: Optional[str] = None
