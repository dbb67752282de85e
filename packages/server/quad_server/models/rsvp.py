"""Event RSVP model."""

from sqlmodel import Field, SQLModel

from .base import TimestampMixin


class EventRSVP(TimestampMixin, SQLModel, table=True):
    __tablename__ = "event_rsvps"

    event_id: int = Field(foreign_key="events.id", primary_key=True)
    user_id: int = Field(foreign_key="users.id", primary_key=True, index=True)
    status: str = Field(nullable=False, index=True)  # attending | maybe | declined
