"""Per-organization and per-event membership rows (join tables)."""

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin


class OrgAdmin(CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "org_admins"

    user_id: int = Field(foreign_key="users.id", primary_key=True)
    org_id: int = Field(foreign_key="organizations.id", primary_key=True)


class OrgMember(CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "org_members"

    user_id: int = Field(foreign_key="users.id", primary_key=True)
    org_id: int = Field(foreign_key="organizations.id", primary_key=True)


class EventAdmin(CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "event_admins"

    user_id: int = Field(foreign_key="users.id", primary_key=True)
    event_id: int = Field(foreign_key="events.id", primary_key=True)
