"""Platform staff: users allowed to review official-status requests."""

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin


class Staff(CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "staff"

    user_id: int = Field(foreign_key="users.id", primary_key=True)
