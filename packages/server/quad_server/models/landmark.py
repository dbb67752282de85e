"""Campus landmark reference data."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import IntIDMixin


class Landmark(IntIDMixin, SQLModel, table=True):
    __tablename__ = "landmarks"

    name: str = Field(unique=True, nullable=False)
    description: Optional[str] = None
