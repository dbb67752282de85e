"""Organization model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import IntIDMixin, TimestampMixin


class Organization(IntIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "organizations"

    name: str = Field(unique=True, nullable=False, index=True)
    description: Optional[str] = None
    thumbnail: Optional[str] = None  # image reference, not the image
    banner: Optional[str] = None
    privacy: str = Field(default="public", nullable=False)  # public | private
