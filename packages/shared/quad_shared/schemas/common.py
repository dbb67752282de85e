from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for wire schemas: camelCase JSON keys, snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrgPrivacy(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class EventPrivacy(str, Enum):
    PUBLIC = "public"
    ORGANIZATION = "organization"
    PRIVATE = "private"


class RSVPStatus(str, Enum):
    ATTENDING = "attending"
    MAYBE = "maybe"
    DECLINED = "declined"


class SuccessResponse(CamelModel):
    success: bool = True
    message: str


class ErrorResponse(CamelModel):
    success: bool = False
    error: str


class ExistsResponse(CamelModel):
    success: bool = True
    exists: bool
