# SQLModel definitions: imported here so SQLModel.metadata is complete for create_all.
from .base import CreatedAtMixin, IntIDMixin, TimestampMixin  # noqa: F401
from .user import User  # noqa: F401
from .organization import Organization  # noqa: F401
from .landmark import Landmark  # noqa: F401
from .event import Event  # noqa: F401
from .memberships import EventAdmin, OrgAdmin, OrgMember  # noqa: F401
from .rsvp import EventRSVP  # noqa: F401
from .staff import Staff  # noqa: F401
from .official import Official, OfficialPending  # noqa: F401
