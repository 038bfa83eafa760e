"""Admin DTOs."""

from dataclasses import dataclass
from uuid import UUID

from adminrbac.domain.value_objects import AccessLevel, AdminStatus


@dataclass
class AdminDraft:
    """Input for provisioning a sub-user.

    ``can_create_sub_users`` / ``max_sub_users`` default to the role's
    ``can_manage_users`` / ``max_sub_users`` when left as None.
    """

    email: str
    role_id: UUID
    display_name: str | None = None
    can_create_sub_users: bool | None = None
    max_sub_users: int | None = None
    team_id: str | None = None


@dataclass
class AdminFilter:
    """Filter for admin listing."""

    status: AdminStatus | None = None
    role_id: UUID | None = None
    manager_id: UUID | None = None
    access_level: AccessLevel | None = None
    team_id: str | None = None
