"""Role entity for RBAC."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from adminrbac.domain.value_objects import PermissionMatrix

# Fields a system role must never change after seeding.
PROTECTED_SYSTEM_FIELDS = frozenset(
    {
        "name",
        "display_name",
        "level",
        "permissions",
        "parent_role_id",
        "can_create_sub_roles",
        "max_sub_roles",
        "can_manage_users",
        "max_sub_users",
    }
)


@dataclass
class Role:
    """Role - named, leveled bundle of permissions. Lower level = more privileged."""

    id: UUID
    name: str
    display_name: str
    description: str
    level: int
    created_at: datetime
    updated_at: datetime
    permissions: PermissionMatrix = field(default_factory=PermissionMatrix)
    is_system_role: bool = False
    is_custom_role: bool = True
    can_create_sub_roles: bool = False
    max_sub_roles: int | None = None
    can_manage_users: bool = False
    max_sub_users: int | None = None
    parent_role_id: UUID | None = None
    is_active: bool = True
    assigned_users_count: int = 0
    last_assigned_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None
    version: int = 0
