"""Admin entity - console account bound to one role."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from adminrbac.domain.value_objects import AccessLevel, AdminStatus


@dataclass
class Admin:
    """Admin account. ``manager_id`` is the organizational tree, not the role tree."""

    id: UUID
    email: str
    role_id: UUID
    access_level: AccessLevel
    created_at: datetime
    updated_at: datetime
    status: AdminStatus = AdminStatus.ACTIVE
    display_name: str | None = None
    can_create_sub_users: bool = False
    max_sub_users: int | None = None
    created_sub_users_count: int = 0
    manager_id: UUID | None = None
    team_id: str | None = None
    status_reason: str | None = None
    last_login_at: datetime | None = None
    login_count: int = 0
    created_by: str | None = None
    updated_by: str | None = None
    version: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == AdminStatus.ACTIVE

    @property
    def is_super_admin(self) -> bool:
        return self.access_level == AccessLevel.SUPER_ADMIN

    def has_sub_user_capacity(self) -> bool:
        if self.max_sub_users is None:
            return True
        return self.created_sub_users_count < self.max_sub_users
