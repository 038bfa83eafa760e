"""Role DTOs."""

from dataclasses import dataclass, field, fields
from typing import Any
from uuid import UUID


class _Unset:
    """Marker for patch fields the caller did not touch."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass
class RoleDraft:
    """Input for creating a role."""

    name: str
    level: int
    display_name: str | None = None
    description: str = ""
    permissions: dict[str, list[str]] = field(default_factory=dict)
    can_create_sub_roles: bool = False
    max_sub_roles: int | None = None
    can_manage_users: bool = False
    max_sub_users: int | None = None
    parent_role_id: UUID | None = None


@dataclass
class RolePatch:
    """Partial update of a role. Fields left UNSET are not touched."""

    name: Any = UNSET
    display_name: Any = UNSET
    description: Any = UNSET
    level: Any = UNSET
    permissions: Any = UNSET  # dict[str, list[str]]
    can_create_sub_roles: Any = UNSET
    max_sub_roles: Any = UNSET
    can_manage_users: Any = UNSET
    max_sub_users: Any = UNSET
    parent_role_id: Any = UNSET

    def touched(self) -> dict[str, Any]:
        """Fields explicitly set by the caller."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


@dataclass
class RoleFilter:
    """Filter for role listing."""

    is_active: bool | None = True
    is_system_role: bool | None = None
    parent_role_id: UUID | None = None
    min_level: int | None = None
    max_level: int | None = None
    name_contains: str | None = None
