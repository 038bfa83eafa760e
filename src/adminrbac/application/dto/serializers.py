"""Plain-dict views of entities for audit snapshots and API responses."""

from typing import Any

from adminrbac.domain.entities import Admin, Role


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def _str(value) -> str | None:
    return str(value) if value is not None else None


def role_to_dict(role: Role) -> dict[str, Any]:
    return {
        "id": str(role.id),
        "name": role.name,
        "display_name": role.display_name,
        "description": role.description,
        "level": role.level,
        "is_system_role": role.is_system_role,
        "is_custom_role": role.is_custom_role,
        "can_create_sub_roles": role.can_create_sub_roles,
        "max_sub_roles": role.max_sub_roles,
        "can_manage_users": role.can_manage_users,
        "max_sub_users": role.max_sub_users,
        "parent_role_id": _str(role.parent_role_id),
        "permissions": role.permissions.to_dict(),
        "is_active": role.is_active,
        "usage_stats": {
            "assigned_users_count": role.assigned_users_count,
            "last_assigned_at": _iso(role.last_assigned_at),
        },
        "created_at": _iso(role.created_at),
        "created_by": role.created_by,
        "updated_at": _iso(role.updated_at),
        "updated_by": role.updated_by,
    }


def admin_to_dict(admin: Admin) -> dict[str, Any]:
    return {
        "id": str(admin.id),
        "email": admin.email,
        "display_name": admin.display_name,
        "role_id": str(admin.role_id),
        "access_level": admin.access_level.value,
        "status": admin.status.value,
        "status_reason": admin.status_reason,
        "can_create_sub_users": admin.can_create_sub_users,
        "max_sub_users": admin.max_sub_users,
        "created_sub_users_count": admin.created_sub_users_count,
        "manager_id": _str(admin.manager_id),
        "team_id": admin.team_id,
        "created_at": _iso(admin.created_at),
        "created_by": admin.created_by,
        "updated_at": _iso(admin.updated_at),
        "updated_by": admin.updated_by,
    }
