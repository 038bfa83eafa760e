"""Permission policy - pure decision over (admin, role, resource, action)."""

from adminrbac.domain.entities import Admin, Role
from adminrbac.domain.value_objects import PermissionAction, Resource
from adminrbac.domain.value_objects.access_level import MIN_LEVEL


def _coerce_resource(resource: Resource | str) -> Resource | None:
    try:
        return Resource(resource)
    except ValueError:
        return None


def _coerce_action(action: PermissionAction | str) -> PermissionAction | None:
    try:
        return PermissionAction(action)
    except ValueError:
        return None


def has_bypass(admin: Admin | None, role: Role | None) -> bool:
    """Active super admins whose current role is still level 0 skip the matrix.

    The cached ``access_level`` label alone never grants the bypass.
    """
    return (
        admin is not None
        and admin.is_active
        and admin.is_super_admin
        and role is not None
        and role.is_active
        and role.id == admin.role_id
        and role.level == MIN_LEVEL
    )


def resolve_permission(
    admin: Admin | None,
    role: Role | None,
    resource: Resource | str,
    action: PermissionAction | str,
) -> bool:
    """Decide whether ``admin`` may perform ``action`` on ``resource``.

    Fail-closed: a missing or non-active admin, a missing or inactive role,
    a role that is not the admin's current role, and unknown resource or
    action names all resolve to False.
    """
    if admin is None or not admin.is_active:
        return False
    if has_bypass(admin, role):
        return True
    if role is None or not role.is_active or role.id != admin.role_id:
        return False
    parsed_resource = _coerce_resource(resource)
    parsed_action = _coerce_action(action)
    if parsed_resource is None or parsed_action is None:
        return False
    return role.permissions.allows(parsed_resource, parsed_action)
