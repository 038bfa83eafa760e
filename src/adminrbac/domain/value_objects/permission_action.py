"""Permission actions for RBAC."""

from enum import StrEnum


class PermissionAction(StrEnum):
    """Actions that can be granted on a resource."""

    READ = "read"
    WRITE = "write"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SUSPEND = "suspend"
    TERMINATE = "terminate"
    EXPORT = "export"
    ASSIGN_ROLES = "assignRoles"
