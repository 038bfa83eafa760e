"""Domain value objects."""

from adminrbac.domain.value_objects.access_level import AccessLevel, access_level_for
from adminrbac.domain.value_objects.admin_status import AdminStatus
from adminrbac.domain.value_objects.permission_action import PermissionAction
from adminrbac.domain.value_objects.permission_matrix import PermissionMatrix
from adminrbac.domain.value_objects.resource import RESOURCE_ACTIONS, Resource

__all__ = [
    "RESOURCE_ACTIONS",
    "AccessLevel",
    "AdminStatus",
    "PermissionAction",
    "PermissionMatrix",
    "Resource",
    "access_level_for",
]
