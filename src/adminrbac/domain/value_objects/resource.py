"""Console resources guarded by the permission matrix."""

from enum import StrEnum
from types import MappingProxyType

from adminrbac.domain.value_objects.permission_action import PermissionAction


class Resource(StrEnum):
    """Fixed set of resource keys in a role's permission matrix."""

    SYSTEM_CONFIG = "systemConfig"
    API_MANAGEMENT = "apiManagement"
    PRICING = "pricing"
    MERCHANT_MANAGEMENT = "merchantManagement"
    ANALYTICS = "analytics"
    SYSTEM_HEALTH = "systemHealth"
    COMPLIANCE = "compliance"
    AUDIT_LOGS = "auditLogs"
    USER_MANAGEMENT = "userManagement"
    ROLE_MANAGEMENT = "roleManagement"
    TEMPLATES = "templates"
    SUPPORT_TICKETS = "supportTickets"
    AI_PROMPTS = "aiPrompts"
    PAYOUTS = "payouts"


_A = PermissionAction
_CRUD = frozenset({_A.READ, _A.CREATE, _A.UPDATE, _A.DELETE})
_RWD = frozenset({_A.READ, _A.WRITE, _A.DELETE})

RESOURCE_ACTIONS: MappingProxyType[Resource, frozenset[PermissionAction]] = MappingProxyType(
    {
        Resource.SYSTEM_CONFIG: _RWD,
        Resource.API_MANAGEMENT: _RWD,
        Resource.PRICING: _RWD,
        Resource.MERCHANT_MANAGEMENT: _RWD | {_A.SUSPEND, _A.TERMINATE},
        Resource.ANALYTICS: frozenset({_A.READ, _A.WRITE, _A.EXPORT}),
        Resource.SYSTEM_HEALTH: frozenset({_A.READ, _A.WRITE}),
        Resource.COMPLIANCE: _RWD | {_A.EXPORT},
        Resource.AUDIT_LOGS: frozenset({_A.READ, _A.EXPORT}),
        Resource.USER_MANAGEMENT: _CRUD | {_A.ASSIGN_ROLES},
        Resource.ROLE_MANAGEMENT: _CRUD,
        Resource.TEMPLATES: _CRUD,
        Resource.SUPPORT_TICKETS: _CRUD,
        Resource.AI_PROMPTS: _CRUD,
        Resource.PAYOUTS: _RWD | {_A.EXPORT},
    }
)


def allowed_actions(resource: Resource) -> frozenset[PermissionAction]:
    """Canonical action set for a resource."""
    return RESOURCE_ACTIONS[resource]
