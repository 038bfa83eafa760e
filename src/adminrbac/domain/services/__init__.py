"""Pure domain services."""

from adminrbac.domain.services.permission_policy import has_bypass, resolve_permission

__all__ = [
    "has_bypass",
    "resolve_permission",
]
