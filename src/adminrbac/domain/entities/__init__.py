"""Domain entities."""

from adminrbac.domain.entities.admin import Admin
from adminrbac.domain.entities.audit_entry import AuditEntry
from adminrbac.domain.entities.role import Role

__all__ = [
    "Admin",
    "AuditEntry",
    "Role",
]
