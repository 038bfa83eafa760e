"""Application ports - interfaces for external adapters."""

from adminrbac.application.ports.audit_logger import AuditLogger
from adminrbac.application.ports.permission_resolver import PermissionResolver
from adminrbac.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "AuditLogger",
    "PermissionResolver",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
