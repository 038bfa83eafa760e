"""Repository ports."""

from adminrbac.application.ports.repositories.admin_repository import AdminRepository
from adminrbac.application.ports.repositories.role_repository import RoleRepository

__all__ = [
    "AdminRepository",
    "RoleRepository",
]
