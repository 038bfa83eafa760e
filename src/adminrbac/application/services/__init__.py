"""Application services - the components the use cases compose."""

from adminrbac.application.services.admin_directory import AdminDirectory
from adminrbac.application.services.role_catalog import RoleCatalog
from adminrbac.application.services.role_hierarchy import RoleHierarchyValidator

__all__ = [
    "AdminDirectory",
    "RoleCatalog",
    "RoleHierarchyValidator",
]
