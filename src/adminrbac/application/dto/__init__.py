"""Application DTOs."""

from adminrbac.application.dto.admin_dto import AdminDraft, AdminFilter
from adminrbac.application.dto.pagination import Page
from adminrbac.application.dto.role_dto import UNSET, RoleDraft, RoleFilter, RolePatch
from adminrbac.application.dto.serializers import admin_to_dict, role_to_dict

__all__ = [
    "UNSET",
    "AdminDraft",
    "AdminFilter",
    "Page",
    "RoleDraft",
    "RoleFilter",
    "RolePatch",
    "admin_to_dict",
    "role_to_dict",
]
