from adminrbac.application.use_cases.role.create_role import CreateRoleUseCase
from adminrbac.application.use_cases.role.deactivate_role import (
    DeactivateRoleUseCase,
    ReactivateRoleUseCase,
)
from adminrbac.application.use_cases.role.delete_role import DeleteRoleUseCase
from adminrbac.application.use_cases.role.get_role import GetRoleUseCase, ListRolesUseCase
from adminrbac.application.use_cases.role.list_assignable_roles import (
    ListAssignableRolesUseCase,
)
from adminrbac.application.use_cases.role.update_role import UpdateRoleUseCase

__all__ = [
    "CreateRoleUseCase",
    "DeactivateRoleUseCase",
    "DeleteRoleUseCase",
    "GetRoleUseCase",
    "ListAssignableRolesUseCase",
    "ListRolesUseCase",
    "ReactivateRoleUseCase",
    "UpdateRoleUseCase",
]
