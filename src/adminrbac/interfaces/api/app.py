"""Falcon ASGI application."""

import falcon.asgi
from falcon.asgi import App

from adminrbac.application.ports import AuditLogger, PermissionResolver
from adminrbac.application.services.role_hierarchy import DEFAULT_MAX_HOPS
from adminrbac.application.use_cases.admin import GetAdminUseCase, ListAdminsUseCase
from adminrbac.application.use_cases.provisioning import ProvisioningGuard
from adminrbac.application.use_cases.role import (
    CreateRoleUseCase,
    DeactivateRoleUseCase,
    DeleteRoleUseCase,
    GetRoleUseCase,
    ListAssignableRolesUseCase,
    ListRolesUseCase,
    ReactivateRoleUseCase,
    UpdateRoleUseCase,
)
from adminrbac.domain.exceptions import AdminRBACError
from adminrbac.interfaces.api.errors import handle_domain_error, handle_unexpected_error
from adminrbac.interfaces.api.resources.admins import (
    AdminResource,
    AdminRoleResource,
    AdminsResource,
    AdminStatusResource,
)
from adminrbac.interfaces.api.resources.health import HealthResource
from adminrbac.interfaces.api.resources.permissions import PermissionCheckResource
from adminrbac.interfaces.api.resources.roles import (
    AssignableRolesResource,
    RoleActivationResource,
    RoleResource,
    RolesResource,
    SubRolesResource,
)


def create_app(
    unit_of_work_factory: type,
    permission_resolver: PermissionResolver,
    audit_logger: AuditLogger | None = None,
    *,
    middleware: list | None = None,
    pool=None,
    max_attempts: int = 3,
    max_hops: int = DEFAULT_MAX_HOPS,
    default_page_size: int = 20,
    max_page_size: int = 100,
) -> App:
    """Wire use cases into resources and routes."""
    uow = unit_of_work_factory
    guard = ProvisioningGuard(
        uow, audit_logger, max_attempts=max_attempts, max_hops=max_hops
    )
    paging = {"default_page_size": default_page_size, "max_page_size": max_page_size}

    roles_resource = RolesResource(
        ListRolesUseCase(uow, permission_resolver, **paging),
        CreateRoleUseCase(uow, permission_resolver, audit_logger, max_hops=max_hops),
    )
    role_resource = RoleResource(
        GetRoleUseCase(uow, permission_resolver),
        UpdateRoleUseCase(uow, permission_resolver, audit_logger, max_hops=max_hops),
        DeleteRoleUseCase(uow, permission_resolver, audit_logger),
    )
    role_activation_resource = RoleActivationResource(
        DeactivateRoleUseCase(uow, permission_resolver, audit_logger),
        ReactivateRoleUseCase(uow, permission_resolver, audit_logger),
    )
    admins_resource = AdminsResource(ListAdminsUseCase(uow, permission_resolver, **paging), guard)

    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(AdminRBACError, handle_domain_error)

    health_resource = HealthResource(pool)
    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/roles", roles_resource)
    app.add_route("/v1/roles/assignable", AssignableRolesResource(ListAssignableRolesUseCase(uow)))
    app.add_route("/v1/roles/sub-roles", SubRolesResource(guard))
    app.add_route("/v1/roles/{role_id}", role_resource)
    app.add_route("/v1/roles/{role_id}/deactivate", role_activation_resource, suffix="deactivate")
    app.add_route("/v1/roles/{role_id}/reactivate", role_activation_resource, suffix="reactivate")
    app.add_route("/v1/admins", admins_resource)
    app.add_route("/v1/admins/{admin_id}", AdminResource(GetAdminUseCase(uow, permission_resolver)))
    app.add_route("/v1/admins/{admin_id}/role", AdminRoleResource(guard))
    app.add_route("/v1/admins/{admin_id}/status", AdminStatusResource(guard))
    app.add_route("/v1/me/can", PermissionCheckResource(permission_resolver))
    return app
