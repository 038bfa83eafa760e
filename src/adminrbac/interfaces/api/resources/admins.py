"""Admin API resources."""

import falcon
import falcon.asgi

from adminrbac.application.dto import AdminDraft, AdminFilter, admin_to_dict
from adminrbac.application.use_cases.admin import GetAdminUseCase, ListAdminsUseCase
from adminrbac.application.use_cases.provisioning.provisioning_guard import ProvisioningGuard
from adminrbac.domain.exceptions import ValidationError
from adminrbac.domain.value_objects import AccessLevel, AdminStatus
from adminrbac.interfaces.api.resources.common import (
    deadline_from,
    json_body,
    optional_uuid,
    parse_uuid,
    require_user,
)


def _enum_param(req: falcon.asgi.Request, name: str, enum_type):
    value = req.get_param(name)
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError:
        raise ValidationError(f"Invalid {name}: {value!r}") from None


class AdminsResource:
    """GET/POST /v1/admins - list admins and provision sub-users."""

    def __init__(self, list_admins: ListAdminsUseCase, guard: ProvisioningGuard) -> None:
        self._list = list_admins
        self._guard = guard

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req, resp)
        if not user:
            return

        admin_filter = AdminFilter(
            status=_enum_param(req, "status", AdminStatus),
            role_id=optional_uuid(req.get_param("role_id"), "role_id"),
            manager_id=optional_uuid(req.get_param("manager_id"), "manager_id"),
            access_level=_enum_param(req, "access_level", AccessLevel),
            team_id=req.get_param("team_id"),
        )
        page = await self._list.execute(
            user.admin_id,
            admin_filter,
            cursor=req.get_param("cursor"),
            limit=req.get_param_as_int("limit"),
            deadline=deadline_from(req),
        )
        resp.media = {
            "items": [admin_to_dict(a) for a in page.items],
            "next_cursor": page.next_cursor,
        }
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create a sub-user managed by the caller."""
        user = require_user(req, resp)
        if not user:
            return

        body = await json_body(req)
        try:
            draft = AdminDraft(
                email=body["email"],
                role_id=parse_uuid(body["role_id"], "role_id"),
                display_name=body.get("display_name"),
                can_create_sub_users=body.get("can_create_sub_users"),
                max_sub_users=body.get("max_sub_users"),
                team_id=body.get("team_id"),
            )
        except KeyError as e:
            raise ValidationError(f"Missing required field: {e}") from None

        admin = await self._guard.create_admin(draft, user.admin_id)
        resp.media = admin_to_dict(admin)
        resp.status = falcon.HTTP_201


class AdminResource:
    """GET /v1/admins/{admin_id}."""

    def __init__(self, get_admin: GetAdminUseCase) -> None:
        self._get = get_admin

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, admin_id: str
    ) -> None:
        user = require_user(req, resp)
        if not user:
            return

        admin = await self._get.execute(user.admin_id, parse_uuid(admin_id, "admin ID"))
        resp.media = admin_to_dict(admin)
        resp.status = falcon.HTTP_200


class AdminRoleResource:
    """PUT /v1/admins/{admin_id}/role - reassign the admin's role."""

    def __init__(self, guard: ProvisioningGuard) -> None:
        self._guard = guard

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, admin_id: str
    ) -> None:
        user = require_user(req, resp)
        if not user:
            return

        body = await json_body(req)
        if "role_id" not in body:
            raise ValidationError("Missing required field: 'role_id'")
        admin = await self._guard.assign_role(
            parse_uuid(admin_id, "admin ID"),
            parse_uuid(body["role_id"], "role_id"),
            user.admin_id,
        )
        resp.media = admin_to_dict(admin)
        resp.status = falcon.HTTP_200


class AdminStatusResource:
    """POST /v1/admins/{admin_id}/status - suspend, reactivate or deactivate."""

    def __init__(self, guard: ProvisioningGuard) -> None:
        self._transitions = {
            AdminStatus.SUSPENDED: guard.suspend_admin,
            AdminStatus.ACTIVE: guard.reactivate_admin,
            AdminStatus.INACTIVE: guard.deactivate_admin,
        }

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, admin_id: str
    ) -> None:
        user = require_user(req, resp)
        if not user:
            return

        body = await json_body(req)
        try:
            target = AdminStatus(body.get("status"))
        except ValueError:
            raise ValidationError(f"Invalid status: {body.get('status')!r}") from None

        admin = await self._transitions[target](
            parse_uuid(admin_id, "admin ID"), user.admin_id, body.get("reason")
        )
        resp.media = admin_to_dict(admin)
        resp.status = falcon.HTTP_200
