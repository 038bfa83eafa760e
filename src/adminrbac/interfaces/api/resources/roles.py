"""Role API resources."""

import falcon
import falcon.asgi

from adminrbac.application.dto import UNSET, RoleDraft, RoleFilter, RolePatch, role_to_dict
from adminrbac.application.use_cases.provisioning.provisioning_guard import ProvisioningGuard
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
from adminrbac.domain.exceptions import ValidationError
from adminrbac.interfaces.api.resources.common import (
    deadline_from,
    json_body,
    optional_uuid,
    parse_uuid,
    require_user,
)

_PATCHABLE = (
    "name",
    "display_name",
    "description",
    "level",
    "permissions",
    "can_create_sub_roles",
    "max_sub_roles",
    "can_manage_users",
    "max_sub_users",
    "parent_role_id",
)


def _draft_from(body: dict) -> RoleDraft:
    try:
        name = body["name"]
        level = body["level"]
    except KeyError as e:
        raise ValidationError(f"Missing required field: {e}") from None
    return RoleDraft(
        name=name,
        level=level,
        display_name=body.get("display_name"),
        description=body.get("description") or "",
        permissions=body.get("permissions") or {},
        can_create_sub_roles=bool(body.get("can_create_sub_roles", False)),
        max_sub_roles=body.get("max_sub_roles"),
        can_manage_users=bool(body.get("can_manage_users", False)),
        max_sub_users=body.get("max_sub_users"),
        parent_role_id=optional_uuid(body.get("parent_role_id"), "parent_role_id"),
    )


def _patch_from(body: dict) -> RolePatch:
    unknown = set(body) - set(_PATCHABLE)
    if unknown:
        raise ValidationError(f"Fields cannot be patched: {', '.join(sorted(unknown))}")
    values = {k: body.get(k, UNSET) for k in _PATCHABLE}
    if values["parent_role_id"] not in (UNSET, None):
        values["parent_role_id"] = parse_uuid(values["parent_role_id"], "parent_role_id")
    return RolePatch(**values)


def _filter_from(req: falcon.asgi.Request) -> RoleFilter:
    status = req.get_param("status") or "active"
    if status not in ("active", "inactive", "all"):
        raise ValidationError(f"Invalid status filter: {status!r}")
    return RoleFilter(
        is_active=None if status == "all" else status == "active",
        is_system_role=req.get_param_as_bool("system"),
        parent_role_id=optional_uuid(req.get_param("parent_role_id"), "parent_role_id"),
        min_level=req.get_param_as_int("min_level"),
        max_level=req.get_param_as_int("max_level"),
        name_contains=req.get_param("q"),
    )


class RolesResource:
    """GET/POST /v1/roles - list and create roles."""

    def __init__(self, list_roles: ListRolesUseCase, create_role: CreateRoleUseCase) -> None:
        self._list = list_roles
        self._create = create_role

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req, resp)
        if not user:
            return

        page = await self._list.execute(
            user.admin_id,
            _filter_from(req),
            cursor=req.get_param("cursor"),
            limit=req.get_param_as_int("limit"),
            deadline=deadline_from(req),
        )
        resp.media = {
            "items": [role_to_dict(r) for r in page.items],
            "next_cursor": page.next_cursor,
        }
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req, resp)
        if not user:
            return

        draft = _draft_from(await json_body(req))
        role = await self._create.execute(user.admin_id, draft)
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_201


class RoleResource:
    """GET/PATCH/DELETE /v1/roles/{role_id}."""

    def __init__(
        self,
        get_role: GetRoleUseCase,
        update_role: UpdateRoleUseCase,
        delete_role: DeleteRoleUseCase,
    ) -> None:
        self._get = get_role
        self._update = update_role
        self._delete = delete_role

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = require_user(req, resp)
        if not user:
            return

        role = await self._get.execute(user.admin_id, parse_uuid(role_id, "role ID"))
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200

    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = require_user(req, resp)
        if not user:
            return

        patch = _patch_from(await json_body(req))
        role = await self._update.execute(user.admin_id, parse_uuid(role_id, "role ID"), patch)
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = require_user(req, resp)
        if not user:
            return

        await self._delete.execute(user.admin_id, parse_uuid(role_id, "role ID"))
        resp.status = falcon.HTTP_204


class RoleActivationResource:
    """POST /v1/roles/{role_id}/deactivate and /v1/roles/{role_id}/reactivate."""

    def __init__(
        self,
        deactivate_role: DeactivateRoleUseCase,
        reactivate_role: ReactivateRoleUseCase,
    ) -> None:
        self._deactivate = deactivate_role
        self._reactivate = reactivate_role

    async def on_post_deactivate(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = require_user(req, resp)
        if not user:
            return

        role = await self._deactivate.execute(user.admin_id, parse_uuid(role_id, "role ID"))
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200

    async def on_post_reactivate(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = require_user(req, resp)
        if not user:
            return

        role = await self._reactivate.execute(user.admin_id, parse_uuid(role_id, "role ID"))
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200


class AssignableRolesResource:
    """GET /v1/roles/assignable - roles the caller may hand out."""

    def __init__(self, list_assignable_roles: ListAssignableRolesUseCase) -> None:
        self._list_assignable = list_assignable_roles

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req, resp)
        if not user:
            return

        roles = await self._list_assignable.execute(user.admin_id, deadline=deadline_from(req))
        resp.media = {"items": [role_to_dict(r) for r in roles]}
        resp.status = falcon.HTTP_200


class SubRolesResource:
    """POST /v1/roles/sub-roles - create a custom role under the caller's own role."""

    def __init__(self, guard: ProvisioningGuard) -> None:
        self._guard = guard

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req, resp)
        if not user:
            return

        draft = _draft_from(await json_body(req))
        role = await self._guard.create_sub_role(draft, user.admin_id)
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_201
