"""Permission check resource."""

import falcon
import falcon.asgi

from adminrbac.application.ports import PermissionResolver
from adminrbac.domain.exceptions import ValidationError
from adminrbac.interfaces.api.resources.common import require_user


class PermissionCheckResource:
    """GET /v1/me/can?resource=...&action=... - whether the caller may act.

    Always answers 200; denial is a value, not an error.
    """

    def __init__(self, permission_resolver: PermissionResolver) -> None:
        self._permission_resolver = permission_resolver

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req, resp)
        if not user:
            return

        resource = req.get_param("resource")
        action = req.get_param("action")
        if not resource or not action:
            raise ValidationError("Query parameters 'resource' and 'action' are required")

        allowed = await self._permission_resolver.can(user.admin_id, resource, action)
        resp.media = {"resource": resource, "action": action, "allowed": allowed}
        resp.status = falcon.HTTP_200
