"""Auth middleware - maps the bearer token to an admin account."""

from dataclasses import dataclass
from uuid import UUID

import falcon.asgi
import structlog

from adminrbac.logging import bind_request_context

logger = structlog.get_logger(__name__)


@dataclass
class RequestUser:
    """Admin behind the request."""

    admin_id: UUID
    email: str | None = None
    username: str | None = None


class AuthMiddleware:
    """Validates the bearer token and sets req.context.user (None when unauthenticated).

    The token's email claim identifies the admin; status and permissions are
    checked later by the use cases, never here.
    """

    def __init__(self, keycloak_provider, unit_of_work_factory: type) -> None:
        self._keycloak = keycloak_provider
        self._uow_factory = unit_of_work_factory

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Extract admin from Authorization header."""
        req.context.user = None
        auth = req.get_header("Authorization")
        if not auth or not auth.startswith("Bearer ") or not self._keycloak:
            return

        identity = self._keycloak.decode_token(auth[7:])
        if not identity or not identity.email:
            return

        async with self._uow_factory() as uow:
            admin = await uow.admins.get_by_email(identity.email)
        if not admin:
            logger.info("auth.unknown_admin", subject=identity.subject)
            return

        req.context.user = RequestUser(
            admin_id=admin.id,
            email=admin.email,
            username=identity.username,
        )
        bind_request_context(admin_id=str(admin.id))
