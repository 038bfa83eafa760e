"""Domain error to HTTP response mapping."""

import falcon
import falcon.asgi
import structlog

from adminrbac.domain.exceptions import (
    AdminRBACError,
    Conflict,
    DeadlineExceeded,
    DuplicateName,
    InvalidHierarchy,
    NotFound,
    PermissionDenied,
    PrivilegeEscalation,
    QuotaExceeded,
    RoleInUse,
    SystemRoleImmutable,
    ValidationError,
)

logger = structlog.get_logger(__name__)

# Checked in order; the first matching class wins.
_STATUS_BY_ERROR: tuple[tuple[type[AdminRBACError], str], ...] = (
    (ValidationError, falcon.HTTP_400),
    (InvalidHierarchy, falcon.HTTP_400),
    (PermissionDenied, falcon.HTTP_403),
    (PrivilegeEscalation, falcon.HTTP_403),
    (NotFound, falcon.HTTP_404),
    (DuplicateName, falcon.HTTP_409),
    (RoleInUse, falcon.HTTP_409),
    (SystemRoleImmutable, falcon.HTTP_409),
    (QuotaExceeded, falcon.HTTP_409),
    (Conflict, falcon.HTTP_409),
    (DeadlineExceeded, falcon.HTTP_504),
)


def status_for(ex: AdminRBACError) -> str:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(ex, error_type):
            return status
    return falcon.HTTP_500


async def handle_domain_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: AdminRBACError, params
) -> None:
    status = status_for(ex)
    resp.status = status
    resp.media = {"error": type(ex).__name__, "message": str(ex)}
    logger.info("request.rejected", error=type(ex).__name__, status=status)


async def handle_unexpected_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Exception, params
) -> None:
    logger.error("request.failed", exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}
