"""Request parsing helpers shared by the resources."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import falcon
import falcon.asgi

from adminrbac.domain.exceptions import ValidationError


def require_user(req: falcon.asgi.Request, resp: falcon.asgi.Response):
    """Return the request's admin, or set 401 and return None."""
    user = getattr(req.context, "user", None)
    if not user:
        resp.status = falcon.HTTP_401
        resp.media = {"error": "Unauthorized"}
    return user


def parse_uuid(value: object, what: str) -> UUID:
    try:
        return UUID(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {what}: {value!r}") from None


def optional_uuid(value: object, what: str) -> UUID | None:
    return None if value is None else parse_uuid(value, what)


def deadline_from(req: falcon.asgi.Request) -> datetime | None:
    """``timeout_ms`` query parameter as an absolute deadline."""
    timeout_ms = req.get_param_as_int("timeout_ms", min_value=1)
    if timeout_ms is None:
        return None
    return datetime.now(UTC) + timedelta(milliseconds=timeout_ms)


async def json_body(req: falcon.asgi.Request) -> dict:
    body = await req.get_media(default_when_empty={})
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body
