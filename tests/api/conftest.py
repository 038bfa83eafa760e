"""Fixtures for API tests."""

from uuid import UUID

import pytest
from falcon.testing import TestClient

from adminrbac.infrastructure.permission.permission_resolver import AdminPermissionResolver
from adminrbac.interfaces.api.app import create_app
from adminrbac.interfaces.api.middleware.auth import RequestUser

from tests.conftest import RecordingAuditLogger


class AuthBypassMiddleware:
    """Sets context.user to the admin named by X-Test-Admin, or the default admin.

    ``X-Test-Admin: none`` leaves the request unauthenticated.
    """

    def __init__(self, default_admin_id: UUID) -> None:
        self._default = default_admin_id

    async def process_request(self, req, resp):
        header = req.get_header("X-Test-Admin")
        if header == "none":
            req.context.user = None
            return
        req.context.user = RequestUser(admin_id=UUID(header) if header else self._default)


@pytest.fixture
def api_audit_logger() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest.fixture
def app(seeded, uow_factory, api_audit_logger):
    """Falcon ASGI app over the seeded in-memory store, acting as root by default."""
    return create_app(
        uow_factory,
        AdminPermissionResolver(uow_factory),
        api_audit_logger,
        middleware=[AuthBypassMiddleware(seeded.root.id)],
        default_page_size=5,
    )


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)