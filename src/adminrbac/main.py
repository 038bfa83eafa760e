"""Application entry point and composition root."""

import argparse
import asyncio
import sys

import structlog

from adminrbac import __version__
from adminrbac.application.use_cases.bootstrap import SeedSystemRolesUseCase
from adminrbac.config import Settings, get_settings
from adminrbac.infrastructure.audit.postgres_audit_logger import PostgresAuditLogger
from adminrbac.infrastructure.audit.structlog_audit_logger import StructlogAuditLogger
from adminrbac.infrastructure.auth.keycloak_provider import KeycloakProvider
from adminrbac.infrastructure.permission.permission_resolver import AdminPermissionResolver
from adminrbac.infrastructure.persistence.postgres.connection import create_pool
from adminrbac.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from adminrbac.interfaces.api.app import create_app
from adminrbac.interfaces.api.middleware.auth import AuthMiddleware
from adminrbac.interfaces.api.middleware.cors import CORSMiddleware
from adminrbac.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from adminrbac.interfaces.api.middleware.request_context import RequestContextMiddleware
from adminrbac.logging import configure_logging

logger = structlog.get_logger(__name__)


def _keycloak(settings: Settings) -> KeycloakProvider | None:
    if not settings.keycloak_client_secret:
        return None
    return KeycloakProvider(
        server_url=settings.keycloak_url,
        realm=settings.keycloak_realm,
        client_id=settings.keycloak_client_id,
        client_secret=settings.keycloak_client_secret,
    )


def _audit_logger(settings: Settings, pool):
    if settings.audit_sink == "log":
        return StructlogAuditLogger()
    return PostgresAuditLogger(pool)


def create_adminrbac_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings)
    pool = create_pool(settings.database_url)
    uow_factory = create_uow_factory(pool)

    keycloak = _keycloak(settings)
    if keycloak is None:
        logger.warning("auth.disabled", reason="keycloak_client_secret is empty")

    return create_app(
        uow_factory,
        AdminPermissionResolver(uow_factory),
        _audit_logger(settings, pool),
        middleware=[
            RequestContextMiddleware(),
            CORSMiddleware(settings.cors_origins),
            PoolLifespanMiddleware(pool),
            AuthMiddleware(keycloak, uow_factory),
        ],
        pool=pool,
        max_attempts=settings.provisioning_max_attempts,
        max_hops=settings.hierarchy_max_hops,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )


def run_server(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run(
        "adminrbac.main:create_adminrbac_app",
        factory=True,
        host=host,
        port=port,
        log_config=None,
    )


async def seed(admin_email: str | None) -> int:
    """Install system roles (and optionally the root admin). Returns exit code."""
    settings = get_settings()
    pool = create_pool(settings.database_url, min_size=1, max_size=2)
    await pool.open(wait=True)
    try:
        use_case = SeedSystemRolesUseCase(create_uow_factory(pool))
        result = await use_case.execute(admin_email or settings.bootstrap_admin_email)
        report = await use_case.verify()
    finally:
        await pool.close()

    for role in report.present:
        print(f"{role.level:>3}. {role.display_name:<30} | {role.name}")
    if result.root_admin:
        print(f"root admin: {result.root_admin.email} ({result.root_admin.id})")
    if not report.ok:
        print(f"missing system roles: {', '.join(report.missing)}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(prog="adminrbac", description="Admin RBAC service")
    parser.add_argument("--version", action="version", version=f"adminrbac {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    serve_parser = sub.add_parser("serve", help="run the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)

    seed_parser = sub.add_parser("seed", help="install the system roles")
    seed_parser.add_argument("--admin-email", help="create the root super admin")

    args = parser.parse_args(argv)
    configure_logging(get_settings())
    if args.command == "serve":
        run_server(args.host, args.port)
    else:
        sys.exit(asyncio.run(seed(args.admin_email)))


if __name__ == "__main__":
    main()
