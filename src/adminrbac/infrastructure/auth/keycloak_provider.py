"""Keycloak OIDC provider for access token validation."""

from dataclasses import dataclass

import structlog
from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

logger = structlog.get_logger(__name__)


@dataclass
class OIDCUser:
    """Authenticated identity from an OIDC token."""

    subject: str
    email: str | None
    username: str | None
    realm_roles: list[str]


class KeycloakProvider:
    """Keycloak OIDC - introspects access tokens and extracts the identity."""

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
    ) -> None:
        self._keycloak = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )

    def decode_token(self, token: str) -> OIDCUser | None:
        """Introspect the token; None when it is inactive or Keycloak refuses it."""
        try:
            token_info = self._keycloak.introspect(token)
        except KeycloakError:
            logger.warning("auth.introspect_failed", exc_info=True)
            return None
        if not token_info.get("active"):
            return None
        return OIDCUser(
            subject=token_info.get("sub", ""),
            email=(token_info.get("email") or "").lower() or None,
            username=token_info.get("preferred_username"),
            realm_roles=token_info.get("realm_access", {}).get("roles", []),
        )
