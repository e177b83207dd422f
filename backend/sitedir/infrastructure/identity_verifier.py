"""Identity Verifier — resolves an admin bearer credential via the remote identity service.

Invariants:
    - Missing/blank credential -> MissingCredentialError (no network call)
    - Lookup rejected, unreachable, unparsable, or without users[0].localId -> InvalidCredentialError
    - Admin claim checked only after the lookup succeeded
    - Missing API key -> ConfigurationError (500), never a silent pass

Design Decisions:
    - The remote accounts:lookup call is the sole trust boundary for credential
      validity; the admin claim is read from the token payload without a local
      signature/expiry check (core/token_claims.py)
    - Debug bypass is an explicit constructor flag, logged on every use so a
      misconfigured deployment is visible in the logs
    - httpx.AsyncClient injected by reference: one client per process, owned by the lifespan
"""

import logging

import httpx

from sitedir.core.admin_identity import AdminIdentity
from sitedir.core.errors import (
    ConfigurationError,
    InsufficientPrivilegeError,
    InvalidCredentialError,
    MissingCredentialError,
)
from sitedir.core.token_claims import decode_token_claims, has_admin_privilege

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str:
    """Token from an Authorization header, or MissingCredentialError."""
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        raise MissingCredentialError()
    token = authorization[len(_BEARER_PREFIX):].strip()
    if not token:
        raise MissingCredentialError("Missing ID token")
    return token


class IdentityVerifier:
    """Verifies ID tokens against the identity service and applies the admin policy."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        lookup_url: str,
        debug_bypass: bool = False,
    ):
        self.http = http
        self.api_key = api_key
        self.lookup_url = lookup_url
        self.debug_bypass = debug_bypass

    async def verify(self, id_token: str) -> AdminIdentity:
        """Resolve id_token to an AdminIdentity or raise an AuthError."""
        if not id_token or not id_token.strip():
            raise MissingCredentialError("Missing ID token")
        if not self.api_key:
            raise ConfigurationError("FIREBASE_API_KEY")

        user = await self._lookup_user(id_token)
        uid = user.get("localId")
        if not isinstance(uid, str) or not uid:
            raise InvalidCredentialError("Unable to resolve user identity")

        claims = decode_token_claims(id_token)
        if not has_admin_privilege(claims, debug_bypass=self.debug_bypass):
            logger.warning("Admin claim missing", extra={"actor": uid})
            raise InsufficientPrivilegeError()
        if self.debug_bypass and not has_admin_privilege(claims):
            logger.warning(
                "ADMIN_DEBUG_BYPASS granted admin to non-admin identity",
                extra={"actor": uid},
            )

        email = user.get("email")
        return AdminIdentity(
            uid=uid,
            email=email if isinstance(email, str) and email else None,
            id_token=id_token,
        )

    async def verify_header(self, authorization: str | None) -> AdminIdentity:
        """verify() on the token carried by an Authorization header."""
        return await self.verify(extract_bearer_token(authorization))

    async def _lookup_user(self, id_token: str) -> dict:
        """POST accounts:lookup and return the first user record."""
        try:
            response = await self.http.post(
                self.lookup_url,
                params={"key": self.api_key},
                json={"idToken": id_token},
            )
        except httpx.HTTPError as e:
            logger.error(f"Identity lookup request failed: {e}")
            raise InvalidCredentialError("Identity verification request failed")

        if response.is_error:
            logger.info(
                f"Identity lookup rejected token ({response.status_code})",
            )
            raise InvalidCredentialError()

        try:
            payload = response.json()
        except ValueError:
            raise InvalidCredentialError("Unable to resolve user identity")

        users = payload.get("users") if isinstance(payload, dict) else None
        if not isinstance(users, list) or not users or not isinstance(users[0], dict):
            raise InvalidCredentialError("Unable to resolve user identity")
        return users[0]
