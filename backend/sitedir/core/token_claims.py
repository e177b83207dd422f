"""Token Claims — local decode of the ID token payload and the admin privilege policy.

Invariants:
    - decode_token_claims never raises: malformed tokens yield None
    - has_admin_privilege is True only for claims["admin"] is True, or in debug bypass
    - No signature or expiry check happens here

Design Decisions:
    - Trust boundary is the remote identity lookup (infrastructure/identity_verifier.py):
      a token only reaches claim decoding after the identity service accepted it.
      The payload is read locally for the admin claim alone.
    - Debug bypass is an explicit argument, never derived from the environment name
"""

import base64
import binascii
import json


def decode_token_claims(token: str) -> dict | None:
    """Decode the base64url JSON payload segment of a JWT, or None."""
    parts = token.split(".")
    if len(parts) < 2 or not parts[1]:
        return None
    segment = parts[1]
    padded = segment + "=" * (-len(segment) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        claims = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError):
        return None
    return claims if isinstance(claims, dict) else None


def has_admin_privilege(claims: dict | None, *, debug_bypass: bool = False) -> bool:
    """Privilege policy: explicit admin claim, or any verified identity in bypass mode."""
    if debug_bypass:
        return True
    return bool(claims) and claims.get("admin") is True
