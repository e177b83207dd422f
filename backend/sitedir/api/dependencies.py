"""API Dependencies — hands lifespan-built collaborators to route handlers.

Invariants:
    - Collaborators are constructed once in main.lifespan and stored on app.state
    - Routes receive them through Depends(), so tests swap them via dependency_overrides
    - require_admin runs before any body-dependent work in admin routes

Design Decisions:
    - Explicit getters over a service locator: each route declares exactly what it touches
"""

from fastapi import Depends, Header, Request

from sitedir.config import Settings, get_settings
from sitedir.core.admin_identity import AdminIdentity
from sitedir.core.repository_protocols import DocumentStore
from sitedir.infrastructure.identity_verifier import IdentityVerifier
from sitedir.infrastructure.partner_feed import PartnerFeedClient


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_partner_feed(request: Request) -> PartnerFeedClient:
    return request.app.state.partner_feed


def get_identity_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.identity_verifier


def get_app_settings() -> Settings:
    return get_settings()


async def require_admin(
    authorization: str | None = Header(None),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> AdminIdentity:
    """Resolve the caller to an AdminIdentity or raise an AuthError (403)."""
    return await verifier.verify_header(authorization)
