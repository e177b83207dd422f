"""Public Directory Routes — unauthenticated merged and internal-only reads.

Invariants:
    - GET "" never fails because of the partner feed; externalError carries the warning
    - GET "" fails (500) only when the internal store read fails
    - Only active entries are returned
"""

from fastapi import APIRouter, Depends

from sitedir.api.dependencies import get_document_store, get_partner_feed
from sitedir.core.repository_protocols import DocumentStore
from sitedir.infrastructure.partner_feed import PartnerFeedClient
from sitedir.schemas.directory import (
    InternalDirectoryResponse,
    PublicDirectoryResponse,
    to_response_entries,
)
from sitedir.services import directory_reader

router = APIRouter(prefix="/api/website-directory", tags=["website-directory"])


@router.get("", response_model=PublicDirectoryResponse)
async def get_website_directory(
    store: DocumentStore = Depends(get_document_store),
    feed: PartnerFeedClient = Depends(get_partner_feed),
):
    """Merged, active-only, sorted directory."""
    view = await directory_reader.read_public_directory(store, feed)
    return PublicDirectoryResponse(
        entries=to_response_entries(view.entries),
        external_error=view.external.error,
    )


@router.get("/internal", response_model=InternalDirectoryResponse)
async def get_internal_directory(
    store: DocumentStore = Depends(get_document_store),
):
    """Active internal entries only."""
    entries = await directory_reader.read_internal_directory(store)
    return InternalDirectoryResponse(entries=to_response_entries(entries))
