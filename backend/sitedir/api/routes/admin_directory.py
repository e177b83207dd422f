"""Admin Directory Routes — authenticated create/update/delete/seed and admin views.

Invariants:
    - Every route depends on require_admin (Bearer ID token + admin policy) → 403 otherwise
    - Body validation errors → 400 before any store call
    - Store precondition failures: NotFound → 404, AlreadyExists → 409
    - GET /external always answers 200; feed failure is reported in the "error" field

Design Decisions:
    - Bodies taken as raw JSON objects: core/entry_validation.py owns the field rules
    - Thin handlers; orchestration in services/directory_writer.py and directory_reader.py
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status

from sitedir.api.dependencies import (
    get_app_settings,
    get_document_store,
    get_partner_feed,
    require_admin,
)
from sitedir.config import Settings
from sitedir.core.admin_identity import AdminIdentity
from sitedir.core.repository_protocols import DocumentStore
from sitedir.infrastructure.partner_feed import PartnerFeedClient
from sitedir.schemas.directory import (
    AdminDirectoryResponse,
    EntryCreatedResponse,
    ExternalDirectoryResponse,
    OkResponse,
    SeedResponse,
    to_response_entries,
)
from sitedir.services import directory_reader, directory_writer

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/admin/website-directory", tags=["admin-directory"],
)


@router.get("", response_model=AdminDirectoryResponse)
async def list_admin_directory(
    admin: AdminIdentity = Depends(require_admin),
    store: DocumentStore = Depends(get_document_store),
    feed: PartnerFeedClient = Depends(get_partner_feed),
):
    """All internal + external rows, inactive included, source-tagged."""
    view = await directory_reader.read_admin_directory(store, feed)
    return AdminDirectoryResponse(
        entries=to_response_entries(view.entries),
        total_clients=view.external.result.total_clients,
        skipped_invalid_url=view.external.result.skipped_invalid_url,
        external_error=view.external.error,
    )


@router.get("/external", response_model=ExternalDirectoryResponse)
async def get_external_directory(
    admin: AdminIdentity = Depends(require_admin),
    feed: PartnerFeedClient = Depends(get_partner_feed),
):
    """Partner feed projection with counters, for diagnosing the sync."""
    external = await directory_reader.fetch_external_safely(feed)
    return ExternalDirectoryResponse.from_result(external.result, external.error)


@router.post(
    "", response_model=EntryCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_directory_entry(
    payload: dict[str, Any] = Body(...),
    admin: AdminIdentity = Depends(require_admin),
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_app_settings),
):
    """Create an internal entry with a server-generated id."""
    entry_id = await directory_writer.create_entry(
        store, payload, admin, settings.preview_provider_url,
    )
    return EntryCreatedResponse(id=entry_id)


@router.post("/seed", response_model=SeedResponse)
async def seed_directory(
    admin: AdminIdentity = Depends(require_admin),
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_app_settings),
):
    """Create or refresh the default seed entry."""
    seed_status = await directory_writer.seed_default_entry(
        store, settings.seed_entry_id, admin, settings.preview_provider_url,
    )
    return SeedResponse(status=seed_status)


@router.patch("/{entry_id}", response_model=OkResponse)
async def update_directory_entry(
    entry_id: str,
    payload: dict[str, Any] = Body(...),
    admin: AdminIdentity = Depends(require_admin),
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_app_settings),
):
    """Apply the supplied fields to an existing internal entry."""
    await directory_writer.update_entry(
        store, entry_id, payload, admin, settings.preview_provider_url,
    )
    return OkResponse()


@router.delete("/{entry_id}", response_model=OkResponse)
async def delete_directory_entry(
    entry_id: str,
    admin: AdminIdentity = Depends(require_admin),
    store: DocumentStore = Depends(get_document_store),
):
    """Delete an existing internal entry."""
    await directory_writer.delete_entry(store, entry_id, admin)
    return OkResponse()
