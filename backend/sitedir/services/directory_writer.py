"""Directory Writer — admin mutations: validate, normalize, then one atomic store commit.

Invariants:
    - Validation happens before any store call (fail fast, no partial mutation)
    - New entry ids are server-generated UUID4 strings
    - Seed always writes DEFAULT_SEED_PAYLOAD; repeated seeds converge on the same content

Design Decisions:
    - Seed defaults expressed as a raw payload and parsed like any admin body, so the
      seed goes through the exact validation/preview rules of a normal create
"""

import logging
import uuid

from sitedir.core.admin_identity import AdminIdentity
from sitedir.core.domain_types import SeedStatus
from sitedir.core.entry_validation import parse_entry_changes, parse_entry_payload
from sitedir.core.preview_url import DEFAULT_PREVIEW_PROVIDER
from sitedir.core.repository_protocols import DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_SEED_PAYLOAD: dict[str, object] = {
    "label": "BEAM Home Site",
    "title": "BEAM Home Site",
    "subtitle": "Explore the primary BEAM platform and ecosystem updates.",
    "url": "https://beamthinktank.space",
    "previewImageUrl": "",
    "sortOrder": 0,
    "isActive": True,
}


async def create_entry(
    store: DocumentStore,
    payload: dict,
    actor: AdminIdentity,
    provider: str = DEFAULT_PREVIEW_PROVIDER,
) -> str:
    """Validate payload and create a new entry; returns its id."""
    entry = parse_entry_payload(payload, provider)
    entry_id = str(uuid.uuid4())
    await store.create(entry_id, entry, actor)
    return entry_id


async def update_entry(
    store: DocumentStore,
    entry_id: str,
    payload: dict,
    actor: AdminIdentity,
    provider: str = DEFAULT_PREVIEW_PROVIDER,
) -> None:
    """Validate the supplied fields and apply them as a masked update."""
    changes = parse_entry_changes(payload, provider)
    await store.update(entry_id, changes, actor)


async def delete_entry(
    store: DocumentStore, entry_id: str, actor: AdminIdentity,
) -> None:
    await store.delete(entry_id, actor)


async def seed_default_entry(
    store: DocumentStore,
    entry_id: str,
    actor: AdminIdentity,
    provider: str = DEFAULT_PREVIEW_PROVIDER,
) -> SeedStatus:
    """Create or refresh the default seed entry."""
    status = await store.seed(
        entry_id, parse_entry_payload(DEFAULT_SEED_PAYLOAD, provider), actor,
    )
    logger.info(
        f"Seed entry {status.value}",
        extra={"entry_id": entry_id, "actor": actor.actor, "status": status.value},
    )
    return status
