"""Directory Reader — concurrent internal + external reads merged into one view.

Invariants:
    - Internal list and external fetch run concurrently (feed fetch as a sibling task)
    - A failed internal read cancels the in-flight feed fetch before propagating
    - The external branch never raises: any failure becomes an empty list + warning string
    - Internal read failure (StoreError) propagates (the only way a read fails)
    - Public views are active-only; admin views keep every row, source-tagged

Design Decisions:
    - fetch_external_safely is the single isolation boundary for the partner feed, so
      every read path degrades the same way
    - Broad except after FeedError: an unexpected bug in feed parsing must not take
      the public directory down (logged with traceback)
"""

import asyncio
import logging
from dataclasses import dataclass

from sitedir.core.directory_entry import DirectoryEntry, FeedResult
from sitedir.core.directory_merge import merge_entries, sort_entries
from sitedir.core.errors import FeedError
from sitedir.core.repository_protocols import DocumentStore
from sitedir.infrastructure.partner_feed import PartnerFeedClient

logger = logging.getLogger(__name__)

_FALLBACK_FEED_ERROR = "Failed to fetch external entries"


@dataclass(frozen=True)
class ExternalFetch:
    """Feed outcome with the failure downgraded to a message."""
    result: FeedResult
    error: str | None = None


@dataclass(frozen=True)
class DirectoryView:
    entries: list[DirectoryEntry]
    external: ExternalFetch


async def fetch_external_safely(feed: PartnerFeedClient) -> ExternalFetch:
    """Fetch the partner feed; never raises."""
    try:
        return ExternalFetch(result=await feed.fetch())
    except FeedError as e:
        logger.warning(
            f"Partner feed unavailable: {e.message}",
            extra={"error_code": e.code},
        )
        return ExternalFetch(result=FeedResult(), error=e.message)
    except Exception as e:
        logger.error(f"Unexpected partner feed failure: {e}", exc_info=True)
        return ExternalFetch(
            result=FeedResult(), error=str(e) or _FALLBACK_FEED_ERROR,
        )


async def _read_both(
    store: DocumentStore, feed: PartnerFeedClient,
) -> tuple[list[DirectoryEntry], ExternalFetch]:
    feed_task = asyncio.create_task(fetch_external_safely(feed))
    try:
        internal = await store.list_entries()
    except BaseException:
        feed_task.cancel()
        raise
    return internal, await feed_task


async def read_public_directory(
    store: DocumentStore, feed: PartnerFeedClient,
) -> DirectoryView:
    """Merged, active-only, sorted view for end users."""
    internal, external = await _read_both(store, feed)
    entries = merge_entries(internal, external.result.entries, active_only=True)
    return DirectoryView(entries=entries, external=external)


async def read_admin_directory(
    store: DocumentStore, feed: PartnerFeedClient,
) -> DirectoryView:
    """Merged view for admins: inactive rows kept, every row source-tagged."""
    internal, external = await _read_both(store, feed)
    entries = merge_entries(internal, external.result.entries, active_only=False)
    return DirectoryView(entries=entries, external=external)


async def read_internal_directory(store: DocumentStore) -> list[DirectoryEntry]:
    """Active internal entries only, sorted."""
    entries = await store.list_entries()
    return sort_entries(e for e in entries if e.is_active)
