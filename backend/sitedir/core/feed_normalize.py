"""Feed Normalization — turns a raw partner "clients" payload into directory entries.

Invariants:
    - Envelope shapes resolved by ENVELOPE_DECODERS, first match wins, no match -> []
    - A record without a usable absolute http(s) URL is skipped and counted
    - total_clients == len(entries) + skipped_invalid_url
    - Every entry id starts with EXTERNAL_ID_PREFIX; positional fallback "external-<index>"
    - sort_order defaults to EXTERNAL_SORT_OFFSET + index (trails ordered internal entries)
    - A sortOrder outside the 32-bit range falls back to the same default

Design Decisions:
    - Ordered tuple of shape decoders over ad hoc optional probing: adding an
      envelope is one function plus one tuple slot
    - Field fallbacks are priority tuples, not nested `or` chains: the order is data
    - Pure: the HTTP side lives in infrastructure/partner_feed.py
"""

import math
from collections.abc import Callable

from sitedir.core.directory_entry import DirectoryEntry, FeedResult
from sitedir.core.domain_types import (
    EntrySource,
    EXTERNAL_ACTOR,
    EXTERNAL_FALLBACK_TITLE,
    EXTERNAL_ID_PREFIX,
    EXTERNAL_SORT_OFFSET,
    LABEL_ELLIPSIS,
    LABEL_MAX_LENGTH,
    LABEL_TRUNCATED_LENGTH,
)
from sitedir.core.entry_validation import in_sort_order_range
from sitedir.core.preview_url import DEFAULT_PREVIEW_PROVIDER, build_screenshot_preview_url
from sitedir.core.url_checks import is_valid_absolute_http_url

URL_FIELDS = ("websiteUrl", "siteUrl", "url")
TITLE_FIELDS = ("name", "title", "storyId")
SUBTITLE_FIELDS = ("subtitle", "description")
ID_FIELDS = ("id", "docId", "_id", "storyId")


# ─── Envelope decoders ──────────────────────────────────────────

def _top_level_clients(payload: object) -> list | None:
    if isinstance(payload, dict) and isinstance(payload.get("clients"), list):
        return payload["clients"]
    return None


def _top_level_data(payload: object) -> list | None:
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    return None


def _nested_data_clients(payload: object) -> list | None:
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("clients"), list):
        return data["clients"]
    return None


def _bare_array(payload: object) -> list | None:
    return payload if isinstance(payload, list) else None


ENVELOPE_DECODERS: tuple[Callable[[object], list | None], ...] = (
    _top_level_clients,
    _top_level_data,
    _nested_data_clients,
    _bare_array,
)


def extract_clients(payload: object) -> list:
    """Raw client list from the first decoder that recognizes payload."""
    for decode in ENVELOPE_DECODERS:
        clients = decode(payload)
        if clients is not None:
            return clients
    return []


# ─── Field helpers ──────────────────────────────────────────────

def _text(value: object) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _first_text(record: dict, fields: tuple[str, ...]) -> str:
    for name in fields:
        text = _text(record.get(name))
        if text:
            return text
    return ""


def truncate_label(title: str) -> str:
    """Keep titles up to LABEL_MAX_LENGTH, else cut and append an ellipsis."""
    trimmed = title.strip()
    if len(trimmed) <= LABEL_MAX_LENGTH:
        return trimmed
    return f"{trimmed[:LABEL_TRUNCATED_LENGTH]}{LABEL_ELLIPSIS}"


def _is_active(record: dict) -> bool:
    if isinstance(record.get("isActive"), bool):
        return record["isActive"]
    return record.get("active") is not False


def _sort_order(record: dict, index: int) -> int:
    fallback = EXTERNAL_SORT_OFFSET + index
    value = record.get("sortOrder")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    if isinstance(value, float) and not math.isfinite(value):
        return fallback
    number = int(value)
    return number if in_sort_order_range(number) else fallback


# ─── Record mapping ─────────────────────────────────────────────

def map_client_to_entry(
    record: object, index: int, provider: str = DEFAULT_PREVIEW_PROVIDER,
) -> DirectoryEntry | None:
    """Canonical entry for one raw record, or None if it has no usable URL."""
    if not isinstance(record, dict):
        return None
    url = _first_text(record, URL_FIELDS)
    if not is_valid_absolute_http_url(url):
        return None

    title = _first_text(record, TITLE_FIELDS) or EXTERNAL_FALLBACK_TITLE
    source_id = _first_text(record, ID_FIELDS) or f"external-{index}"
    return DirectoryEntry(
        id=f"{EXTERNAL_ID_PREFIX}{source_id}",
        label=truncate_label(title),
        title=title,
        subtitle=_first_text(record, SUBTITLE_FIELDS),
        url=url,
        preview_image_url=build_screenshot_preview_url(url, provider),
        sort_order=_sort_order(record, index),
        is_active=_is_active(record),
        created_by=EXTERNAL_ACTOR,
        updated_by=EXTERNAL_ACTOR,
        source=EntrySource.EXTERNAL,
    )


def normalize_feed_payload(
    payload: object, provider: str = DEFAULT_PREVIEW_PROVIDER,
) -> FeedResult:
    """Normalize a decoded JSON payload into a FeedResult."""
    clients = extract_clients(payload)
    mapped = [
        map_client_to_entry(record, index, provider)
        for index, record in enumerate(clients)
    ]
    entries = [entry for entry in mapped if entry is not None]
    return FeedResult(
        entries=entries,
        total_clients=len(clients),
        skipped_invalid_url=len(mapped) - len(entries),
    )
