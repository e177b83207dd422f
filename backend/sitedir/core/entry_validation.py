"""Entry Validation — pure validation and normalization of admin write payloads.

Invariants:
    - Each missing required field produces its own message (label, title, url)
    - Validation collects every message before failing (never stops at the first)
    - Strings are stripped before any check; previewImageUrl is resolved on normalize
    - Partial payloads (PATCH) validate only the keys they carry

Design Decisions:
    - Payload is a raw camelCase mapping, not a pydantic model: type errors must
      surface as the same human-readable messages as missing fields
    - Booleans are rejected as sortOrder even though bool subclasses int
    - sortOrder outside the 32-bit column range is rejected here, never at the store
    - isActive omitted on create defaults to True (matches the partner feed default)
"""

import math
from collections.abc import Mapping

from sitedir.core.directory_entry import EntryInput
from sitedir.core.domain_types import SORT_ORDER_MAX, SORT_ORDER_MIN
from sitedir.core.errors import EntryValidationError
from sitedir.core.preview_url import DEFAULT_PREVIEW_PROVIDER, resolve_preview_url
from sitedir.core.url_checks import is_valid_absolute_http_url

# camelCase payload key -> canonical field name
PAYLOAD_FIELDS: dict[str, str] = {
    "label": "label",
    "title": "title",
    "subtitle": "subtitle",
    "url": "url",
    "previewImageUrl": "preview_image_url",
    "sortOrder": "sort_order",
    "isActive": "is_active",
}

_REQUIRED_TEXT = ("label", "title", "url")


def _clean_str(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


def _truncate_number(value: object) -> int | None:
    """Finite numeric value truncated to int, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return int(parsed) if math.isfinite(parsed) else None
    return None


def in_sort_order_range(value: int) -> bool:
    return SORT_ORDER_MIN <= value <= SORT_ORDER_MAX


def coerce_sort_order(value: object) -> int | None:
    """Truncated sortOrder within the persisted integer range, or None."""
    number = _truncate_number(value)
    if number is None or not in_sort_order_range(number):
        return None
    return number


def validate_entry_payload(
    payload: Mapping[str, object], *, partial: bool = False,
) -> list[str]:
    """Return every validation message for payload (empty list = valid)."""
    if partial and not any(key in payload for key in PAYLOAD_FIELDS):
        return ["no fields to update"]

    errors: list[str] = []
    for key in _REQUIRED_TEXT:
        if (not partial or key in payload) and not _clean_str(payload.get(key)):
            errors.append(f"{key} is required")

    if not partial or "sortOrder" in payload:
        number = _truncate_number(payload.get("sortOrder"))
        if number is None:
            errors.append("sortOrder must be a number")
        elif not in_sort_order_range(number):
            errors.append("sortOrder is out of range")

    if "isActive" in payload and not isinstance(payload["isActive"], bool):
        errors.append("isActive must be a boolean")

    url = _clean_str(payload.get("url"))
    if url and not is_valid_absolute_http_url(url):
        errors.append("url must be a valid absolute URL")

    preview = _clean_str(payload.get("previewImageUrl"))
    if preview and not is_valid_absolute_http_url(preview):
        errors.append("previewImageUrl must be a valid absolute URL")

    return errors


def parse_entry_payload(
    payload: Mapping[str, object], provider: str = DEFAULT_PREVIEW_PROVIDER,
) -> EntryInput:
    """Validate a full payload and normalize it, or raise EntryValidationError."""
    errors = validate_entry_payload(payload)
    if errors:
        raise EntryValidationError(errors)

    url = _clean_str(payload["url"])
    return EntryInput(
        label=_clean_str(payload["label"]),
        title=_clean_str(payload["title"]),
        subtitle=_clean_str(payload.get("subtitle")),
        url=url,
        preview_image_url=resolve_preview_url(
            url, _clean_str(payload.get("previewImageUrl")), provider,
        ),
        sort_order=coerce_sort_order(payload["sortOrder"]),
        is_active=payload.get("isActive", True),
    )


def parse_entry_changes(
    payload: Mapping[str, object], provider: str = DEFAULT_PREVIEW_PROVIDER,
) -> dict[str, object]:
    """Validate a partial payload and return the masked field set.

    A supplied url re-resolves previewImageUrl (override if given, else derived).
    An emptied override without a url stores "", which readers derive from the
    stored url.
    """
    errors = validate_entry_payload(payload, partial=True)
    if errors:
        raise EntryValidationError(errors)

    changes: dict[str, object] = {}
    for key, name in PAYLOAD_FIELDS.items():
        if key not in payload:
            continue
        value = payload[key]
        if name == "sort_order":
            changes[name] = coerce_sort_order(value)
        elif name == "is_active":
            changes[name] = value
        else:
            changes[name] = _clean_str(value)

    if "url" in changes:
        changes["preview_image_url"] = resolve_preview_url(
            changes["url"], _clean_str(payload.get("previewImageUrl")), provider,
        )
    return changes
