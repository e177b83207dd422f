"""Directory Entry — canonical shape shared by internal and external entries.

Invariants:
    - DirectoryEntry is immutable; re-tagging produces a copy (with_source)
    - created_at/updated_at are None for external entries
    - EntryInput is the normalized admin write payload (preview already resolved)

Design Decisions:
    - Frozen dataclasses in core, pydantic models in schemas/ (ADR: DDD boundary:
      core stays free of serialization concerns)
    - MUTABLE_FIELDS is the single list of admin-writable fields; both backends
      and the masked update derive their field sets from it
"""

from dataclasses import dataclass, field, replace, asdict
from datetime import datetime

from sitedir.core.domain_types import EntrySource

MUTABLE_FIELDS: tuple[str, ...] = (
    "label", "title", "subtitle", "url",
    "preview_image_url", "sort_order", "is_active",
)


@dataclass(frozen=True)
class EntryInput:
    """Normalized, validated admin payload for a full write."""
    label: str
    title: str
    url: str
    preview_image_url: str
    sort_order: int
    is_active: bool
    subtitle: str = ""

    def to_fields(self) -> dict[str, object]:
        """Mutable field set keyed by canonical field name."""
        return asdict(self)


@dataclass(frozen=True)
class DirectoryEntry:
    """One website listing, internal or external."""
    id: str
    label: str
    title: str
    url: str
    preview_image_url: str
    sort_order: int
    is_active: bool
    source: EntrySource
    subtitle: str = ""
    created_by: str = ""
    updated_by: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def with_source(self, source: EntrySource) -> "DirectoryEntry":
        return replace(self, source=source)


@dataclass(frozen=True)
class FeedResult:
    """Outcome of one partner feed normalization pass."""
    entries: list[DirectoryEntry] = field(default_factory=list)
    total_clients: int = 0
    skipped_invalid_url: int = 0
