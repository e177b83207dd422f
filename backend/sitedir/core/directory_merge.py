"""Directory Merge — combines internal and external entries into one ordered view.

Invariants:
    - Order: sort_order ascending, then title (case-sensitive, code-point order)
    - Sort is stable: full ties keep internal-before-external input order
    - Public view (active_only=True) drops inactive entries
    - Admin view keeps every row and re-tags it with the list it came from
    - Pure: no IO, inputs never mutated, identical inputs give identical output

Design Decisions:
    - Python str comparison instead of locale collation: locale-aware ordering
      differs across hosts and would break determinism
"""

from collections.abc import Iterable

from sitedir.core.directory_entry import DirectoryEntry
from sitedir.core.domain_types import EntrySource


def _sort_key(entry: DirectoryEntry) -> tuple[int, str]:
    return (entry.sort_order, entry.title)


def sort_entries(entries: Iterable[DirectoryEntry]) -> list[DirectoryEntry]:
    """Deterministically ordered copy of entries."""
    return sorted(entries, key=_sort_key)


def merge_entries(
    internal: Iterable[DirectoryEntry],
    external: Iterable[DirectoryEntry],
    *,
    active_only: bool = True,
) -> list[DirectoryEntry]:
    """Merge both sources into one sorted list."""
    if active_only:
        combined = [*internal, *external]
        return sort_entries(e for e in combined if e.is_active)

    combined = [
        *(e.with_source(EntrySource.INTERNAL) for e in internal),
        *(e.with_source(EntrySource.EXTERNAL) for e in external),
    ]
    return sort_entries(combined)
