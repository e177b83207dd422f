"""Domain Types — rich types and constants shared across the directory core.

Invariants:
    - EntryId wraps str: internal ids are server UUIDs or fixed seed ids
    - External ids always carry EXTERNAL_ID_PREFIX (never collide with internal ids)
    - EntrySource and SeedStatus encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

EntryId = NewType("EntryId", str)


# ─── Enums ───────────────────────────────────────────────────────

class EntrySource(str, Enum):
    """Where a directory entry came from."""
    INTERNAL = "internal"
    EXTERNAL = "external"


class SeedStatus(str, Enum):
    """Which branch a seed call executed."""
    CREATED = "created"
    UPDATED = "updated"


class DocumentBackend(str, Enum):
    """Internal record backends selectable via DOCUMENT_BACKEND."""
    FIRESTORE = "firestore"
    SQL = "sql"


# ─── External feed constants ─────────────────────────────────────

EXTERNAL_ID_PREFIX = "external:"
EXTERNAL_ACTOR = "readyaimgo"
EXTERNAL_SORT_OFFSET = 1000
EXTERNAL_FALLBACK_TITLE = "External Site"

LABEL_MAX_LENGTH = 28
LABEL_TRUNCATED_LENGTH = 25
LABEL_ELLIPSIS = "..."

# Persisted as a 32-bit INTEGER column / Firestore integerValue read back by every backend
SORT_ORDER_MIN = -(2 ** 31)
SORT_ORDER_MAX = 2 ** 31 - 1
