"""Boundary Protocols — contracts between core and the internal record backends.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - Every mutation is exactly one atomic commit (no observable half-applied write)
    - create: must-not-exist precondition, server timestamps for createdAt + updatedAt
    - update: must-exist precondition, masked fields only, server timestamp for updatedAt
    - delete: must-exist precondition
    - seed: read-then-branch, not race-protected (one-time bootstrap, same outcome if raced)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Actor passed as AdminIdentity, not a bare string: the Firestore backend
      authorizes commits with the admin's own credential
    - Async in Protocol: implementations do IO; pure core never awaits them
"""

from typing import Protocol

from sitedir.core.admin_identity import AdminIdentity
from sitedir.core.directory_entry import DirectoryEntry, EntryInput
from sitedir.core.domain_types import SeedStatus


class DocumentStore(Protocol):
    """Contract for internal directory persistence, implemented by shell."""
    async def create(
        self, entry_id: str, entry: EntryInput, actor: AdminIdentity,
    ) -> None: ...
    async def update(
        self, entry_id: str, changes: dict[str, object], actor: AdminIdentity,
    ) -> None: ...
    async def delete(self, entry_id: str, actor: AdminIdentity) -> None: ...
    async def seed(
        self, entry_id: str, entry: EntryInput, actor: AdminIdentity,
    ) -> SeedStatus: ...
    async def get(self, entry_id: str) -> DirectoryEntry | None: ...
    async def list_entries(self) -> list[DirectoryEntry]: ...
    async def health_check(self) -> bool: ...
