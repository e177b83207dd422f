"""Directory Schemas — camelCase API contracts for directory reads and admin writes.

Invariants:
    - Every field serializes camelCase (alias_generator=to_camel)
    - DirectoryEntryResponse reads core DirectoryEntry dataclasses (from_attributes)
    - externalError is always present on merged reads (null when the feed succeeded)

Design Decisions:
    - Admin write bodies are NOT modelled here: they are validated by
      core/entry_validation.py so type errors and missing fields share one message list
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from sitedir.core.directory_entry import DirectoryEntry, FeedResult
from sitedir.core.domain_types import EntrySource, SeedStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


class DirectoryEntryResponse(CamelModel):
    """One directory entry as served to clients."""
    id: str
    label: str
    title: str
    subtitle: str
    url: str
    preview_image_url: str
    sort_order: int
    is_active: bool
    created_by: str
    updated_by: str
    source: EntrySource
    created_at: datetime | None = None
    updated_at: datetime | None = None


def to_response_entries(
    entries: list[DirectoryEntry],
) -> list[DirectoryEntryResponse]:
    return [DirectoryEntryResponse.model_validate(e) for e in entries]


class PublicDirectoryResponse(CamelModel):
    """Merged, active-only public view."""
    entries: list[DirectoryEntryResponse]
    external_error: str | None = None


class InternalDirectoryResponse(CamelModel):
    entries: list[DirectoryEntryResponse]


class AdminDirectoryResponse(CamelModel):
    """Merged admin view: every row, source-tagged, with feed diagnostics."""
    entries: list[DirectoryEntryResponse]
    total_clients: int = 0
    skipped_invalid_url: int = 0
    external_error: str | None = None


class ExternalDirectoryResponse(CamelModel):
    """Raw partner feed projection (diagnostics)."""
    entries: list[DirectoryEntryResponse]
    total_clients: int = 0
    skipped_invalid_url: int = 0
    error: str | None = None

    @classmethod
    def from_result(
        cls, result: FeedResult, error: str | None = None,
    ) -> "ExternalDirectoryResponse":
        return cls(
            entries=to_response_entries(result.entries),
            total_clients=result.total_clients,
            skipped_invalid_url=result.skipped_invalid_url,
            error=error,
        )


class EntryCreatedResponse(CamelModel):
    id: str


class OkResponse(CamelModel):
    ok: bool = True


class SeedResponse(CamelModel):
    status: SeedStatus
