"""SQL Document Store — directory entries in a relational table via SQLAlchemy async.

Invariants:
    - Every mutation runs in exactly one transaction (commit all or roll back all)
    - create: existence check + INSERT in one transaction; a racing insert surfaces as
      IntegrityError and maps to AlreadyExistsError
    - update/delete: single guarded statement; rowcount 0 -> NotFoundError (must-exist)
    - Timestamps come from the database clock (func.now()), never from the app
    - update writes only the masked fields plus updated_by/updated_at

Design Decisions:
    - Same DocumentStore contract as FirestoreDocumentStore so services never branch on backend
    - Unknown keys in an update mask are dropped, not written (mask limited to MUTABLE_FIELDS)
"""

import logging

from sqlalchemy import delete, select, update, func
from sqlalchemy.exc import IntegrityError

from sitedir.core.admin_identity import AdminIdentity
from sitedir.core.directory_entry import DirectoryEntry, EntryInput, MUTABLE_FIELDS
from sitedir.core.domain_types import EntrySource, SeedStatus
from sitedir.core.errors import AlreadyExistsError, ErrorContext, NotFoundError
from sitedir.core.preview_url import DEFAULT_PREVIEW_PROVIDER, build_screenshot_preview_url
from sitedir.infrastructure.database import DatabaseSessionManager
from sitedir.models.directory_entry import DirectoryEntryRecord

logger = logging.getLogger(__name__)


class SqlDocumentStore:
    """DocumentStore backed by SQLAlchemy."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        preview_provider: str = DEFAULT_PREVIEW_PROVIDER,
    ):
        self.db = db
        self.preview_provider = preview_provider

    async def create(
        self, entry_id: str, entry: EntryInput, actor: AdminIdentity,
    ) -> None:
        context = ErrorContext(entry_id=entry_id, actor=actor.actor)
        async with self.db.session() as session:
            if await session.get(DirectoryEntryRecord, entry_id) is not None:
                raise AlreadyExistsError(entry_id, context)
            session.add(DirectoryEntryRecord(
                id=entry_id,
                **entry.to_fields(),
                created_by=actor.actor,
                updated_by=actor.actor,
            ))
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise AlreadyExistsError(entry_id, context)
        self._log("create", entry_id, actor)

    async def update(
        self, entry_id: str, changes: dict[str, object], actor: AdminIdentity,
    ) -> None:
        masked = {k: v for k, v in changes.items() if k in MUTABLE_FIELDS}
        async with self.db.session() as session:
            result = await session.execute(
                update(DirectoryEntryRecord)
                .where(DirectoryEntryRecord.id == entry_id)
                .values(**masked, updated_by=actor.actor, updated_at=func.now())
                .execution_options(synchronize_session=False),
            )
            if result.rowcount == 0:
                raise NotFoundError(
                    entry_id, ErrorContext(entry_id=entry_id, actor=actor.actor),
                )
            await session.commit()
        self._log("update", entry_id, actor)

    async def delete(self, entry_id: str, actor: AdminIdentity) -> None:
        async with self.db.session() as session:
            result = await session.execute(
                delete(DirectoryEntryRecord)
                .where(DirectoryEntryRecord.id == entry_id)
                .execution_options(synchronize_session=False),
            )
            if result.rowcount == 0:
                raise NotFoundError(
                    entry_id, ErrorContext(entry_id=entry_id, actor=actor.actor),
                )
            await session.commit()
        self._log("delete", entry_id, actor)

    async def seed(
        self, entry_id: str, entry: EntryInput, actor: AdminIdentity,
    ) -> SeedStatus:
        """Create when absent, otherwise overwrite with the seed defaults."""
        if await self.get(entry_id) is None:
            await self.create(entry_id, entry, actor)
            return SeedStatus.CREATED
        await self.update(entry_id, entry.to_fields(), actor)
        return SeedStatus.UPDATED

    async def get(self, entry_id: str) -> DirectoryEntry | None:
        async with self.db.session() as session:
            record = await session.get(DirectoryEntryRecord, entry_id)
            return self._to_entry(record) if record else None

    async def list_entries(self) -> list[DirectoryEntry]:
        async with self.db.session() as session:
            result = await session.execute(
                select(DirectoryEntryRecord).order_by(
                    DirectoryEntryRecord.sort_order, DirectoryEntryRecord.title,
                ),
            )
            return [self._to_entry(r) for r in result.scalars().all()]

    async def health_check(self) -> bool:
        return await self.db.health_check()

    def _to_entry(self, record: DirectoryEntryRecord) -> DirectoryEntry:
        preview = record.preview_image_url or build_screenshot_preview_url(
            record.url, self.preview_provider,
        )
        return DirectoryEntry(
            id=record.id,
            label=record.label,
            title=record.title,
            subtitle=record.subtitle or "",
            url=record.url,
            preview_image_url=preview,
            sort_order=record.sort_order,
            is_active=record.is_active,
            created_by=record.created_by,
            updated_by=record.updated_by,
            source=EntrySource.INTERNAL,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def _log(self, operation: str, entry_id: str, actor: AdminIdentity) -> None:
        logger.info(
            f"Directory entry {operation} committed",
            extra={"entry_id": entry_id, "actor": actor.actor, "backend": "sql"},
        )
