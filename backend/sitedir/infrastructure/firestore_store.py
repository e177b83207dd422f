"""Firestore Document Store — directory entries over the Firestore REST commit API.

Invariants:
    - Every mutation is ONE documents:commit call (Firestore applies all writes or none)
    - create = update write + currentDocument.exists=false + REQUEST_TIME transform (createdAt, updatedAt)
    - update = masked update write + currentDocument.exists=true + REQUEST_TIME transform (updatedAt)
    - delete = delete write + currentDocument.exists=true
    - Commits are authorized with the admin's own ID token (security rules apply server-side)
    - 409/ALREADY_EXISTS -> AlreadyExistsError, 404/NOT_FOUND -> NotFoundError, else StoreError

Design Decisions:
    - REST over the admin SDK: no service-account credential on the host, the caller's
      token carries the authority
    - Public list is unauthenticated and follows nextPageToken until exhausted
    - A stored empty previewImageUrl is derived on read, so cleared overrides heal themselves
"""

import logging
from datetime import datetime

import httpx

from sitedir.core.admin_identity import AdminIdentity
from sitedir.core.directory_entry import DirectoryEntry, EntryInput
from sitedir.core.domain_types import EntrySource, SeedStatus
from sitedir.core.errors import (
    AlreadyExistsError,
    ConfigurationError,
    ErrorContext,
    NotFoundError,
    StoreError,
)
from sitedir.core.preview_url import DEFAULT_PREVIEW_PROVIDER, build_screenshot_preview_url

logger = logging.getLogger(__name__)

# canonical field name -> Firestore document field
FIRESTORE_FIELDS: dict[str, str] = {
    "label": "label",
    "title": "title",
    "subtitle": "subtitle",
    "url": "url",
    "preview_image_url": "previewImageUrl",
    "sort_order": "sortOrder",
    "is_active": "isActive",
    "created_by": "createdBy",
    "updated_by": "updatedBy",
}

_LIST_PAGE_SIZE = 300


def encode_value(value: object) -> dict:
    """Python scalar -> Firestore typed value."""
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"integerValue": str(int(value))}
    return {"stringValue": "" if value is None else str(value)}


def _read_string(fields: dict, key: str) -> str:
    value = fields.get(key) or {}
    return str(value.get("stringValue", ""))


def _read_int(fields: dict, key: str) -> int:
    value = fields.get(key) or {}
    try:
        if "integerValue" in value:
            return int(value["integerValue"])
        if "doubleValue" in value:
            return int(float(value["doubleValue"]))
    except (TypeError, ValueError, OverflowError):
        return 0
    return 0


def _read_bool(fields: dict, key: str) -> bool:
    value = fields.get(key) or {}
    return value.get("booleanValue") is True


def _read_timestamp(fields: dict, key: str) -> datetime | None:
    raw = (fields.get(key) or {}).get("timestampValue")
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


def decode_document(
    document: dict, provider: str = DEFAULT_PREVIEW_PROVIDER,
) -> DirectoryEntry:
    """Firestore REST document -> internal DirectoryEntry."""
    fields = document.get("fields") or {}
    url = _read_string(fields, "url")
    preview = _read_string(fields, "previewImageUrl")
    return DirectoryEntry(
        id=str(document.get("name", "")).rsplit("/", 1)[-1],
        label=_read_string(fields, "label"),
        title=_read_string(fields, "title"),
        subtitle=_read_string(fields, "subtitle"),
        url=url,
        preview_image_url=preview or build_screenshot_preview_url(url, provider),
        sort_order=_read_int(fields, "sortOrder"),
        is_active=_read_bool(fields, "isActive"),
        created_by=_read_string(fields, "createdBy"),
        updated_by=_read_string(fields, "updatedBy"),
        source=EntrySource.INTERNAL,
        created_at=_read_timestamp(fields, "createdAt"),
        updated_at=_read_timestamp(fields, "updatedAt"),
    )


def _server_time_transform(document: str, *field_paths: str) -> dict:
    return {
        "transform": {
            "document": document,
            "fieldTransforms": [
                {"fieldPath": path, "setToServerValue": "REQUEST_TIME"}
                for path in field_paths
            ],
        },
    }


class FirestoreDocumentStore:
    """DocumentStore backed by Firestore REST."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        project_id: str,
        collection: str,
        base_url: str = "https://firestore.googleapis.com/v1",
        preview_provider: str = DEFAULT_PREVIEW_PROVIDER,
    ):
        self.http = http
        self.project_id = project_id
        self.collection = collection
        self.base_url = base_url.rstrip("/")
        self.preview_provider = preview_provider

    # ─── Paths ──────────────────────────────────────────────────

    @property
    def database_path(self) -> str:
        if not self.project_id:
            raise ConfigurationError("FIREBASE_PROJECT_ID")
        return f"projects/{self.project_id}/databases/(default)/documents"

    def document_name(self, entry_id: str) -> str:
        return f"{self.database_path}/{self.collection}/{entry_id}"

    @property
    def collection_url(self) -> str:
        return f"{self.base_url}/{self.database_path}/{self.collection}"

    # ─── Mutations ──────────────────────────────────────────────

    async def create(
        self, entry_id: str, entry: EntryInput, actor: AdminIdentity,
    ) -> None:
        document = self.document_name(entry_id)
        fields = self._encode_fields({
            **entry.to_fields(),
            "updated_by": actor.actor,
            "created_by": actor.actor,
        })
        await self._commit(actor, entry_id, "create", [
            {
                "update": {"name": document, "fields": fields},
                "currentDocument": {"exists": False},
            },
            _server_time_transform(document, "createdAt", "updatedAt"),
        ])

    async def update(
        self, entry_id: str, changes: dict[str, object], actor: AdminIdentity,
    ) -> None:
        document = self.document_name(entry_id)
        fields = self._encode_fields({**changes, "updated_by": actor.actor})
        await self._commit(actor, entry_id, "update", [
            {
                "update": {"name": document, "fields": fields},
                "updateMask": {"fieldPaths": list(fields)},
                "currentDocument": {"exists": True},
            },
            _server_time_transform(document, "updatedAt"),
        ])

    async def delete(self, entry_id: str, actor: AdminIdentity) -> None:
        await self._commit(actor, entry_id, "delete", [
            {
                "delete": self.document_name(entry_id),
                "currentDocument": {"exists": True},
            },
        ])

    async def seed(
        self, entry_id: str, entry: EntryInput, actor: AdminIdentity,
    ) -> SeedStatus:
        """Create when absent, otherwise overwrite with the seed defaults."""
        exists = await self._exists(entry_id, actor)
        if not exists:
            await self.create(entry_id, entry, actor)
            return SeedStatus.CREATED
        await self.update(entry_id, entry.to_fields(), actor)
        return SeedStatus.UPDATED

    # ─── Reads ──────────────────────────────────────────────────

    async def get(self, entry_id: str) -> DirectoryEntry | None:
        response = await self._request("GET", f"{self.collection_url}/{entry_id}")
        if response.status_code == 404:
            return None
        self._raise_for_read(response, "get")
        return decode_document(self._json(response, "get"), self.preview_provider)

    async def list_entries(self) -> list[DirectoryEntry]:
        entries: list[DirectoryEntry] = []
        page_token: str | None = None
        while True:
            params: dict[str, object] = {"pageSize": _LIST_PAGE_SIZE}
            if page_token:
                params["pageToken"] = page_token
            response = await self._request("GET", self.collection_url, params=params)
            self._raise_for_read(response, "list")
            payload = self._json(response, "list")
            documents = payload.get("documents")
            if isinstance(documents, list):
                entries.extend(
                    decode_document(doc, self.preview_provider) for doc in documents
                )
            page_token = payload.get("nextPageToken")
            if not page_token:
                return entries

    async def health_check(self) -> bool:
        try:
            response = await self._request(
                "GET", self.collection_url, params={"pageSize": 1},
            )
        except Exception as e:
            logger.error(f"Firestore health check failed: {e}")
            return False
        return not response.is_error

    # ─── Helpers ────────────────────────────────────────────────

    def _encode_fields(self, values: dict[str, object]) -> dict[str, dict]:
        return {
            FIRESTORE_FIELDS[name]: encode_value(value)
            for name, value in values.items()
        }

    async def _exists(self, entry_id: str, actor: AdminIdentity) -> bool:
        response = await self._request(
            "GET", f"{self.collection_url}/{entry_id}",
            headers={"Authorization": f"Bearer {actor.id_token}"},
        )
        if response.status_code == 404:
            return False
        self._raise_for_read(response, "seed check")
        return True

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Firestore request failed: {e}")
            raise StoreError("Firestore unreachable", method.lower())

    def _json(self, response: httpx.Response, operation: str) -> dict:
        try:
            payload = response.json()
        except ValueError:
            raise StoreError("response was not JSON", operation)
        return payload if isinstance(payload, dict) else {}

    def _raise_for_read(self, response: httpx.Response, operation: str) -> None:
        if response.is_error:
            raise StoreError(
                f"({response.status_code}) {response.text[:200]}", operation,
            )

    async def _commit(
        self,
        actor: AdminIdentity,
        entry_id: str,
        operation: str,
        writes: list[dict],
    ) -> None:
        """Send writes as one atomic commit and map precondition failures."""
        response = await self._request(
            "POST",
            f"{self.base_url}/{self.database_path}:commit",
            json={"writes": writes},
            headers={"Authorization": f"Bearer {actor.id_token}"},
        )
        if not response.is_error:
            logger.info(
                f"Directory entry {operation} committed",
                extra={"entry_id": entry_id, "actor": actor.actor, "backend": "firestore"},
            )
            return

        status_name = _error_status(response)
        context = ErrorContext(entry_id=entry_id, actor=actor.actor)
        if response.status_code == 409 or status_name == "ALREADY_EXISTS":
            raise AlreadyExistsError(entry_id, context)
        if response.status_code == 404 or status_name == "NOT_FOUND":
            raise NotFoundError(entry_id, context)
        raise StoreError(
            f"({response.status_code}) {response.text[:200]}", operation, context,
        )


def _error_status(response: httpx.Response) -> str | None:
    """Google API error envelope status (e.g. "ALREADY_EXISTS"), if any."""
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return payload["error"].get("status")
    return None
