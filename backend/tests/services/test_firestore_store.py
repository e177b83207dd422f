"""Firestore Document Store — tests for the REST commit contract and error mapping.

Tests cover:
    - create commits update + exists=false precondition + createdAt/updatedAt server time
    - update commits a masked update with exists=true and an updatedAt transform
    - delete commits a delete write with exists=true
    - commits carry the admin's own bearer token
    - ALREADY_EXISTS -> AlreadyExistsError, NOT_FOUND -> NotFoundError, other -> StoreError
    - list_entries follows nextPageToken; decode derives an empty preview
    - seed checks existence before choosing create or update
    - missing project id -> ConfigurationError
"""

import json

import httpx
import pytest

from sitedir.core.directory_entry import EntryInput
from sitedir.core.domain_types import SeedStatus
from sitedir.core.errors import (
    AlreadyExistsError,
    ConfigurationError,
    NotFoundError,
    StoreError,
)
from sitedir.infrastructure.firestore_store import (
    FirestoreDocumentStore,
    decode_document,
    encode_value,
)

from tests.services.mock_http import ADMIN_TOKEN, make_json_client

DB_PATH = "projects/demo/databases/(default)/documents"
BASE = "https://firestore.test/v1"


class FirestoreStub:
    """Records requests; replies with queued responses (default 200 {})."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            return self.responses.pop(0)
        return httpx.Response(200, json={})

    def commit_body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def firestore_stub():
    return FirestoreStub()


@pytest.fixture
async def firestore_store(firestore_stub):
    async with make_json_client(firestore_stub) as http:
        yield FirestoreDocumentStore(
            http, project_id="demo", collection="beamWebsiteDirectory", base_url=BASE,
        )


def _input() -> EntryInput:
    return EntryInput(
        label="Docs",
        title="Documentation",
        url="https://docs.example.com",
        preview_image_url="https://cdn.example.com/p.png",
        sort_order=4,
        is_active=True,
    )


def _document(entry_id: str, title: str, **fields) -> dict:
    return {
        "name": f"{DB_PATH}/beamWebsiteDirectory/{entry_id}",
        "fields": {
            "label": {"stringValue": title},
            "title": {"stringValue": title},
            "url": {"stringValue": f"https://{entry_id}.example.com"},
            "sortOrder": {"integerValue": "1"},
            "isActive": {"booleanValue": True},
            **fields,
        },
    }


# ─── encoding ────────────────────────────────────────────────────

@pytest.mark.parametrize("value,expected", [
    (True, {"booleanValue": True}),
    (3, {"integerValue": "3"}),
    (3.9, {"integerValue": "3"}),
    ("x", {"stringValue": "x"}),
    (None, {"stringValue": ""}),
])
def test_encode_value(value, expected):
    assert encode_value(value) == expected


def test_decode_document_derives_empty_preview():
    entry = decode_document(_document("abc", "Alpha", previewImageUrl={"stringValue": ""}))
    assert entry.id == "abc"
    assert entry.sort_order == 1
    assert entry.preview_image_url.startswith("https://api.microlink.io/?")


def test_decode_document_keeps_large_integers_exact():
    entry = decode_document(_document(
        "abc", "Alpha", sortOrder={"integerValue": "9007199254740993"},
    ))
    assert entry.sort_order == 9007199254740993


def test_decode_document_truncates_double_values():
    entry = decode_document(_document("abc", "Alpha", sortOrder={"doubleValue": 2.9}))
    assert entry.sort_order == 2


def test_decode_document_reads_timestamps():
    entry = decode_document(_document(
        "abc", "Alpha", createdAt={"timestampValue": "2026-01-02T03:04:05.123456Z"},
    ))
    assert entry.created_at.year == 2026
    assert entry.updated_at is None


# ─── commits ─────────────────────────────────────────────────────

async def test_create_commit_shape(firestore_store, firestore_stub, admin):
    await firestore_store.create("entry-1", _input(), admin)

    request = firestore_stub.requests[0]
    assert request.method == "POST"
    assert request.url.host == "firestore.test"
    assert request.url.path.endswith("/documents:commit")
    assert request.headers["Authorization"] == f"Bearer {ADMIN_TOKEN}"

    write, transform = firestore_stub.commit_body()["writes"]
    assert write["update"]["name"] == f"{DB_PATH}/beamWebsiteDirectory/entry-1"
    assert write["currentDocument"] == {"exists": False}
    fields = write["update"]["fields"]
    assert fields["sortOrder"] == {"integerValue": "4"}
    assert fields["isActive"] == {"booleanValue": True}
    assert fields["previewImageUrl"] == {"stringValue": "https://cdn.example.com/p.png"}
    assert fields["createdBy"] == {"stringValue": "admin@example.com"}
    assert [t["fieldPath"] for t in transform["transform"]["fieldTransforms"]] == [
        "createdAt", "updatedAt",
    ]


async def test_update_commit_is_masked(firestore_store, firestore_stub, admin):
    await firestore_store.update("entry-1", {"is_active": False}, admin)

    write, transform = firestore_stub.commit_body()["writes"]
    assert write["currentDocument"] == {"exists": True}
    assert sorted(write["updateMask"]["fieldPaths"]) == ["isActive", "updatedBy"]
    assert set(write["update"]["fields"]) == {"isActive", "updatedBy"}
    assert transform["transform"]["fieldTransforms"] == [
        {"fieldPath": "updatedAt", "setToServerValue": "REQUEST_TIME"},
    ]


async def test_delete_commit_shape(firestore_store, firestore_stub, admin):
    await firestore_store.delete("entry-1", admin)
    assert firestore_stub.commit_body()["writes"] == [{
        "delete": f"{DB_PATH}/beamWebsiteDirectory/entry-1",
        "currentDocument": {"exists": True},
    }]


async def test_already_exists_maps(firestore_store, firestore_stub, admin):
    firestore_stub.responses.append(httpx.Response(
        409, json={"error": {"code": 409, "status": "ALREADY_EXISTS"}},
    ))
    with pytest.raises(AlreadyExistsError):
        await firestore_store.create("entry-1", _input(), admin)


async def test_not_found_maps(firestore_store, firestore_stub, admin):
    firestore_stub.responses.append(httpx.Response(
        404, json={"error": {"code": 404, "status": "NOT_FOUND"}},
    ))
    with pytest.raises(NotFoundError):
        await firestore_store.update("missing-entry", {"title": "X"}, admin)


async def test_failed_precondition_status_maps_by_name(firestore_store, firestore_stub, admin):
    firestore_stub.responses.append(httpx.Response(
        400, json={"error": {"code": 400, "status": "NOT_FOUND"}},
    ))
    with pytest.raises(NotFoundError):
        await firestore_store.delete("missing-entry", admin)


async def test_other_commit_failure_is_store_error(firestore_store, firestore_stub, admin):
    firestore_stub.responses.append(httpx.Response(403, text="PERMISSION_DENIED"))
    with pytest.raises(StoreError) as exc_info:
        await firestore_store.delete("entry-1", admin)
    assert exc_info.value.http_status == 500


async def test_transport_failure_is_store_error(admin):
    def boom(request):
        raise httpx.ConnectError("down", request=request)

    async with make_json_client(boom) as http:
        store = FirestoreDocumentStore(http, "demo", "beamWebsiteDirectory", BASE)
        with pytest.raises(StoreError):
            await store.list_entries()


async def test_missing_project_id_is_configuration_error(admin):
    async with make_json_client(lambda r: httpx.Response(200, json={})) as http:
        store = FirestoreDocumentStore(http, "", "beamWebsiteDirectory", BASE)
        with pytest.raises(ConfigurationError):
            await store.delete("entry-1", admin)


# ─── reads ───────────────────────────────────────────────────────

async def test_list_follows_page_tokens(firestore_store, firestore_stub):
    firestore_stub.responses.extend([
        httpx.Response(200, json={
            "documents": [_document("a", "Alpha")], "nextPageToken": "p2",
        }),
        httpx.Response(200, json={"documents": [_document("b", "Beta")]}),
    ])

    entries = await firestore_store.list_entries()
    assert [e.id for e in entries] == ["a", "b"]
    assert firestore_stub.requests[1].url.params["pageToken"] == "p2"


async def test_list_empty_collection(firestore_store):
    assert await firestore_store.list_entries() == []


async def test_list_failure_is_store_error(firestore_store, firestore_stub):
    firestore_stub.responses.append(httpx.Response(500, text="boom"))
    with pytest.raises(StoreError):
        await firestore_store.list_entries()


async def test_seed_creates_when_absent(firestore_store, firestore_stub, admin):
    firestore_stub.responses.append(httpx.Response(404, json={}))

    assert await firestore_store.seed("beam-home-site", _input(), admin) == SeedStatus.CREATED
    write = firestore_stub.commit_body()["writes"][0]
    assert write["currentDocument"] == {"exists": False}


async def test_seed_updates_when_present(firestore_store, firestore_stub, admin):
    firestore_stub.responses.append(
        httpx.Response(200, json=_document("beam-home-site", "Old")),
    )

    assert await firestore_store.seed("beam-home-site", _input(), admin) == SeedStatus.UPDATED
    write = firestore_stub.commit_body()["writes"][0]
    assert write["currentDocument"] == {"exists": True}
    assert "label" in write["updateMask"]["fieldPaths"]
