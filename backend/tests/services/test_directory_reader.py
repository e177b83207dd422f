"""Directory Reader — tests for merged reads and partner feed isolation.

Tests cover:
    - A failing feed still returns internal entries plus a warning string
    - An unexpected exception in the feed is contained the same way
    - Public view is active-only; admin view keeps inactive rows and tags sources
    - Internal-only view ignores the feed
    - A failed internal read cancels the in-flight feed fetch
"""

import asyncio

import pytest

from sitedir.core.directory_entry import EntryInput
from sitedir.core.domain_types import EntrySource
from sitedir.core.errors import StoreError
from sitedir.services import directory_reader

from tests.services.mock_http import partner_client


def _input(title: str, sort_order: int, is_active: bool = True) -> EntryInput:
    return EntryInput(
        label=title,
        title=title,
        url="https://internal.example.com",
        preview_image_url="",
        sort_order=sort_order,
        is_active=is_active,
    )


@pytest.fixture
async def populated_store(sql_store, admin):
    await sql_store.create("home", _input("Home", 0), admin)
    await sql_store.create("hidden", _input("Hidden", 1, is_active=False), admin)
    return sql_store


async def test_failing_feed_keeps_internal_entries(populated_store, partner_feed, feed_stub):
    feed_stub.status_code = 500
    feed_stub.text = "upstream down"

    view = await directory_reader.read_public_directory(populated_store, partner_feed)
    assert [e.id for e in view.entries] == ["home"]
    assert view.external.error.startswith("Failed to fetch partner clients (500)")


async def test_unexpected_feed_bug_is_contained(populated_store):
    class BrokenFeed:
        async def fetch(self):
            raise RuntimeError("parser exploded")

    view = await directory_reader.read_public_directory(populated_store, BrokenFeed())
    assert [e.id for e in view.entries] == ["home"]
    assert view.external.error == "parser exploded"


async def test_public_view_merges_active_entries(populated_store, partner_feed, feed_stub):
    feed_stub.payload = {"clients": [
        partner_client("p1", "Partner", "https://partner.example.com", sortOrder=0),
        partner_client("p2", "Dormant", "https://dormant.example.com", isActive=False),
    ]}

    view = await directory_reader.read_public_directory(populated_store, partner_feed)
    assert [e.id for e in view.entries] == ["home", "external:p1"]
    assert view.external.error is None


async def test_admin_view_keeps_inactive_and_tags(populated_store, partner_feed, feed_stub):
    feed_stub.payload = {"clients": [
        partner_client("p2", "Dormant", "https://dormant.example.com", isActive=False),
    ]}

    view = await directory_reader.read_admin_directory(populated_store, partner_feed)
    assert [(e.id, e.source) for e in view.entries] == [
        ("home", EntrySource.INTERNAL),
        ("hidden", EntrySource.INTERNAL),
        ("external:p2", EntrySource.EXTERNAL),
    ]
    assert view.external.result.total_clients == 1


async def test_internal_view_is_active_only(populated_store):
    entries = await directory_reader.read_internal_directory(populated_store)
    assert [e.id for e in entries] == ["home"]


async def test_internal_store_failure_propagates(partner_feed):
    class DownStore:
        async def list_entries(self):
            raise StoreError("Firestore unreachable", "get")

    with pytest.raises(StoreError):
        await directory_reader.read_public_directory(DownStore(), partner_feed)


async def test_failed_internal_read_cancels_feed_fetch():
    feed_cancelled = asyncio.Event()

    class HangingFeed:
        async def fetch(self):
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                feed_cancelled.set()
                raise

    class SlowFailingStore:
        async def list_entries(self):
            await asyncio.sleep(0)
            raise StoreError("Firestore unreachable", "get")

    with pytest.raises(StoreError):
        await directory_reader.read_public_directory(SlowFailingStore(), HangingFeed())
    await asyncio.wait_for(feed_cancelled.wait(), timeout=1)
