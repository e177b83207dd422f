"""Service test fixtures — SQL document store, stubbed HTTP services, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Identity service and partner feed are httpx.MockTransport stubs (no network)
    - Route tests swap app.state collaborators via app.dependency_overrides

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for store and route tests
      (PostgreSQL-specific behaviour not exercised here)
    - The SQL backend stands in for Firestore in route tests; Firestore's REST
      contract has its own tests against a MockTransport
    - ASGITransport does not run the lifespan, so nothing here opens real clients
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from httpx import ASGITransport, AsyncClient

from sitedir.api.dependencies import (
    get_document_store, get_identity_verifier, get_partner_feed,
)
from sitedir.core.admin_identity import AdminIdentity
from sitedir.db.base import Base
from sitedir.infrastructure.database import DatabaseSessionManager
from sitedir.infrastructure.identity_verifier import IdentityVerifier
from sitedir.infrastructure.partner_feed import PartnerFeedClient
from sitedir.infrastructure.sql_store import SqlDocumentStore
import sitedir.models  # noqa: F401
from sitedir.main import app

from tests.services.mock_http import (
    ADMIN_TOKEN,
    IdentityServiceStub,
    PartnerFeedStub,
    make_json_client,
)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def sql_store(test_engine):
    return SqlDocumentStore(DatabaseSessionManager.from_engine(test_engine))


@pytest.fixture
def admin():
    return AdminIdentity(
        uid="admin-uid", email="admin@example.com", id_token=ADMIN_TOKEN,
    )


@pytest.fixture
def identity_stub():
    return IdentityServiceStub()


@pytest.fixture
async def identity_verifier(identity_stub):
    async with make_json_client(identity_stub) as http:
        yield IdentityVerifier(
            http,
            api_key="test-key",
            lookup_url="https://identity.test/v1/accounts:lookup",
        )


@pytest.fixture
def feed_stub():
    return PartnerFeedStub()


@pytest.fixture
async def partner_feed(feed_stub):
    async with make_json_client(feed_stub) as http:
        yield PartnerFeedClient(
            http,
            base_url="https://partner.test/",
            endpoint_path="/api/clients?limit=1000",
        )


@pytest.fixture
async def client(sql_store, identity_verifier, partner_feed):
    """FastAPI test client with store, verifier and feed overridden."""
    app.dependency_overrides[get_document_store] = lambda: sql_store
    app.dependency_overrides[get_identity_verifier] = lambda: identity_verifier
    app.dependency_overrides[get_partner_feed] = lambda: partner_feed

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
