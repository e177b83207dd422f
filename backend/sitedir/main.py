"""Website Directory API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DirectoryError → {"error", "code"} JSON responses
    - CORS configured from settings (not hardcoded)
    - Every outbound collaborator is built once in the lifespan and injected via app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - One shared httpx.AsyncClient for identity, Firestore and the partner feed:
      one connection pool, one timeout policy, closed on shutdown
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sitedir.api.error_handlers import register_error_handlers
from sitedir.api.routes import admin_directory, health, public_directory
from sitedir.config import Settings, get_settings
from sitedir.core.domain_types import DocumentBackend
from sitedir.core.repository_protocols import DocumentStore
from sitedir.infrastructure.database import DatabaseSessionManager
from sitedir.infrastructure.firestore_store import FirestoreDocumentStore
from sitedir.infrastructure.identity_verifier import IdentityVerifier
from sitedir.infrastructure.observability import setup_logging
from sitedir.infrastructure.partner_feed import PartnerFeedClient
from sitedir.infrastructure.sql_store import SqlDocumentStore

logger = logging.getLogger(__name__)


def build_document_store(
    settings: Settings, http: httpx.AsyncClient,
) -> tuple[DocumentStore, DatabaseSessionManager | None]:
    """Store for the configured backend (plus its DB manager, if any)."""
    if settings.document_backend == DocumentBackend.SQL:
        db = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        return SqlDocumentStore(db, settings.preview_provider_url), db
    store = FirestoreDocumentStore(
        http,
        project_id=settings.firebase_project_id,
        collection=settings.firestore_collection,
        base_url=settings.firestore_base_url,
        preview_provider=settings.preview_provider_url,
    )
    return store, None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    http = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    store, db = build_document_store(settings, http)
    app.state.document_store = store
    app.state.identity_verifier = IdentityVerifier(
        http,
        api_key=settings.firebase_api_key,
        lookup_url=settings.identity_lookup_url,
        debug_bypass=settings.admin_debug_bypass,
    )
    app.state.partner_feed = PartnerFeedClient(
        http,
        base_url=settings.partner_api_base_url,
        endpoint_path=settings.partner_clients_endpoint,
        api_key=settings.partner_api_key,
        preview_provider=settings.preview_provider_url,
    )
    if settings.admin_debug_bypass:
        logger.warning(
            "ADMIN_DEBUG_BYPASS is enabled: every verified identity is treated as admin",
        )
    logger.info(
        "Website Directory API started",
        extra={"backend": settings.document_backend.value},
    )
    yield
    logger.info("Website Directory API shutting down")
    await http.aclose()
    if db is not None:
        await db.dispose()


app = FastAPI(
    title="Website Directory API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(public_directory.router)
app.include_router(admin_directory.router)

register_error_handlers(app)
