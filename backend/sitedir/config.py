"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - admin_debug_bypass defaults to False and is never inferred from an environment name

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: the public read path works out-of-the-box
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from sitedir.core.domain_types import DocumentBackend
from sitedir.core.preview_url import DEFAULT_PREVIEW_PROVIDER


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Internal record backend
    document_backend: DocumentBackend = DocumentBackend.FIRESTORE

    # SQL backend
    database_url: str = (
        "postgresql+asyncpg://directory:directory@db:5432/directory"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres provides postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Firestore backend + identity
    firebase_project_id: str = ""
    firebase_api_key: str = ""
    firestore_base_url: str = "https://firestore.googleapis.com/v1"
    firestore_collection: str = "beamWebsiteDirectory"
    identity_lookup_url: str = (
        "https://identitytoolkit.googleapis.com/v1/accounts:lookup"
    )

    # Treats every verified identity as admin. Local development only.
    admin_debug_bypass: bool = False

    # Partner feed
    partner_api_base_url: str = "https://www.readyaimgo.biz"
    partner_clients_endpoint: str = "/api/clients?limit=1000"
    partner_api_key: str | None = None

    # Preview screenshots
    preview_provider_url: str = DEFAULT_PREVIEW_PROVIDER

    # Outbound HTTP
    http_timeout_seconds: float = 10.0

    # Seed
    seed_entry_id: str = "beam-home-site"

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
