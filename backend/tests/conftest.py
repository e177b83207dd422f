"""Root conftest — shared test configuration."""

import os

# Ensure tests don't accidentally reach real identity or document services
os.environ.setdefault("FIREBASE_API_KEY", "test-fake-api-key")
os.environ.setdefault("FIREBASE_PROJECT_ID", "test-project")
os.environ.setdefault("DOCUMENT_BACKEND", "sql")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
