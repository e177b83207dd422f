"""Database Metadata — SQLAlchemy Base for the SQL document backend.

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for local/test SQLite
"""
