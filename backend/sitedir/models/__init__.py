"""ORM Models — SQLAlchemy declarative models for the SQL document backend.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from sitedir.models.directory_entry import DirectoryEntryRecord  # noqa: F401
