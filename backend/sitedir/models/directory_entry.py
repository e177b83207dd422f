"""Directory Entry ORM — persisted internal entries for the SQL backend.

Invariants:
    - id is the string primary key (server UUID or fixed seed id)
    - url is non-nullable; sort_order is an integer
    - created_at/updated_at default to the database clock (func.now()), never the app clock

Design Decisions:
    - Field names snake_case in SQL, camelCase only at the API boundary
    - Index on (sort_order, title) matches the merge ordering
"""

from datetime import datetime

from sqlalchemy import String, Text, Integer, Boolean, DateTime, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from sitedir.db.base import Base


class DirectoryEntryRecord(Base):
    """One admin-managed website listing."""
    __tablename__ = "website_directory_entries"
    __table_args__ = (
        Index("ix_website_directory_entries_order", "sort_order", "title"),
    )

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    label: Mapped[str] = mapped_column(String(200), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    subtitle: Mapped[str] = mapped_column(Text, nullable=False, default="")
    url: Mapped[str] = mapped_column(Text, nullable=False)
    preview_image_url: Mapped[str] = mapped_column(
        Text, nullable=False, default="",
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    created_by: Mapped[str] = mapped_column(String(320), nullable=False)
    updated_by: Mapped[str] = mapped_column(String(320), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )
