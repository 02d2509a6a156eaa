"""SQLModel ORM tables for reading list storage."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Text, UniqueConstraint
from sqlmodel import Field, SQLModel

DEFAULT_USER_ID = "default_user"


class AppUser(SQLModel, table=True):
    __tablename__ = "users"  # type: ignore[bad-override]

    user_id: str = Field(primary_key=True, index=True)
    display_name: str = Field(index=True)
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))


class ReadingList(SQLModel, table=True):
    __tablename__ = "reading_lists"  # type: ignore[bad-override]
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "name_folded",
            name="uq_reading_lists_scope_name_folded",
        ),
    )

    list_id: str = Field(primary_key=True)
    user_id: str = Field(
        default=DEFAULT_USER_ID,
        sa_column=Column(
            ForeignKey("users.user_id", ondelete="CASCADE"),
            nullable=False,
            server_default=DEFAULT_USER_ID,
            index=True,
        ),
    )
    name: str
    name_folded: str = Field(index=True)
    description: str | None = Field(default=None, sa_column=Column(Text))
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))


class ReadingListEntry(SQLModel, table=True):
    __tablename__ = "reading_list_entries"  # type: ignore[bad-override]
    __table_args__ = (
        UniqueConstraint(
            "list_id",
            "article_key",
            name="uq_reading_list_entries_list_key",
        ),
    )

    entry_id: int | None = Field(default=None, primary_key=True)
    list_id: str = Field(
        sa_column=Column(
            ForeignKey("reading_lists.list_id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    article_key: str = Field(index=True)
    article_key_folded: str = Field(index=True)
    display_title: str | None = None
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))


class SnapshotBaseline(SQLModel, table=True):
    __tablename__ = "snapshot_baselines"  # type: ignore[bad-override]

    name: str = Field(primary_key=True)
    user_id: str = Field(
        default=DEFAULT_USER_ID,
        sa_column=Column(
            ForeignKey("users.user_id", ondelete="CASCADE"),
            primary_key=True,
            server_default=DEFAULT_USER_ID,
        ),
    )
    snapshot_json: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
