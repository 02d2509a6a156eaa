"""Initial reading lists schema."""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_index("ix_users_user_id", "users", ["user_id"])
    op.create_index("ix_users_display_name", "users", ["display_name"])

    op.create_table(
        "reading_lists",
        sa.Column("list_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), server_default="default_user", nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("name_folded", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("list_id"),
        sa.UniqueConstraint(
            "user_id",
            "name_folded",
            name="uq_reading_lists_scope_name_folded",
        ),
    )
    op.create_index("ix_reading_lists_user_id", "reading_lists", ["user_id"])
    op.create_index("ix_reading_lists_name_folded", "reading_lists", ["name_folded"])

    op.create_table(
        "reading_list_entries",
        sa.Column("entry_id", sa.Integer(), nullable=False),
        sa.Column("list_id", sa.String(), nullable=False),
        sa.Column("article_key", sa.String(), nullable=False),
        sa.Column("article_key_folded", sa.String(), nullable=False),
        sa.Column("display_title", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["list_id"], ["reading_lists.list_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("entry_id"),
        sa.UniqueConstraint(
            "list_id",
            "article_key",
            name="uq_reading_list_entries_list_key",
        ),
    )
    op.create_index("ix_reading_list_entries_list_id", "reading_list_entries", ["list_id"])
    op.create_index(
        "ix_reading_list_entries_article_key",
        "reading_list_entries",
        ["article_key"],
    )
    op.create_index(
        "ix_reading_list_entries_article_key_folded",
        "reading_list_entries",
        ["article_key_folded"],
    )

    op.create_table(
        "snapshot_baselines",
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), server_default="default_user", nullable=False),
        sa.Column("snapshot_json", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("name", "user_id"),
    )


def downgrade() -> None:
    op.drop_table("snapshot_baselines")
    op.drop_index(
        "ix_reading_list_entries_article_key_folded",
        table_name="reading_list_entries",
    )
    op.drop_index("ix_reading_list_entries_article_key", table_name="reading_list_entries")
    op.drop_index("ix_reading_list_entries_list_id", table_name="reading_list_entries")
    op.drop_table("reading_list_entries")
    op.drop_index("ix_reading_lists_name_folded", table_name="reading_lists")
    op.drop_index("ix_reading_lists_user_id", table_name="reading_lists")
    op.drop_table("reading_lists")
    op.drop_index("ix_users_display_name", table_name="users")
    op.drop_index("ix_users_user_id", table_name="users")
    op.drop_table("users")
