"""initial schema

Revision ID: 5c1e0a7d2b94
Revises:
Create Date: 2026-10-17 09:12:44.318204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e0a7d2b94"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create paste, like, comment and account tables."""
    op.create_table(
        "paste",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("tags", sa.Text(), nullable=False),
        sa.Column("language", sa.Text(), nullable=True),
        sa.Column("date", sa.Text(), nullable=False),
        sa.Column("owner_id", sa.Text(), nullable=True),
        sa.Column("role", sa.Text(), nullable=False),
        sa.Column("pinned", sa.Boolean(), nullable=False),
        sa.Column("views", sa.Integer(), nullable=False),
        sa.Column("likes", sa.Integer(), nullable=False),
        sa.Column("is_private", sa.Boolean(), nullable=False),
        sa.Column("expires_at", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_paste_category", "paste", ["category"])
    op.create_index("ix_paste_owner_id", "paste", ["owner_id"])

    op.create_table(
        "paste_like",
        sa.Column("paste_id", sa.Text(), nullable=False),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["paste_id"], ["paste.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("paste_id", "user_id"),
    )
    op.create_index("ix_paste_like_paste_id", "paste_like", ["paste_id"])

    op.create_table(
        "paste_comment",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("paste_id", sa.Text(), nullable=False),
        sa.Column("author", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("date", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["paste_id"], ["paste.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_paste_comment_paste_id", "paste_comment", ["paste_id"])

    op.create_table(
        "user_account",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("username_lower", sa.Text(), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.Text(), nullable=False),
        sa.Column("totp_secret", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username_lower"),
    )

    op.create_table(
        "user_profile",
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("theme", sa.Text(), nullable=False),
        sa.Column("last_seen", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id"),
    )


def downgrade() -> None:
    """Drop all tables created by this revision."""
    op.drop_table("user_profile")
    op.drop_table("user_account")
    op.drop_index("ix_paste_comment_paste_id", table_name="paste_comment")
    op.drop_table("paste_comment")
    op.drop_index("ix_paste_like_paste_id", table_name="paste_like")
    op.drop_table("paste_like")
    op.drop_index("ix_paste_owner_id", table_name="paste")
    op.drop_index("ix_paste_category", table_name="paste")
    op.drop_table("paste")
