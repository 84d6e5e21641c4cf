"""Initial schema: posts and admin.

Revision ID: 001
Revises: None
Create Date: 2026-10-19

Databases created with SQLModel's create_all are stamped at this
revision instead of running it.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "posts",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        sa.Column("title", sa.VARCHAR(), nullable=False),
        sa.Column("description", sa.VARCHAR(), nullable=False),
        sa.Column("content", sa.VARCHAR(), nullable=False),
        sa.Column("category", sa.VARCHAR(), nullable=False),
        sa.Column("tags", sa.VARCHAR(), nullable=False, server_default="[]"),
        sa.Column("difficulty", sa.VARCHAR(), nullable=False),
        sa.Column("timestamp", sa.INTEGER(), nullable=False),
        sa.Column("updated", sa.INTEGER(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_posts_category", "posts", ["category"])
    op.create_index("ix_posts_timestamp", "posts", ["timestamp"])

    op.create_table(
        "admin",
        sa.Column("id", sa.INTEGER(), nullable=False),
        sa.Column("password_hash", sa.VARCHAR(), nullable=False),
        sa.Column("created_at", sa.DATETIME(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("admin")
    op.drop_index("ix_posts_timestamp", table_name="posts")
    op.drop_index("ix_posts_category", table_name="posts")
    op.drop_table("posts")
