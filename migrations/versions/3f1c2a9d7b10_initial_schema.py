"""initial schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:12:41.518204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create posts, actions, votes and the rate-limit log."""
    op.create_table(
        "post",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=16), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "category IN ('film', 'fictional', 'political')",
            name="ck_post_category",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_post_status",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_status", "post", ["status"])
    op.create_index("ix_post_category", "post", ["category"])
    op.create_index("ix_post_created_at", "post", ["created_at"])

    op.create_table(
        "action",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("approved", sa.Boolean(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_action_approved", "action", ["approved"])

    op.create_table(
        "vote",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("action_id", sa.Integer(), nullable=False),
        sa.Column("ip_address", sa.String(length=45), nullable=False),
        sa.Column("device_id", sa.String(length=64), nullable=True),
        sa.Column("voter_key", sa.String(length=128), nullable=False),
        sa.Column("dedup_key", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["action_id"], ["action.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "action_id", "dedup_key", name="uq_vote_dedup"),
    )
    op.create_index("ix_vote_post_id", "vote", ["post_id"])
    op.create_index("ix_vote_action_id", "vote", ["action_id"])
    op.create_index("ix_vote_ip_address", "vote", ["ip_address"])
    op.create_index("ix_vote_created_at", "vote", ["created_at"])

    op.create_table(
        "rate_limit",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("identity", sa.String(length=45), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.Column("window_start", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_rate_limit_identity_category",
        "rate_limit",
        ["identity", "category"],
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_rate_limit_identity_category", table_name="rate_limit")
    op.drop_table("rate_limit")
    op.drop_index("ix_vote_created_at", table_name="vote")
    op.drop_index("ix_vote_ip_address", table_name="vote")
    op.drop_index("ix_vote_action_id", table_name="vote")
    op.drop_index("ix_vote_post_id", table_name="vote")
    op.drop_table("vote")
    op.drop_index("ix_action_approved", table_name="action")
    op.drop_table("action")
    op.drop_index("ix_post_created_at", table_name="post")
    op.drop_index("ix_post_category", table_name="post")
    op.drop_index("ix_post_status", table_name="post")
    op.drop_table("post")
