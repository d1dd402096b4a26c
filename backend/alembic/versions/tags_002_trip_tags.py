"""Trip tags and their trip assignments

Revision ID: tags_002
Revises: initial_001
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "tags_002"
down_revision = "initial_001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "trip_tags",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("color", sa.String(7)),
        sa.Column("text_color", sa.String(7)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_trip_tags_user_id", "trip_tags", ["user_id"])

    op.create_table(
        "trip_tag_assignments",
        sa.Column("trip_id", sa.Integer, sa.ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("tag_id", sa.Integer, sa.ForeignKey("trip_tags.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("trip_tag_assignments")
    op.drop_index("ix_trip_tags_user_id", table_name="trip_tags")
    op.drop_table("trip_tags")
