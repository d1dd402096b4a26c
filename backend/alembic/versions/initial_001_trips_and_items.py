"""Initial schema: users, trips, trip items, entity links, companions, checklists

Revision ID: initial_001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = "initial_001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _trip_fk() -> sa.Column:
    return sa.Column("trip_id", sa.Integer, sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)


def upgrade() -> None:
    # ─── Users & trips ───
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("timezone", sa.String(100), server_default="UTC"),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "trips",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("start_date", sa.Date),
        sa.Column("end_date", sa.Date),
        sa.Column("timezone", sa.String(100)),
        sa.Column("status", sa.String(20), server_default="Planning"),
        sa.Column("privacy_level", sa.String(20), server_default="Private"),
        sa.Column("add_to_places_visited", sa.Boolean, server_default=sa.false()),
        sa.Column("budget", sa.Numeric(12, 2)),
        sa.Column("currency", sa.String(3), server_default="USD"),
        *_timestamps(),
    )
    op.create_index("ix_trips_user_id", "trips", ["user_id"])

    # ─── Trip items ───
    op.create_table(
        "locations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _trip_fk(),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("address", sa.Text),
        sa.Column("latitude", sa.Float),
        sa.Column("longitude", sa.Float),
        sa.Column("category", sa.String(100)),
        sa.Column("visit_datetime", sa.DateTime(timezone=True)),
        sa.Column("visit_duration_minutes", sa.Integer),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )
    op.create_index("ix_locations_trip_id", "locations", ["trip_id"])

    op.create_table(
        "activities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _trip_fk(),
        sa.Column("parent_id", sa.Integer, sa.ForeignKey("activities.id", ondelete="SET NULL")),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("category", sa.String(100)),
        sa.Column("all_day", sa.Boolean, server_default=sa.false()),
        sa.Column("start_time", sa.DateTime(timezone=True)),
        sa.Column("end_time", sa.DateTime(timezone=True)),
        sa.Column("timezone", sa.String(100)),
        sa.Column("cost", sa.Numeric(10, 2)),
        sa.Column("currency", sa.String(3)),
        sa.Column("booking_url", sa.String(500)),
        sa.Column("booking_reference", sa.String(255)),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )
    op.create_index("ix_activities_trip_id", "activities", ["trip_id"])

    op.create_table(
        "transportation",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _trip_fk(),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("from_location_id", sa.Integer, sa.ForeignKey("locations.id", ondelete="SET NULL")),
        sa.Column("to_location_id", sa.Integer, sa.ForeignKey("locations.id", ondelete="SET NULL")),
        sa.Column("from_location_name", sa.String(500)),
        sa.Column("to_location_name", sa.String(500)),
        sa.Column("departure_time", sa.DateTime(timezone=True)),
        sa.Column("arrival_time", sa.DateTime(timezone=True)),
        sa.Column("start_timezone", sa.String(100)),
        sa.Column("end_timezone", sa.String(100)),
        sa.Column("carrier", sa.String(255)),
        sa.Column("vehicle_number", sa.String(100)),
        sa.Column("confirmation_number", sa.String(100)),
        sa.Column("cost", sa.Numeric(10, 2)),
        sa.Column("currency", sa.String(3)),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )
    op.create_index("ix_transportation_trip_id", "transportation", ["trip_id"])

    op.create_table(
        "lodging",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _trip_fk(),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("address", sa.String(1000)),
        sa.Column("check_in_date", sa.DateTime(timezone=True)),
        sa.Column("check_out_date", sa.DateTime(timezone=True)),
        sa.Column("timezone", sa.String(100)),
        sa.Column("confirmation_number", sa.String(100)),
        sa.Column("cost", sa.Numeric(10, 2)),
        sa.Column("currency", sa.String(3)),
        sa.Column("booking_url", sa.String(1000)),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )
    op.create_index("ix_lodging_trip_id", "lodging", ["trip_id"])

    op.create_table(
        "journal_entries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _trip_fk(),
        sa.Column("title", sa.String(500)),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("entry_type", sa.String(20), server_default="daily"),
        *_timestamps(),
    )
    op.create_index("ix_journal_entries_trip_id", "journal_entries", ["trip_id"])

    # ─── Photos & albums ───
    op.create_table(
        "photos",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _trip_fk(),
        sa.Column("source", sa.String(20), server_default="local"),
        sa.Column("file_path", sa.String(1000)),
        sa.Column("thumbnail_path", sa.String(1000)),
        sa.Column("caption", sa.Text),
        sa.Column("taken_at", sa.DateTime(timezone=True)),
        sa.Column("latitude", sa.Float),
        sa.Column("longitude", sa.Float),
        *_timestamps(),
    )
    op.create_index("ix_photos_trip_id", "photos", ["trip_id"])

    op.create_table(
        "photo_albums",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _trip_fk(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("cover_photo_id", sa.Integer, sa.ForeignKey("photos.id", ondelete="SET NULL")),
        *_timestamps(),
    )
    op.create_index("ix_photo_albums_trip_id", "photo_albums", ["trip_id"])

    op.create_table(
        "album_photos",
        sa.Column("album_id", sa.Integer, sa.ForeignKey("photo_albums.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("photo_id", sa.Integer, sa.ForeignKey("photos.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("added_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ─── Entity links ───
    op.create_table(
        "entity_links",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _trip_fk(),
        sa.Column("source_type", sa.String(20), nullable=False),
        sa.Column("source_id", sa.Integer, nullable=False),
        sa.Column("target_type", sa.String(20), nullable=False),
        sa.Column("target_id", sa.Integer, nullable=False),
        sa.Column("relationship", sa.String(20), server_default="RELATED"),
        sa.Column("sort_order", sa.Integer),
        sa.Column("notes", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_entity_links_source", "entity_links", ["trip_id", "source_type", "source_id"])
    op.create_index("ix_entity_links_target", "entity_links", ["trip_id", "target_type", "target_id"])

    # ─── Companions ───
    op.create_table(
        "companions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("phone", sa.String(20)),
        sa.Column("notes", sa.Text),
        sa.Column("relationship", sa.String(255)),
        sa.Column("avatar_url", sa.String(500)),
        sa.Column("dietary_preferences", JSONB),
        sa.Column("is_myself", sa.Boolean, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_companions_user_id", "companions", ["user_id"])

    op.create_table(
        "trip_companions",
        sa.Column("trip_id", sa.Integer, sa.ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("companion_id", sa.Integer, sa.ForeignKey("companions.id", ondelete="CASCADE"), primary_key=True),
    )

    # ─── Checklists ───
    op.create_table(
        "checklists",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("trip_id", sa.Integer, sa.ForeignKey("trips.id", ondelete="SET NULL")),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("type", sa.String(20), server_default="custom"),
        sa.Column("is_default", sa.Boolean, server_default=sa.false()),
        sa.Column("sort_order", sa.Integer, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_checklists_user_id", "checklists", ["user_id"])

    op.create_table(
        "checklist_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("checklist_id", sa.Integer, sa.ForeignKey("checklists.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("is_checked", sa.Boolean, server_default=sa.false()),
        sa.Column("is_default", sa.Boolean, server_default=sa.false()),
        sa.Column("sort_order", sa.Integer, server_default="0"),
        sa.Column("metadata", JSONB),
        sa.Column("checked_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_checklist_items_checklist_id", "checklist_items", ["checklist_id"])


def downgrade() -> None:
    for table in (
        "checklist_items",
        "checklists",
        "trip_companions",
        "companions",
        "entity_links",
        "album_photos",
        "photo_albums",
        "photos",
        "journal_entries",
        "lodging",
        "transportation",
        "activities",
        "locations",
        "trips",
        "users",
    ):
        op.drop_table(table)
