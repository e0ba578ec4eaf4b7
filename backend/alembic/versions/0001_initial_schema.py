"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the Caronae ride API:
institutions, campi, hubs, users, rides, ride_user, ride_notifications.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- institutions / campi / hubs ---
    op.create_table(
        "institutions",
        sa.Column("institution_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(150), nullable=False),
    )
    op.create_table(
        "campi",
        sa.Column("campus_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(150), nullable=False, unique=True),
        sa.Column("institution_id", sa.Integer, sa.ForeignKey("institutions.institution_id"), nullable=False),
    )
    op.create_table(
        "hubs",
        sa.Column("hub_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("center", sa.String(150), nullable=False),
        sa.Column("campus_id", sa.Integer, sa.ForeignKey("campi.campus_id"), nullable=False),
    )

    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("profile", sa.String(50), nullable=True),
        sa.Column("course", sa.String(100), nullable=True),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("location", sa.String(100), nullable=True),
        sa.Column("car_owner", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("car_model", sa.String(50), nullable=True),
        sa.Column("car_color", sa.String(30), nullable=True),
        sa.Column("car_plate", sa.String(10), nullable=True),
        sa.Column("profile_pic_url", sa.String(500), nullable=True),
        sa.Column("institution_id", sa.Integer, sa.ForeignKey("institutions.institution_id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- rides ---
    op.create_table(
        "rides",
        sa.Column("ride_id", sa.String(36), primary_key=True),
        sa.Column("date", sa.DateTime, nullable=False, index=True),
        sa.Column("going", sa.Boolean, nullable=False, server_default="1"),
        sa.Column("hub", sa.String(150), nullable=False),
        sa.Column("neighborhood", sa.String(150), nullable=False),
        sa.Column("myzone", sa.String(50), nullable=True),
        sa.Column("place", sa.String(255), nullable=True),
        sa.Column("route", sa.String(255), nullable=True),
        sa.Column("slots", sa.Integer, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("routine_id", sa.String(36), nullable=True, index=True),
        sa.Column("week_days", sa.String(20), nullable=True),
        sa.Column("repeats_until", sa.Date, nullable=True),
        sa.Column("done", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- ride_user ---
    op.create_table(
        "ride_user",
        sa.Column("ride_id", sa.String(36), sa.ForeignKey("rides.ride_id"), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("feedback", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- ride_notifications ---
    op.create_table(
        "ride_notifications",
        sa.Column("notification_id", sa.String(36), primary_key=True),
        sa.Column("ride_id", sa.String(36), sa.ForeignKey("rides.ride_id"), nullable=False),
        sa.Column("recipient_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("notification_type", sa.String(40), nullable=False),
        sa.Column("payload", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("ride_notifications")
    op.drop_table("ride_user")
    op.drop_table("rides")
    op.drop_table("users")
    op.drop_table("hubs")
    op.drop_table("campi")
    op.drop_table("institutions")
