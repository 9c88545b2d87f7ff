"""Initial schema: users, providers, trips, bookings, reviews, complaints, password resets.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _public_id() -> sa.Column:
    return sa.Column("public_id", sa.String(36), nullable=False)


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _public_id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default=sa.text("'customer'")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'active'")),
        sa.Column("failed_login_attempts", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_suspended", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        sa.CheckConstraint("failed_login_attempts >= 0", name="check_failed_login_attempts_non_negative"),
        sa.CheckConstraint("role IN ('customer', 'provider', 'admin')", name="check_user_role"),
        sa.CheckConstraint("status IN ('active', 'deactivated')", name="check_user_status"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_public_id", "users", ["public_id"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Providers table
    op.create_table(
        "providers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _public_id(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("company_logo_path", sa.String(500), nullable=True),
        sa.Column("phone_number", sa.String(30), nullable=True),
        sa.Column("bank_name", sa.String(100), nullable=True),
        sa.Column("bank_account_number", sa.String(50), nullable=True),
        sa.Column("bank_account_name", sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_providers_id", "providers", ["id"])
    op.create_index("ix_providers_public_id", "providers", ["public_id"], unique=True)

    # Trips table
    op.create_table(
        "trips",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _public_id(),
        sa.Column("provider_id", sa.Integer(), sa.ForeignKey("providers.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.String(50), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("gathering_point_name", sa.String(255), nullable=True),
        sa.Column("gathering_point_url", sa.String(500), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount_price", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("max_participants", sa.Integer(), nullable=False),
        sa.Column("booked_participants", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("departure_time", sa.Time(), nullable=True),
        sa.Column("return_time", sa.Time(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'draft'")),
        sa.Column("approval_status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        # The booking transaction relies on these as the last line against overbooking
        sa.CheckConstraint("booked_participants >= 0", name="check_booked_participants_non_negative"),
        sa.CheckConstraint("max_participants > 0", name="check_max_participants_positive"),
        sa.CheckConstraint("booked_participants <= max_participants", name="check_booked_lte_max"),
        sa.CheckConstraint("price >= 0", name="check_price_non_negative"),
        sa.CheckConstraint("discount_price >= 0", name="check_discount_price_non_negative"),
        sa.CheckConstraint("status IN ('draft', 'published', 'closed')", name="check_trip_status"),
        sa.CheckConstraint(
            "approval_status IN ('pending', 'approved', 'rejected')", name="check_trip_approval_status"
        ),
    )
    op.create_index("ix_trips_id", "trips", ["id"])
    op.create_index("ix_trips_public_id", "trips", ["public_id"], unique=True)
    op.create_index("ix_trips_provider_id", "trips", ["provider_id"])
    op.create_index("ix_trips_location", "trips", ["location"])
    op.create_index("ix_trips_gathering_point_name", "trips", ["gathering_point_name"])
    # Every public read filters on these three; listing and booking hit it first
    op.create_index("ix_trips_bookable", "trips", ["status", "approval_status", "is_deleted"])

    # Bookings table
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _public_id(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("trip_id", sa.Integer(), sa.ForeignKey("trips.id"), nullable=False),
        sa.Column("num_of_people", sa.Integer(), nullable=False),
        sa.Column("total_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        *_timestamps(),
        sa.CheckConstraint("num_of_people > 0", name="check_booking_num_of_people_positive"),
        sa.CheckConstraint("total_price >= 0", name="check_booking_total_price_non_negative"),
        sa.CheckConstraint(
            "status IN ('pending', 'paid', 'confirmed', 'completed', 'cancelled')",
            name="check_booking_status",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_public_id", "bookings", ["public_id"], unique=True)
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_trip_id", "bookings", ["trip_id"])

    # Reviews table
    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _public_id(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("trip_id", sa.Integer(), sa.ForeignKey("trips.id"), nullable=False),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=False, unique=True),
        sa.Column("rating", sa.Numeric(2, 1), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="check_review_rating_range"),
    )
    op.create_index("ix_reviews_id", "reviews", ["id"])
    op.create_index("ix_reviews_public_id", "reviews", ["public_id"], unique=True)
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])
    op.create_index("ix_reviews_trip_id", "reviews", ["trip_id"])

    # Complaints table
    op.create_table(
        "complaints",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _public_id(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("trip_id", sa.Integer(), sa.ForeignKey("trips.id"), nullable=False),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'open'")),
        *_timestamps(),
        sa.CheckConstraint("status IN ('open', 'resolved')", name="check_complaint_status"),
    )
    op.create_index("ix_complaints_id", "complaints", ["id"])
    op.create_index("ix_complaints_public_id", "complaints", ["public_id"], unique=True)
    op.create_index("ix_complaints_user_id", "complaints", ["user_id"])
    op.create_index("ix_complaints_trip_id", "complaints", ["trip_id"])

    # Password reset codes
    op.create_table(
        "password_resets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("otp_code", sa.String(6), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_password_resets_id", "password_resets", ["id"])
    op.create_index("ix_password_resets_user_id", "password_resets", ["user_id"])


def downgrade() -> None:
    op.drop_table("password_resets")
    op.drop_table("complaints")
    op.drop_table("reviews")
    op.drop_table("bookings")
    op.drop_table("trips")
    op.drop_table("providers")
    op.drop_table("users")
