"""Initial schema: customers, facilities, bookings and booking contracts.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False, server_default=""),
        sa.Column("company_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("address", sa.String(255), nullable=False, server_default=""),
        sa.Column("postal_code", sa.String(20), nullable=False, server_default=""),
        sa.Column("city", sa.String(100), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_customers_id", "customers", ["id"])
    # Emails are stored lower-cased, so this is case-insensitive uniqueness
    op.create_index("ix_customers_email", "customers", ["email"], unique=True)

    op.create_table(
        "facilities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(2000), nullable=False, server_default=""),
        sa.Column("address", sa.String(255), nullable=False),
        sa.Column("postal_code", sa.String(20), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("max_capacity", sa.Integer(), nullable=False),
        sa.Column("price_per_day", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint("max_capacity > 0", name="check_facility_capacity_positive"),
        sa.CheckConstraint("price_per_day >= 0", name="check_facility_price_non_negative"),
    )
    op.create_index("ix_facilities_id", "facilities", ["id"])
    # Serves GET /facilities/active ordered by name
    op.create_index("ix_facilities_active_name", "facilities", ["is_active", "name"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("facility_id", sa.Integer(), sa.ForeignKey("facilities.id"), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("number_of_participants", sa.Integer(), nullable=False),
        sa.Column("notes", sa.String(4000), nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("number_of_participants > 0", name="check_booking_participants_positive"),
        sa.CheckConstraint("end_date > start_date", name="check_booking_range"),
        sa.CheckConstraint("total_price >= 0", name="check_booking_price_non_negative"),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="check_booking_status",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_customer_id", "bookings", ["customer_id"])
    op.create_index("ix_bookings_facility_id", "bookings", ["facility_id"])
    # Covers the overlap check: facility_id = ? AND start_date < ? AND end_date > ?
    op.create_index("ix_bookings_facility_range", "bookings", ["facility_id", "start_date", "end_date"])

    if op.get_bind().dialect.name == "postgresql":
        # Storage-level guard: no two active bookings of one facility may overlap.
        # '[)' matches the half-open conflict rule of the booking service.
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            """
            ALTER TABLE bookings
            ADD CONSTRAINT ex_bookings_facility_no_overlap
            EXCLUDE USING gist (
                facility_id WITH =,
                tsrange(start_date, end_date, '[)') WITH &&
            )
            WHERE (status IN ('pending', 'confirmed'))
            """
        )

    op.create_table(
        "booking_contracts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("contract_number", sa.String(32), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'draft'")),
        sa.Column("terms", sa.Text(), nullable=False, server_default=""),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="SEK"),
        sa.Column("payment_due_date", sa.DateTime(), nullable=True),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=True),
        sa.Column("signed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancel_reason", sa.String(1000), nullable=True),
        sa.Column("customer_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("customer_email", sa.String(254), nullable=False, server_default=""),
        sa.Column("facility_name", sa.String(255), nullable=False, server_default=""),
        *_timestamps(),
        sa.CheckConstraint("version >= 1", name="check_contract_version_positive"),
        sa.CheckConstraint("total_amount >= 0", name="check_contract_amount_non_negative"),
        sa.CheckConstraint(
            "status IN ('draft', 'sent', 'signed', 'cancelled')",
            name="check_contract_status",
        ),
    )
    op.create_index("ix_booking_contracts_id", "booking_contracts", ["id"])
    op.create_index("ix_booking_contracts_booking_id", "booking_contracts", ["booking_id"], unique=True)
    op.create_index("ix_booking_contracts_contract_number", "booking_contracts", ["contract_number"])


def downgrade() -> None:
    op.drop_table("booking_contracts")
    op.drop_table("bookings")
    op.drop_table("facilities")
    op.drop_table("customers")
