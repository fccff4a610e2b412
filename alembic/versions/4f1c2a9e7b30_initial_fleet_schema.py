"""initial fleet schema

Revision ID: 4f1c2a9e7b30
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa


revision = "4f1c2a9e7b30"
down_revision = None
branch_labels = None
depends_on = None


fleet_status = sa.Enum("active", "empty", name="truck_status")
trailer_status = sa.Enum("active", "empty", name="trailer_status")
trailer_type = sa.Enum(
    "Box", "Flatbed", "Curtainside", "TIR Box", "TIR BL", "Balmer", "Reefer", "Reefer TIR",
    name="trailer_type",
)
trailer_color = sa.Enum(
    "red", "blue", "white", "black", "silver", "orange", "yellow", name="trailer_color"
)
driver_status = sa.Enum("active", "vacation", "cancelled", name="driver_status")
shipment_status = sa.Enum("waiting", "submitted", name="shipment_status")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("short_name", sa.String(100), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_companies_code", "companies", ["code"], unique=True)

    op.create_table(
        "trucks",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("truck_number", sa.String(50), nullable=False),
        sa.Column("type", sa.String(100), nullable=False),
        sa.Column("model", sa.Integer(), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=False),
        sa.Column("status", fleet_status, nullable=False),
        sa.Column("vg_id", sa.String(100), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("tracking_link", sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_trucks_truck_number", "trucks", ["truck_number"], unique=True)
    op.create_index("ix_trucks_status", "trucks", ["status"])

    op.create_table(
        "trailers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("trailer_number", sa.String(50), nullable=False),
        sa.Column("type", trailer_type, nullable=False),
        sa.Column("model", sa.Integer(), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=False),
        sa.Column("status", trailer_status, nullable=False),
        sa.Column("color", trailer_color, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_trailers_trailer_number", "trailers", ["trailer_number"], unique=True)
    op.create_index("ix_trailers_status", "trailers", ["status"])

    # No unique index on truck_id / trailer_id: exclusivity is kept by the application
    op.create_table(
        "drivers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("full_name", sa.String(150), nullable=False),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("gatepass", sa.Date(), nullable=True),
        sa.Column("waqala", sa.Date(), nullable=True),
        sa.Column("truck_id", sa.String(36), sa.ForeignKey("trucks.id", ondelete="SET NULL"), nullable=True),
        sa.Column("trailer_id", sa.String(36), sa.ForeignKey("trailers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("company_id", sa.String(36), sa.ForeignKey("companies.id", ondelete="SET NULL"), nullable=True),
        sa.Column("status", driver_status, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_drivers_code", "drivers", ["code"], unique=True)
    op.create_index("ix_drivers_truck_id", "drivers", ["truck_id"])
    op.create_index("ix_drivers_trailer_id", "drivers", ["trailer_id"])
    op.create_index("ix_drivers_status", "drivers", ["status"])

    op.create_table(
        "shipments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("doc_no", sa.String(50), nullable=False),
        sa.Column("loading_date", sa.Date(), nullable=False),
        sa.Column("driver_id", sa.String(36), sa.ForeignKey("drivers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("truck_id", sa.String(36), sa.ForeignKey("trucks.id", ondelete="SET NULL"), nullable=True),
        sa.Column("trailer_id", sa.String(36), sa.ForeignKey("trailers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("company_id", sa.String(36), sa.ForeignKey("companies.id"), nullable=False),
        sa.Column("customer_id", sa.String(36), nullable=True),
        sa.Column("origin", sa.String(200), nullable=False),
        sa.Column("destination", sa.String(200), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("gross_weight", sa.Numeric(12, 3), nullable=True),
        sa.Column("net_weight", sa.Numeric(12, 3), nullable=True),
        sa.Column("status", shipment_status, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_shipments_doc_no", "shipments", ["doc_no"], unique=True)
    op.create_index("ix_shipments_status", "shipments", ["status"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("entity_type", sa.String(100), nullable=False),
        sa.Column("entity_id", sa.String(36), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_index("ix_shipments_status", table_name="shipments")
    op.drop_index("ix_shipments_doc_no", table_name="shipments")
    op.drop_table("shipments")
    op.drop_index("ix_drivers_status", table_name="drivers")
    op.drop_index("ix_drivers_trailer_id", table_name="drivers")
    op.drop_index("ix_drivers_truck_id", table_name="drivers")
    op.drop_index("ix_drivers_code", table_name="drivers")
    op.drop_table("drivers")
    op.drop_index("ix_trailers_status", table_name="trailers")
    op.drop_index("ix_trailers_trailer_number", table_name="trailers")
    op.drop_table("trailers")
    op.drop_index("ix_trucks_status", table_name="trucks")
    op.drop_index("ix_trucks_truck_number", table_name="trucks")
    op.drop_table("trucks")
    op.drop_index("ix_companies_code", table_name="companies")
    op.drop_table("companies")

    bind = op.get_bind()
    for enum_type in (shipment_status, driver_status, trailer_color, trailer_type, trailer_status, fleet_status):
        enum_type.drop(bind, checkfirst=True)
