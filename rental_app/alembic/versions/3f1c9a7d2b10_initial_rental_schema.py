"""initial rental schema

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 09:12:41.503117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from geoalchemy2 import Geography


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _money():
    return sa.Numeric(12, 2)


def upgrade():
    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("address", sa.String(255), nullable=False),
        sa.Column("city", sa.String(120), nullable=False),
        sa.Column("state", sa.String(120), nullable=False),
        sa.Column("country", sa.String(120), nullable=False),
        sa.Column("postal_code", sa.String(20), nullable=False),
        sa.Column(
            "coordinates",
            Geography(geometry_type="POINT", srid=4326, spatial_index=False),
            nullable=False,
        ),
    )
    op.create_index(
        "idx_locations_coordinates",
        "locations",
        ["coordinates"],
        postgresql_using="gist",
    )

    op.create_table(
        "managers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("cognito_id", sa.String(128), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(32), nullable=True),
    )
    op.create_index("ix_managers_cognito_id", "managers", ["cognito_id"], unique=True)

    op.create_table(
        "tenants",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("cognito_id", sa.String(128), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("balance", _money(), nullable=False, server_default="0"),
        sa.Column("is_suspended", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_tenants_cognito_id", "tenants", ["cognito_id"], unique=True)

    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price_per_month", _money(), nullable=False),
        sa.Column("security_deposit", _money(), nullable=False),
        sa.Column("application_fee", _money(), nullable=False),
        sa.Column("photo_urls", sa.JSON(), nullable=False),
        sa.Column("amenities", sa.JSON(), nullable=False),
        sa.Column("highlights", sa.JSON(), nullable=False),
        sa.Column("is_pets_allowed", sa.Boolean(), nullable=True),
        sa.Column("is_parking_included", sa.Boolean(), nullable=True),
        sa.Column("beds", sa.Integer(), nullable=False),
        sa.Column("baths", sa.Float(), nullable=False),
        sa.Column("square_feet", sa.Integer(), nullable=False),
        sa.Column("property_type", sa.String(32), nullable=False),
        sa.Column(
            "posted_date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("average_rating", sa.Float(), nullable=True),
        sa.Column("number_of_reviews", sa.Integer(), nullable=True),
        sa.Column(
            "location_id",
            sa.Integer(),
            sa.ForeignKey("locations.id", ondelete="RESTRICT"),
            nullable=False,
            unique=True,
        ),
        sa.Column(
            "manager_cognito_id",
            sa.String(128),
            sa.ForeignKey("managers.cognito_id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_index("ix_properties_price_per_month", "properties", ["price_per_month"])
    op.create_index("ix_properties_beds", "properties", ["beds"])
    op.create_index("ix_properties_property_type", "properties", ["property_type"])
    op.create_index(
        "ix_properties_manager_cognito_id", "properties", ["manager_cognito_id"]
    )

    op.create_table(
        "leases",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("rent", _money(), nullable=False),
        sa.Column("deposit", _money(), nullable=False),
        sa.Column(
            "property_id",
            sa.Integer(),
            sa.ForeignKey("properties.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "tenant_cognito_id",
            sa.String(128),
            sa.ForeignKey("tenants.cognito_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("agreement_path", sa.String(512), nullable=True),
    )
    op.create_index("ix_leases_property_id", "leases", ["property_id"])
    op.create_index("ix_leases_tenant_cognito_id", "leases", ["tenant_cognito_id"])

    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("application_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column(
            "property_id",
            sa.Integer(),
            sa.ForeignKey("properties.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "tenant_cognito_id",
            sa.String(128),
            sa.ForeignKey("tenants.cognito_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(32), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column(
            "lease_id",
            sa.Integer(),
            sa.ForeignKey("leases.id", ondelete="SET NULL"),
            nullable=True,
            unique=True,
        ),
    )
    op.create_index("ix_applications_status", "applications", ["status"])
    op.create_index("ix_applications_property_id", "applications", ["property_id"])
    op.create_index(
        "ix_applications_tenant_cognito_id", "applications", ["tenant_cognito_id"]
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("amount_due", _money(), nullable=False),
        sa.Column("amount_paid", _money(), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payment_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payment_status", sa.String(32), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("receipt_path", sa.String(512), nullable=True),
        sa.Column("destination", sa.String(255), nullable=True),
        sa.Column(
            "lease_id",
            sa.Integer(),
            sa.ForeignKey("leases.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "tenant_cognito_id",
            sa.String(128),
            sa.ForeignKey("tenants.cognito_id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_index("ix_payments_payment_status", "payments", ["payment_status"])
    op.create_index("ix_payments_type", "payments", ["type"])
    op.create_index("ix_payments_lease_id", "payments", ["lease_id"])
    op.create_index("ix_payments_tenant_cognito_id", "payments", ["tenant_cognito_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("recipient_cognito_id", sa.String(128), nullable=False),
        sa.Column("kind", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_notifications_recipient_cognito_id",
        "notifications",
        ["recipient_cognito_id"],
    )
    op.create_index("ix_notifications_kind", "notifications", ["kind"])

    for association in ("tenant_favorites", "tenant_properties"):
        op.create_table(
            association,
            sa.Column(
                "tenant_id",
                sa.Integer(),
                sa.ForeignKey("tenants.id", ondelete="CASCADE"),
                primary_key=True,
            ),
            sa.Column(
                "property_id",
                sa.Integer(),
                sa.ForeignKey("properties.id", ondelete="CASCADE"),
                primary_key=True,
            ),
        )


def downgrade():
    op.drop_table("tenant_properties")
    op.drop_table("tenant_favorites")
    op.drop_table("notifications")
    op.drop_table("payments")
    op.drop_table("applications")
    op.drop_table("leases")
    op.drop_table("properties")
    op.drop_table("tenants")
    op.drop_table("managers")
    op.drop_index("idx_locations_coordinates", table_name="locations")
    op.drop_table("locations")
