from alembic import op
import sqlalchemy as sa

revision = "5c2f8a91d4e7"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("email", sa.String, nullable=False, unique=True),
        sa.Column("full_name", sa.String, nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="tenant"),
        sa.Column("phone_number", sa.String(32)),
        sa.Column("profile_pic", sa.String, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.current_timestamp()),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        if_not_exists=True,
    )
    op.create_table(
        "properties",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("landlord_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, server_default=""),
        sa.Column("address", sa.String(255), server_default=""),
        sa.Column("price", sa.Numeric(10, 2), server_default="0"),
        sa.Column("total_units", sa.Integer, nullable=False, server_default="1"),
        sa.Column("available_units", sa.Integer, nullable=False, server_default="1"),
        sa.Column("availability_status", sa.String(20), nullable=False, server_default="Available"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint("total_units >= 0", name="ck_properties_total_units_non_negative"),
    )
    op.create_index("ix_properties_landlord_id", "properties", ["landlord_id"])
    op.create_index("ix_properties_availability_status", "properties", ["availability_status"])

    op.create_table(
        "applications",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("property_id", sa.Uuid, sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("tenant_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("landlord_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="Pending"),
        sa.Column("message", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("acted_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_applications_created_at", "applications", ["created_at"])
    op.create_index("ix_applications_property_status", "applications", ["property_id", "status"])
    op.create_index(
        "uq_applications_pending_pair",
        "applications",
        ["tenant_id", "property_id"],
        unique=True,
        postgresql_where=sa.text("status = 'Pending'"),
        sqlite_where=sa.text("status = 'Pending'"),
    )

def downgrade():
    op.drop_table("applications")
    op.drop_table("properties")
    # users belongs to the user-management service; leave it in place
