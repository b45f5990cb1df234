"""properties, compliance certificates, audit trail

Revision ID: 0001_initial
Revises:
Create Date: 2024-01-15 09:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "properties",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("client_id", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address_line1", sa.String(255), nullable=True),
        sa.Column("address_city", sa.String(100), nullable=True),
        sa.Column("postal_code", sa.String(20), nullable=True),
        sa.Column("jurisdiction_code", sa.String(8), nullable=False),
        sa.Column("classification", sa.String(30), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_properties_client_id", "properties", ["client_id"])
    op.create_index("ix_properties_name", "properties", ["name"])
    op.create_index("ix_properties_jurisdiction_code", "properties", ["jurisdiction_code"])

    op.create_table(
        "compliance_certificates",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("client_id", sa.String(100), nullable=False),
        sa.Column(
            "property_id",
            sa.String(36),
            sa.ForeignKey("properties.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("requirement_id", sa.String(100), nullable=False),
        sa.Column("jurisdiction_code", sa.String(8), nullable=True),
        sa.Column("issue_date", sa.Date, nullable=False),
        sa.Column("expiry_date", sa.Date, nullable=True),
        sa.Column("certificate_number", sa.String(100), nullable=True),
        sa.Column("contractor", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("superseded_by_id", sa.String(36), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_compliance_certificates_client_id", "compliance_certificates", ["client_id"])
    op.create_index("ix_compliance_certificates_property_id", "compliance_certificates", ["property_id"])
    op.create_index("ix_compliance_certificates_expiry_date", "compliance_certificates", ["expiry_date"])
    op.create_index(
        "ix_certificates_property_requirement",
        "compliance_certificates",
        ["property_id", "requirement_id"],
    )

    op.create_table(
        "audit_trail",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("client_id", sa.String(100), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=True),
        sa.Column("ip_address", sa.String(50), nullable=True),
        sa.Column("user_agent", sa.String(512), nullable=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("entity_type", sa.String(100), nullable=False),
        sa.Column("entity_id", sa.String(36), nullable=True),
        sa.Column("old_value", sa.JSON, nullable=True),
        sa.Column("new_value", sa.JSON, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    for column in ("client_id", "user_id", "action", "entity_type", "entity_id", "created_at"):
        op.create_index(f"ix_audit_trail_{column}", "audit_trail", [column])


def downgrade() -> None:
    op.drop_table("audit_trail")
    op.drop_table("compliance_certificates")
    op.drop_table("properties")
