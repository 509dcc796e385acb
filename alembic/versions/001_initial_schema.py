"""Initial schema - locations, employees, ratings, certification_audit.

Revision ID: 001
Revises:
Create Date: 2025-11-03

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "locations",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("org_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("location_number", sa.Text(), nullable=True),
        sa.Column(
            "certification_enabled",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
    )

    op.create_table(
        "employees",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("org_id", sa.UUID(), nullable=False),
        sa.Column("location_id", sa.UUID(), sa.ForeignKey("locations.id"), nullable=False),
        sa.Column("first_name", sa.Text(), nullable=False),
        sa.Column("last_name", sa.Text(), nullable=True),
        sa.Column("full_name", sa.Text(), nullable=True),
        sa.Column("role", sa.Text(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "certified_status",
            sa.String(20),
            nullable=False,
            server_default="Not Certified",
        ),
        sa.CheckConstraint(
            "certified_status IN ('Not Certified', 'Pending', 'Certified', 'PIP')",
            name="ck_employees_certified_status",
        ),
    )
    op.create_index("ix_employees_location_active", "employees", ["location_id", "active"])

    op.create_table(
        "ratings",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("employee_id", sa.UUID(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("location_id", sa.UUID(), sa.ForeignKey("locations.id"), nullable=False),
        sa.Column("org_id", sa.UUID(), nullable=False),
        sa.Column("position", sa.Text(), nullable=False),
        sa.Column("rating_avg", sa.Float(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index("ix_ratings_employee_created", "ratings", ["employee_id", "created_at"])

    op.create_table(
        "certification_audit",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("employee_id", sa.UUID(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("employee_name", sa.Text(), nullable=True),
        sa.Column("org_id", sa.UUID(), nullable=False),
        sa.Column("location_id", sa.UUID(), sa.ForeignKey("locations.id"), nullable=False),
        sa.Column("audit_date", sa.Date(), nullable=False),
        sa.Column("status_before", sa.String(20), nullable=False),
        sa.Column("status_after", sa.String(20), nullable=False),
        sa.Column("all_positions_qualified", sa.Boolean(), nullable=False),
        sa.Column(
            "position_averages",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_certification_audit_employee_date",
        "certification_audit",
        ["employee_id", "audit_date"],
    )


def downgrade() -> None:
    op.drop_index("ix_certification_audit_employee_date", table_name="certification_audit")
    op.drop_table("certification_audit")
    op.drop_index("ix_ratings_employee_created", table_name="ratings")
    op.drop_table("ratings")
    op.drop_index("ix_employees_location_active", table_name="employees")
    op.drop_table("employees")
    op.drop_table("locations")
