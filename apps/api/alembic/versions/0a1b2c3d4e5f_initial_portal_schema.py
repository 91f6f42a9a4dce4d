"""initial portal schema

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-19 12:00:00.000000

Creates the portal tables:
1. users - admin, agent and student accounts
2. student_information - student profiles (pageStatus section)
3. applications - offer letter / GIC / course-fee requests (AP- ids)
4. companies - agent company registrations (AG- ids)
5. tickets - student support tickets (TK- ids)
6. sequence_counters - per-day counters behind the human-readable ids
7. withdrawals - bank and identity details for payouts, one row per user
8. documents - references to files users have uploaded

Every human-readable id column carries a named unique constraint; the
allocator relies on these names to recognise identifier collisions.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0a1b2c3d4e5f"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _base_columns() -> list[sa.Column]:
    """Primary key and timestamps (from BaseModel)."""
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create all portal tables."""
    user_role = postgresql.ENUM("ADMIN", "AGENT", "STUDENT", name="user_role", create_type=False)
    identifier_category = postgresql.ENUM(
        "APPLICATION", "AGENT", "TICKET", name="identifier_category", create_type=False
    )
    ticket_type = postgresql.ENUM(
        "General", "Technical", "Financial", name="ticket_type", create_type=False
    )
    ticket_priority = postgresql.ENUM("Normal", "Urgent", name="ticket_priority", create_type=False)

    bind = op.get_bind()
    for enum_type in (user_role, identifier_category, ticket_type, ticket_priority):
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default="false"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "student_information",
        *_base_columns(),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("agent_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("personal_information", postgresql.JSON(), nullable=False),
        sa.Column("residence", postgresql.JSON(none_as_null=True), nullable=True),
        sa.Column("preferences", postgresql.JSON(none_as_null=True), nullable=True),
        sa.Column("page_status", postgresql.JSON(), nullable=False),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["agent_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("student_id", name="uq_student_information_student_id"),
    )
    op.create_index("ix_student_information_agent_id", "student_information", ["agent_id"])

    op.create_table(
        "applications",
        *_base_columns(),
        sa.Column("application_id", sa.String(length=11), nullable=False),
        sa.Column("student_information_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("offer_letter", postgresql.JSON(none_as_null=True), nullable=True),
        sa.Column("gic", postgresql.JSON(none_as_null=True), nullable=True),
        sa.Column("course_fee", postgresql.JSON(none_as_null=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["student_information_id"], ["student_information.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("application_id", name="uq_applications_application_id"),
    )
    op.create_index(
        "ix_applications_student_information_id", "applications", ["student_information_id"]
    )
    op.create_index("ix_applications_user_id", "applications", ["user_id"])

    op.create_table(
        "companies",
        *_base_columns(),
        sa.Column("agent_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("ag_id", sa.String(length=11), nullable=True),
        sa.Column("company_details", postgresql.JSON(none_as_null=True), nullable=True),
        sa.Column("primary_contact", postgresql.JSON(none_as_null=True), nullable=True),
        sa.Column("bank_details", postgresql.JSON(none_as_null=True), nullable=True),
        sa.Column("company_operations", postgresql.JSON(none_as_null=True), nullable=True),
        sa.Column("references", postgresql.JSON(none_as_null=True), nullable=True),
        sa.Column("page_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("page_status", postgresql.JSON(), nullable=False),
        sa.ForeignKeyConstraint(["agent_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("agent_id"),
        sa.UniqueConstraint("ag_id", name="uq_companies_ag_id"),
    )

    op.create_table(
        "tickets",
        *_base_columns(),
        sa.Column("ticket_id", sa.String(length=11), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("ticket_type", ticket_type, nullable=False),
        sa.Column("priority", ticket_priority, nullable=False, server_default="Normal"),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("payment", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("ticket_status", postgresql.JSON(), nullable=False),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("ticket_id", name="uq_tickets_ticket_id"),
    )
    op.create_index("ix_tickets_student_id", "tickets", ["student_id"])

    op.create_table(
        "withdrawals",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("bank_details", postgresql.JSON(), nullable=False),
        sa.Column("document_upload", postgresql.JSON(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", name="uq_withdrawals_user_id"),
    )

    op.create_table(
        "documents",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("document_name", sa.String(length=200), nullable=False),
        sa.Column("view_url", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_documents_user_id", "documents", ["user_id"])

    op.create_table(
        "sequence_counters",
        sa.Column("category", identifier_category, nullable=False),
        sa.Column("date_stamp", sa.String(length=6), nullable=False),
        sa.Column("last_sequence", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("category", "date_stamp"),
        sa.CheckConstraint("last_sequence >= 1", name="ck_sequence_counters_positive"),
    )


def downgrade() -> None:
    """Drop all portal tables and enum types."""
    op.drop_table("sequence_counters")
    op.drop_index("ix_documents_user_id", table_name="documents")
    op.drop_table("documents")
    op.drop_table("withdrawals")
    op.drop_index("ix_tickets_student_id", table_name="tickets")
    op.drop_table("tickets")
    op.drop_table("companies")
    op.drop_index("ix_applications_user_id", table_name="applications")
    op.drop_index("ix_applications_student_information_id", table_name="applications")
    op.drop_table("applications")
    op.drop_index("ix_student_information_agent_id", table_name="student_information")
    op.drop_table("student_information")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    for name in ("ticket_priority", "ticket_type", "identifier_category", "user_role"):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
