"""Create users, journal_entries and country_status tables

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Initial schema. Mirrors travel_journal/models/*.py.
Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "journal_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("country_code", sa.String(16), nullable=False),
        sa.Column("country_name", sa.String(255), nullable=False),
        # NULL/blank text never reaches this table; status-only writes skip it
        sa.Column("entry", sa.Text(), nullable=True),
        sa.Column(
            "visit_status",
            sa.String(50),
            server_default=sa.text("'not-visited'"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_journal_entries_user_created",
        "journal_entries",
        ["user_id", sa.text("created_at DESC")],
    )
    op.create_index(
        "idx_journal_entries_user_country",
        "journal_entries",
        ["user_id", "country_code"],
    )

    op.create_table(
        "country_status",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("country_code", sa.String(16), nullable=False),
        sa.Column("country_name", sa.String(255), nullable=False),
        sa.Column(
            "visit_status",
            sa.String(50),
            server_default=sa.text("'not-visited'"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        # One status per country per user
        sa.UniqueConstraint("user_id", "country_code", name="uq_country_status_user_country"),
    )


def downgrade() -> None:
    op.drop_table("country_status")
    op.drop_index("idx_journal_entries_user_country", table_name="journal_entries")
    op.drop_index("idx_journal_entries_user_created", table_name="journal_entries")
    op.drop_table("journal_entries")
    op.drop_table("users")
