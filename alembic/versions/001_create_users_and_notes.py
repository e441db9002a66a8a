"""Create users, notes and note_shares tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema: accounts, notes, and per-email read grants.
How:   Portable column types (sa.Uuid, TIMESTAMP WITH TIME ZONE) so the same
       migration runs on PostgreSQL and SQLite.

Constraints carrying business rules:
    users.email                       UNIQUE  → "email already in use" under races
    notes.slug                        UNIQUE  → colliding slugs rejected by storage
    note_shares (note_id, email)      UNIQUE  → grants form a set per note
    notes.author_id → users.id        ON DELETE CASCADE
    note_shares.note_id → notes.id    ON DELETE CASCADE (deleting a note drops its grants)

Rollback: downgrade() drops all three tables (destructive — all data lost).
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
    """Create the three tables with their constraints and indexes."""
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column(
            "email",
            sa.String(320),
            nullable=False,
            comment="Login identifier, normalized to lower case",
        ),
        sa.Column("name", sa.String(200), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "password_hash",
            sa.String(255),
            nullable=False,
            comment="One-way password hash (passlib format)",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("author_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "slug",
            sa.String(320),
            nullable=True,
            comment="Set on public create and on every update",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("slug"),
    )

    # "List my notes, newest first" is served straight from this index
    op.create_index(
        "idx_notes_author_created_at",
        "notes",
        ["author_id", sa.text("created_at DESC")],
    )

    op.create_table(
        "note_shares",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("note_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["note_id"], ["notes.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("note_id", "email", name="uq_note_shares_note_email"),
    )

    # Slug lookups by a grantee probe (note_id, email); this serves "shared with me"
    op.create_index("idx_note_shares_email", "note_shares", ["email"])


def downgrade() -> None:
    """
    Drop every table, children first.

    WARNING: This is destructive — all account and note data will be permanently lost.
    """
    op.drop_index("idx_note_shares_email", table_name="note_shares")
    op.drop_table("note_shares")
    op.drop_index("idx_notes_author_created_at", table_name="notes")
    op.drop_table("notes")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
