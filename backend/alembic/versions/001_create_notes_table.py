"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2026-02-21 00:00:00.000000+00:00

What:  Creates the `notes` table and its created_at DESC index.
Rollback: downgrade() drops the table (all notes are lost).
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
        "notes",
        # Assigned by the service as a UUID string; no server default
        sa.Column(
            "id",
            sa.String(36),
            nullable=False,
            comment="Note identifier (UUID string) assigned by the service",
        ),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            comment="Trimmed, non-blank note text",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="When this note was created (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Serves GET /notes (ORDER BY created_at DESC)
    op.create_index(
        "idx_notes_created_at",
        "notes",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_notes_created_at", table_name="notes")
    op.drop_table("notes")
