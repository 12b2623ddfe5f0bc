"""create_recordings

Revision ID: 3f2a9c41d7e0
Revises:
Create Date: 2026-10-17 09:12:44.118305

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f2a9c41d7e0"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "recordings",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False),
        sa.Column("r2_key", sa.String(length=1024), nullable=True),
        sa.Column("transcript", sa.Text(), nullable=False),
        sa.Column("transcript_body", sa.Text(), nullable=True),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("language", sa.String(length=16), nullable=False),
        sa.Column("client_company", sa.Text(), nullable=True),
        sa.Column("client_person", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="recordings_pkey"),
    )
    op.create_index(
        "ix_recordings_user_id_created_at",
        "recordings",
        ["user_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_recordings_user_id_created_at", table_name="recordings")
    op.drop_table("recordings")
