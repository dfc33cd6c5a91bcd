"""create credentials

Revision ID: 3b7e1c0d9a42
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "3b7e1c0d9a42"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "credentials",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("learner_email", sa.String(length=320), nullable=False),
        sa.Column("course_name", sa.String(length=500), nullable=False),
        sa.Column("issuer_name", sa.String(length=500), nullable=False),
        sa.Column("issue_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ipfs_cid", sa.String(length=128), nullable=False, server_default=""),
        sa.Column(
            "blockchain_hash", sa.String(length=64), nullable=False, server_default=""
        ),
        sa.Column("verification_status", sa.String(length=32), nullable=False),
        sa.Column("ai_score", sa.Integer(), nullable=True),
        sa.Column("ai_is_valid", sa.Boolean(), nullable=True),
        sa.Column("ai_reasons", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("ai_validated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_credentials_blockchain_hash", "credentials", ["blockchain_hash"]
    )


def downgrade() -> None:
    op.drop_index("ix_credentials_blockchain_hash", table_name="credentials")
    op.drop_table("credentials")
