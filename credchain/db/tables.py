"""SQLAlchemy table definitions.

Rows map to the frozen dataclasses in credchain/models; the repos
convert between the two.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from credchain.db.engine import Base


class CredentialRow(Base):
    __tablename__ = "credentials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    learner_email: Mapped[str] = mapped_column(String(320), nullable=False)
    course_name: Mapped[str] = mapped_column(String(500), nullable=False)
    issuer_name: Mapped[str] = mapped_column(String(500), nullable=False)
    issue_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    ipfs_cid: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    blockchain_hash: Mapped[str] = mapped_column(
        String(64), nullable=False, default="", index=True
    )
    verification_status: Mapped[str] = mapped_column(
        String(32), nullable=False
    )  # Pending AI|Verified by AI|Rejected by AI|Verified on Blockchain

    # AI validation snapshot; all NULL when the record was added without one
    ai_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ai_is_valid: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    ai_reasons: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    ai_validated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
