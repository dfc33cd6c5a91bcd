"""PostgreSQL implementation of CredentialRepo."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from credchain.db.tables import CredentialRow
from credchain.models.credential import (
    AIValidation,
    CredentialRecord,
    VerificationStatus,
)
from credchain.models.submission import SubmissionMetadata
from credchain.models.validation import ValidationSummary
from credchain.repos.credential_repo import new_record

_MAX_PK = 2**31 - 1


class PgCredentialRepo:
    """Satisfies the CredentialRepo Protocol using PostgreSQL via SQLAlchemy.

    Ids come from the table's serial key, so they keep increasing across
    restarts instead of starting over at 1.
    """

    def __init__(
        self, session: AsyncSession, *, strict_verification: bool = False
    ) -> None:
        self._session = session
        self._strict = strict_verification

    async def add(
        self,
        metadata: SubmissionMetadata,
        validation: ValidationSummary | None = None,
    ) -> CredentialRecord:
        draft = new_record("", metadata, validation)
        ai = draft.ai_validation
        row = CredentialRow(
            learner_email=draft.learner_email,
            course_name=draft.course_name,
            issuer_name=draft.issuer_name,
            issue_date=draft.issue_date,
            ipfs_cid=draft.ipfs_cid,
            blockchain_hash=draft.blockchain_hash,
            verification_status=draft.verification_status.value,
            ai_score=ai.score if ai else None,
            ai_is_valid=ai.is_valid if ai else None,
            ai_reasons=list(ai.reasons) if ai else None,
            ai_validated_at=ai.timestamp if ai else None,
        )
        self._session.add(row)
        await self._session.flush()
        return replace(draft, id=str(row.id))

    async def list_all(self) -> list[CredentialRecord]:
        stmt = select(CredentialRow).order_by(CredentialRow.id.desc())
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_record(row) for row in rows]

    async def get_by_id(self, credential_id: str) -> CredentialRecord | None:
        pk = _parse_id(credential_id)
        if pk is None:
            return None
        row = await self._session.get(CredentialRow, pk)
        if row is None:
            return None
        return _row_to_record(row)

    async def verify_by_id(self, credential_id: str) -> bool:
        pk = _parse_id(credential_id)
        if pk is None:
            return False
        return await self._transition(CredentialRow.id == pk)

    async def verify_by_hash(self, blockchain_hash: str) -> bool:
        if not blockchain_hash:
            return False
        return await self._transition(CredentialRow.blockchain_hash == blockchain_hash)

    async def _transition(self, where) -> bool:
        stmt = (
            update(CredentialRow)
            .where(where)
            .values(verification_status=VerificationStatus.VERIFIED_ON_CHAIN.value)
        )
        if self._strict:
            stmt = stmt.where(CredentialRow.blockchain_hash != "")
        result = await self._session.execute(stmt)
        return result.rowcount > 0


def _parse_id(credential_id: str) -> int | None:
    # ids are the Integer primary key: plain ASCII digits within int4
    if not (credential_id.isascii() and credential_id.isdecimal()):
        return None
    pk = int(credential_id)
    if not 1 <= pk <= _MAX_PK:
        return None
    return pk


def _row_to_record(row: CredentialRow) -> CredentialRecord:
    ai_validation = None
    if row.ai_score is not None:
        ai_validation = AIValidation(
            score=row.ai_score,
            is_valid=bool(row.ai_is_valid),
            reasons=tuple(row.ai_reasons or ()),
            timestamp=row.ai_validated_at or row.issue_date,
        )
    return CredentialRecord(
        id=str(row.id),
        learner_email=row.learner_email,
        course_name=row.course_name,
        issuer_name=row.issuer_name,
        issue_date=row.issue_date,
        ipfs_cid=row.ipfs_cid,
        blockchain_hash=row.blockchain_hash,
        verification_status=VerificationStatus(row.verification_status),
        ai_validation=ai_validation,
    )
