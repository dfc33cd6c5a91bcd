from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Protocol

from credchain.models.credential import (
    AIValidation,
    CredentialRecord,
    VerificationStatus,
)
from credchain.models.submission import SubmissionMetadata
from credchain.models.validation import ValidationSummary
from credchain.services.anchoring import anchor_submission


class CredentialRepo(Protocol):
    async def add(
        self,
        metadata: SubmissionMetadata,
        validation: ValidationSummary | None = None,
    ) -> CredentialRecord: ...
    async def list_all(self) -> list[CredentialRecord]: ...
    async def get_by_id(self, credential_id: str) -> CredentialRecord | None: ...
    async def verify_by_id(self, credential_id: str) -> bool: ...
    async def verify_by_hash(self, blockchain_hash: str) -> bool: ...


def new_record(
    credential_id: str,
    metadata: SubmissionMetadata,
    validation: ValidationSummary | None = None,
    *,
    now: datetime | None = None,
) -> CredentialRecord:
    """Build a record, deriving status and anchoring fields from the validation.

    Anchoring identifiers are generated only for a passing validation.
    """
    issue_date = now or datetime.now(timezone.utc)

    if validation is None:
        status = VerificationStatus.PENDING_AI
    elif validation.is_valid:
        status = VerificationStatus.VERIFIED_BY_AI
    else:
        status = VerificationStatus.REJECTED_BY_AI

    ipfs_cid = blockchain_hash = ""
    if validation is not None and validation.is_valid:
        anchor = anchor_submission(metadata, issue_date)
        ipfs_cid, blockchain_hash = anchor.ipfs_cid, anchor.blockchain_hash

    return CredentialRecord(
        id=credential_id,
        learner_email=metadata.learner_email,
        course_name=metadata.course_name,
        issuer_name=metadata.issuer_name,
        issue_date=issue_date,
        ipfs_cid=ipfs_cid,
        blockchain_hash=blockchain_hash,
        verification_status=status,
        ai_validation=(
            AIValidation.from_summary(validation, at=datetime.now(timezone.utc))
            if validation is not None
            else None
        ),
    )


class InMemoryCredentialRepo:
    """Process-local registry.  Resets on restart.

    Records are kept newest-first.  A lock serializes id allocation and
    status transitions so concurrent uploads cannot share an id.
    """

    def __init__(self, *, strict_verification: bool = False) -> None:
        self._strict = strict_verification
        self._lock = threading.Lock()
        self._next_id = 1
        self._records: list[CredentialRecord] = []

    async def add(
        self,
        metadata: SubmissionMetadata,
        validation: ValidationSummary | None = None,
    ) -> CredentialRecord:
        with self._lock:
            record = new_record(str(self._next_id), metadata, validation)
            self._next_id += 1
            self._records.insert(0, record)
        return record

    async def list_all(self) -> list[CredentialRecord]:
        with self._lock:
            return list(self._records)

    async def get_by_id(self, credential_id: str) -> CredentialRecord | None:
        with self._lock:
            return next((r for r in self._records if r.id == credential_id), None)

    async def verify_by_id(self, credential_id: str) -> bool:
        with self._lock:
            return self._transition(lambda r: r.id == credential_id)

    async def verify_by_hash(self, blockchain_hash: str) -> bool:
        if not blockchain_hash:
            return False
        with self._lock:
            return self._transition(lambda r: r.blockchain_hash == blockchain_hash)

    def _transition(self, match) -> bool:
        # caller holds self._lock
        for i, record in enumerate(self._records):
            if match(record):
                if not record.can_verify_on_chain(strict=self._strict):
                    return False
                self._records[i] = record.on_chain()
                return True
        return False
