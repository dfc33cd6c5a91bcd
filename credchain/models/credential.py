from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from credchain.models.validation import ValidationSummary


class VerificationStatus(str, Enum):
    """Lifecycle of a credential record.

    PENDING_AI ──▶ REJECTED_BY_AI
               └─▶ VERIFIED_BY_AI ──▶ VERIFIED_ON_CHAIN

    Values are the labels the dashboard shows.
    """

    PENDING_AI = "Pending AI"
    VERIFIED_BY_AI = "Verified by AI"
    REJECTED_BY_AI = "Rejected by AI"
    VERIFIED_ON_CHAIN = "Verified on Blockchain"


_VERIFIED_STATUSES = frozenset(
    {VerificationStatus.VERIFIED_BY_AI, VerificationStatus.VERIFIED_ON_CHAIN}
)


@dataclass(frozen=True, slots=True)
class AIValidation:
    """Snapshot of the validator's verdict, taken when the record was created."""

    score: int
    is_valid: bool
    reasons: tuple[str, ...]
    timestamp: datetime

    @staticmethod
    def from_summary(summary: ValidationSummary, *, at: datetime) -> AIValidation:
        return AIValidation(
            score=summary.score,
            is_valid=summary.is_valid,
            reasons=tuple(summary.reasons),
            timestamp=at,
        )


@dataclass(frozen=True, slots=True)
class CredentialRecord:
    id: str
    learner_email: str
    course_name: str
    issuer_name: str
    issue_date: datetime
    ipfs_cid: str  # "" unless validation passed
    blockchain_hash: str  # "" unless validation passed
    verification_status: VerificationStatus
    ai_validation: AIValidation | None = None

    @property
    def verified(self) -> bool:
        return self.verification_status in _VERIFIED_STATUSES

    @property
    def is_anchored(self) -> bool:
        return bool(self.ipfs_cid and self.blockchain_hash)

    def can_verify_on_chain(self, *, strict: bool) -> bool:
        # Permissive mode accepts any status, including REJECTED_BY_AI.
        return self.is_anchored or not strict

    def on_chain(self) -> CredentialRecord:
        """The only transition a stored record ever takes."""
        return replace(self, verification_status=VerificationStatus.VERIFIED_ON_CHAIN)
