"""Certificate registration workflow.

pre-check → full validation → one registry insert.

The insert happens only after validation has finished, so a failure
anywhere before it leaves nothing behind in the registry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from credchain.core.metrics import VALIDATION_SCORE, VALIDATIONS
from credchain.models.credential import CredentialRecord
from credchain.models.submission import DocumentFile, SubmissionMetadata
from credchain.models.validation import ValidationResult
from credchain.repos.credential_repo import CredentialRepo
from credchain.services.validator import DocumentValidator, quick_validate

logger = logging.getLogger(__name__)


class SubmissionPrecheckError(ValueError):
    """Metadata failed the cheap pre-check; nothing was validated or stored."""


@dataclass(frozen=True, slots=True)
class RegistrationOutcome:
    result: ValidationResult
    record: CredentialRecord

    @property
    def accepted(self) -> bool:
        return self.result.is_valid


async def register_submission(
    repo: CredentialRepo,
    validator: DocumentValidator,
    file: DocumentFile,
    metadata: SubmissionMetadata,
) -> RegistrationOutcome:
    precheck = quick_validate(metadata)
    if not precheck.valid:
        VALIDATIONS.labels(outcome="precheck_failed").inc()
        logger.warning("Pre-check rejected submission: %s", precheck.message)
        raise SubmissionPrecheckError(precheck.message)

    result = await validator.validate(file, metadata)
    record = await repo.add(metadata, result.summary())

    VALIDATIONS.labels(outcome="passed" if result.is_valid else "rejected").inc()
    VALIDATION_SCORE.observe(result.score)
    logger.info(
        "Registered credential id=%s score=%d status=%s",
        record.id,
        result.score,
        record.verification_status.value,
        extra={"credential_id": record.id, "validation_score": result.score},
    )
    return RegistrationOutcome(result=result, record=record)
