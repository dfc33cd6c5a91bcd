"""Certificate upload endpoint.

POST /upload (multipart: learnerEmail, courseName, issuerName, certificate)

  400  missing field, or metadata pre-check failed
  422  validator rejected the document (a business outcome, not an error;
       the full diagnostics and the stored "Rejected by AI" record are
       returned so the institution UI can show why)
  200  accepted, record stored as "Verified by AI" with anchoring fields
  500  anything unexpected
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from credchain.api.credentials import CamelModel, CredentialOut
from credchain.api.dependencies import get_credential_repo, get_validator
from credchain.models.submission import DocumentFile, SubmissionMetadata
from credchain.models.validation import ValidationAnalysis
from credchain.repos.credential_repo import CredentialRepo
from credchain.services.registration import (
    SubmissionPrecheckError,
    register_submission,
)
from credchain.services.validator import PASS_THRESHOLD, DocumentValidator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])


class AnalysisOut(CamelModel):
    has_required_fields: bool
    content_quality: int
    format_compliance: int
    authenticity: int

    @classmethod
    def from_analysis(cls, analysis: ValidationAnalysis) -> AnalysisOut:
        return cls(
            has_required_fields=analysis.has_required_fields,
            content_quality=analysis.content_quality,
            format_compliance=analysis.format_compliance,
            authenticity=analysis.authenticity,
        )


class UploadOut(CamelModel):
    success: bool
    rejected: bool | None = None
    message: str
    validation_score: int
    reasons: list[str]
    analysis: AnalysisOut
    credential: CredentialOut


def _upload_size(upload: UploadFile) -> int:
    # The multipart parser counts bytes as it spools the part; the body
    # itself is never loaded.
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, 2)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


@router.post(
    "/upload",
    response_model=UploadOut,
    responses={
        400: {"description": "Missing fields or pre-check failed"},
        422: {"description": "Document rejected by the validator"},
        500: {"description": "Unexpected failure"},
    },
)
async def upload_certificate(
    repo: Annotated[CredentialRepo, Depends(get_credential_repo)],
    validator: Annotated[DocumentValidator, Depends(get_validator)],
    learner_email: Annotated[str, Form(alias="learnerEmail")] = "",
    course_name: Annotated[str, Form(alias="courseName")] = "",
    issuer_name: Annotated[str, Form(alias="issuerName")] = "",
    certificate: Annotated[UploadFile | None, File()] = None,
) -> JSONResponse:
    if not (learner_email and course_name and issuer_name and certificate):
        logger.warning("Upload rejected: missing fields")
        return JSONResponse(status_code=400, content={"error": "Missing fields"})

    try:
        file = DocumentFile(
            name=certificate.filename or "",
            mime_type=certificate.content_type or "",
            size_bytes=_upload_size(certificate),
        )
        metadata = SubmissionMetadata(
            learner_email=learner_email,
            course_name=course_name,
            issuer_name=issuer_name,
        )
        outcome = await register_submission(repo, validator, file, metadata)
    except SubmissionPrecheckError as e:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation failed",
                "message": str(e),
                "validationScore": 0,
            },
        )
    except Exception as e:
        logger.exception("Upload failed")
        return JSONResponse(
            status_code=500, content={"error": str(e) or "Server error"}
        )

    result = outcome.result
    if outcome.accepted:
        message = (
            f"Document validated successfully with score: {result.score}%. "
            "Uploaded to blockchain."
        )
    else:
        message = (
            f"Document validation failed. Score: {result.score}% "
            f"(minimum required: {PASS_THRESHOLD}%)"
        )

    body = UploadOut(
        success=outcome.accepted,
        rejected=None if outcome.accepted else True,
        message=message,
        validation_score=result.score,
        reasons=list(result.reasons),
        analysis=AnalysisOut.from_analysis(result.analysis),
        credential=CredentialOut.from_record(outcome.record),
    )
    return JSONResponse(
        status_code=200 if outcome.accepted else 422,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
