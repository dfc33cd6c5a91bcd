"""Credential listing and public verification endpoints.

- GET /credentials: dashboard listing, newest first
- GET /credentials/{id}: single credential (public verification page)
- GET /credentials/{id}/qr: PNG QR code of the credential's blockchain hash

JSON keys are camelCase to match what the dashboard consumes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from credchain.api.dependencies import get_credential_repo
from credchain.models.credential import CredentialRecord
from credchain.repos.credential_repo import CredentialRepo
from credchain.services.qr import qr_png

router = APIRouter(prefix="/credentials", tags=["credentials"])


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AIValidationOut(CamelModel):
    score: int
    is_valid: bool
    reasons: list[str]
    timestamp: datetime


class CredentialOut(CamelModel):
    id: str
    learner_email: str
    course_name: str
    issuer_name: str
    issue_date: datetime
    ipfs_cid: str
    blockchain_hash: str
    verification_status: str
    ai_validation: AIValidationOut | None = None
    verified: bool

    @classmethod
    def from_record(cls, record: CredentialRecord) -> CredentialOut:
        ai = record.ai_validation
        return cls(
            id=record.id,
            learner_email=record.learner_email,
            course_name=record.course_name,
            issuer_name=record.issuer_name,
            issue_date=record.issue_date,
            ipfs_cid=record.ipfs_cid,
            blockchain_hash=record.blockchain_hash,
            verification_status=record.verification_status.value,
            ai_validation=(
                AIValidationOut(
                    score=ai.score,
                    is_valid=ai.is_valid,
                    reasons=list(ai.reasons),
                    timestamp=ai.timestamp,
                )
                if ai is not None
                else None
            ),
            verified=record.verified,
        )


class CredentialListOut(CamelModel):
    credentials: list[CredentialOut]


class CredentialDetailOut(CamelModel):
    credential: CredentialOut


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Not found"})


@router.get("", response_model=CredentialListOut)
async def list_credentials(
    repo: Annotated[CredentialRepo, Depends(get_credential_repo)],
) -> CredentialListOut:
    records = await repo.list_all()
    return CredentialListOut(
        credentials=[CredentialOut.from_record(r) for r in records]
    )


@router.get(
    "/{credential_id}",
    response_model=CredentialDetailOut,
    responses={404: {"description": "Not found"}},
)
async def get_credential(
    credential_id: str,
    repo: Annotated[CredentialRepo, Depends(get_credential_repo)],
):
    record = await repo.get_by_id(credential_id)
    if record is None:
        return _not_found()
    return CredentialDetailOut(credential=CredentialOut.from_record(record))


@router.get(
    "/{credential_id}/qr",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}},
        404: {"description": "Not found"},
        409: {"description": "Credential was never anchored"},
    },
)
async def get_credential_qr(
    credential_id: str,
    repo: Annotated[CredentialRepo, Depends(get_credential_repo)],
) -> Response:
    record = await repo.get_by_id(credential_id)
    if record is None:
        return _not_found()
    if not record.blockchain_hash:
        return JSONResponse(
            status_code=409, content={"error": "Credential has no blockchain hash"}
        )
    return Response(content=qr_png(record.blockchain_hash), media_type="image/png")
