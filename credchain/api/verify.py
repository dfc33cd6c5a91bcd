"""Verify-on-blockchain endpoint.

POST /verify  {"id": "3"}  or  {"hash": "<blockchainHash>"}

Moves the matching record to "Verified on Blockchain".  A non-empty id
wins; the hash is used only when the id is missing, "" or 0.  Unknown ids
or hashes answer {"success": false} with a 200, never a 404.  A boolean
id fails request validation.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, StrictInt, StrictStr

from credchain.api.dependencies import get_credential_repo
from credchain.core.metrics import CHAIN_VERIFICATIONS
from credchain.repos.credential_repo import CredentialRepo

logger = logging.getLogger(__name__)

router = APIRouter(tags=["verify"])


class VerifyIn(BaseModel):
    id: StrictStr | StrictInt | None = None
    hash: str | None = None


class VerifyOut(BaseModel):
    success: bool


@router.post("/verify", response_model=VerifyOut)
async def verify_on_chain(
    body: VerifyIn,
    repo: Annotated[CredentialRepo, Depends(get_credential_repo)],
) -> VerifyOut:
    if body.id:
        lookup = "id"
        ok = await repo.verify_by_id(str(body.id))
    elif body.hash:
        lookup = "hash"
        ok = await repo.verify_by_hash(body.hash)
    else:
        lookup = "none"
        ok = False

    CHAIN_VERIFICATIONS.labels(
        lookup=lookup, result="verified" if ok else "not_found"
    ).inc()
    if ok:
        logger.info("Credential verified on chain via %s", lookup)
    else:
        logger.info("Chain verification found no match via %s", lookup)
    return VerifyOut(success=ok)
