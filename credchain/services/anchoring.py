"""Simulated blockchain/IPFS anchoring identifiers.

Nothing here talks to a chain or an IPFS node.  The blockchain hash is a
salted SHA-256 over the submission metadata and issue date; the CID is
random hex behind a CIDv1-looking prefix and is not derived from the
file bytes.
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime

from credchain.models.submission import SubmissionMetadata

CID_PREFIX = "bafybei"
CID_SUFFIX = "xxxx"


@dataclass(frozen=True, slots=True)
class Anchor:
    ipfs_cid: str
    blockchain_hash: str


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def mock_ipfs_cid(random_hex: str | None = None) -> str:
    return f"{CID_PREFIX}{random_hex or secrets.token_hex(8)}{CID_SUFFIX}"


def blockchain_hash(
    metadata: SubmissionMetadata,
    issue_date: datetime,
    *,
    salt: str | None = None,
) -> str:
    """SHA-256 of email|course|issuer|issue_date|salt, hex-encoded.

    The random salt makes two identical submissions hash differently.
    """
    parts = (
        metadata.learner_email,
        metadata.course_name,
        metadata.issuer_name,
        issue_date.isoformat(),
        salt if salt is not None else secrets.token_hex(16),
    )
    return sha256_hex("|".join(parts))


def anchor_submission(metadata: SubmissionMetadata, issue_date: datetime) -> Anchor:
    return Anchor(
        ipfs_cid=mock_ipfs_cid(),
        blockchain_hash=blockchain_hash(metadata, issue_date),
    )
