"""Simulated AI document validation.

The validator scores a certificate submission before it is allowed
anywhere near the (simulated) chain.  It is a fixed formula, not a
model:

  score = 0.2 * required_fields (0 or 100)
        + 0.4 * content_quality
        + 0.2 * format_compliance
        + 0.2 * authenticity

content_quality and authenticity each get a uniform jitter in [-10, +10]
standing in for model uncertainty, so the same submission can pass on
one run and fail on the next.  A submission passes at score >= 90.

Both jittered sub-scores also await a "processing time" hook, run one
after the other.  The hook has no functional meaning; tests and the
test environment swap it for a no-op.
"""

from __future__ import annotations

import asyncio
import logging
import math
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from credchain.models.submission import DocumentFile, SubmissionMetadata
from credchain.models.validation import ValidationAnalysis, ValidationResult

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
PASS_THRESHOLD = 90

MIN_SIZE_KB = 10
MAX_SIZE_KB = 10240

WEIGHTS = {
    "required_fields": 0.20,
    "content_quality": 0.40,
    "format_compliance": 0.20,
    "authenticity": 0.20,
}

ISSUER_KEYWORDS = ("institute", "university", "ncvet", "msde", "academy", "college")
FILENAME_KEYWORDS = ("certificate", "credential")

CONTENT_DELAY_SECONDS = 0.5
AUTHENTICITY_DELAY_SECONDS = 0.3

ProcessingDelay = Callable[[float], Awaitable[None]]


class JitterSource(Protocol):
    def uniform(self, a: float, b: float) -> float: ...


async def no_delay(_seconds: float) -> None:
    return None


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


# ---------------------------------------------------------------------------
# Pre-check
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PrecheckResult:
    valid: bool
    message: str | None = None


def quick_validate(metadata: SubmissionMetadata) -> PrecheckResult:
    """Metadata-only check run before the full validator.

    Reports only the first problem found.
    """
    if "@" not in metadata.learner_email:
        return PrecheckResult(valid=False, message="Invalid email address")
    if len(metadata.course_name) <= 3:
        return PrecheckResult(valid=False, message="Course name too short")
    if len(metadata.issuer_name) <= 3:
        return PrecheckResult(valid=False, message="Issuer name too short")
    return PrecheckResult(valid=True)


# ---------------------------------------------------------------------------
# Full validation
# ---------------------------------------------------------------------------


class DocumentValidator:
    def __init__(
        self,
        *,
        rng: JitterSource | None = None,
        processing_delay: ProcessingDelay | None = None,
    ) -> None:
        self._rng: JitterSource = rng if rng is not None else random.Random()
        self._delay: ProcessingDelay = (
            processing_delay if processing_delay is not None else asyncio.sleep
        )

    async def validate(
        self, file: DocumentFile, metadata: SubmissionMetadata
    ) -> ValidationResult:
        if file.mime_type != PDF_MIME_TYPE:
            logger.info(
                "Rejected non-PDF upload name=%s type=%s", file.name, file.mime_type
            )
            return ValidationResult(
                score=0,
                is_valid=False,
                reasons=("Invalid file format: must be PDF",),
                analysis=ValidationAnalysis(),
            )

        reasons: list[str] = []

        format_compliance = self._format_compliance(file, reasons)
        has_required_fields = self._required_fields(metadata, reasons)
        content_quality = await self._content_quality(file)
        authenticity = await self._authenticity(metadata)

        score = _round_half_up(
            (100 if has_required_fields else 0) * WEIGHTS["required_fields"]
            + content_quality * WEIGHTS["content_quality"]
            + format_compliance * WEIGHTS["format_compliance"]
            + authenticity * WEIGHTS["authenticity"]
        )

        if content_quality < 70:
            reasons.append(f"Content quality below threshold: {content_quality}%")
        if authenticity < 70:
            reasons.append(f"Authenticity verification failed: {authenticity}%")
        if not has_required_fields:
            reasons.append("Required metadata fields are incomplete or invalid")

        is_valid = score >= PASS_THRESHOLD
        if is_valid:
            reasons.append("Document meets all quality standards for blockchain upload")
        else:
            reasons.append(
                f"Overall score {score}% is below the required {PASS_THRESHOLD}% threshold"
            )

        logger.debug(
            "Validated name=%s score=%d content=%d format=%d authenticity=%d fields=%s",
            file.name,
            score,
            content_quality,
            format_compliance,
            authenticity,
            has_required_fields,
        )
        return ValidationResult(
            score=score,
            is_valid=is_valid,
            reasons=tuple(reasons),
            analysis=ValidationAnalysis(
                has_required_fields=has_required_fields,
                content_quality=content_quality,
                format_compliance=format_compliance,
                authenticity=authenticity,
            ),
        )

    # --- sub-scores ---

    @staticmethod
    def _format_compliance(file: DocumentFile, reasons: list[str]) -> int:
        size_kb = file.size_kb
        if size_kb < MIN_SIZE_KB:
            reasons.append("File too small: suspicious or empty document")
            return 20
        if size_kb > MAX_SIZE_KB:
            reasons.append("File too large: exceeds 10MB limit")
            return 40
        return 100

    @staticmethod
    def _required_fields(metadata: SubmissionMetadata, reasons: list[str]) -> bool:
        has_email = "@" in metadata.learner_email
        has_course = len(metadata.course_name) > 3
        has_issuer = len(metadata.issuer_name) > 3

        if not has_email:
            reasons.append("Invalid learner email address")
        if not has_course:
            reasons.append("Course name is too short or missing")
        if not has_issuer:
            reasons.append("Issuer name is too short or missing")

        return has_email and has_course and has_issuer

    def _jitter(self) -> float:
        return self._rng.uniform(-10, 10)

    async def _content_quality(self, file: DocumentFile) -> int:
        await self._delay(CONTENT_DELAY_SECONDS)

        score: float = 75
        name = file.name.lower()
        if any(keyword in name for keyword in FILENAME_KEYWORDS):
            score += 5
        return _round_half_up(_clamp(score + self._jitter()))

    async def _authenticity(self, metadata: SubmissionMetadata) -> int:
        await self._delay(AUTHENTICITY_DELAY_SECONDS)

        score: float = 80
        issuer = metadata.issuer_name.lower()
        if any(keyword in issuer for keyword in ISSUER_KEYWORDS):
            score += 10
        return _round_half_up(_clamp(score + self._jitter()))
