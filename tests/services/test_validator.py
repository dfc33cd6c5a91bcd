from __future__ import annotations

import asyncio
import random

import pytest

from credchain.models.submission import DocumentFile, SubmissionMetadata
from credchain.models.validation import ValidationResult
from credchain.services import validator as validator_module
from credchain.services.validator import (
    DocumentValidator,
    no_delay,
    quick_validate,
)
from tests.conftest import FixedJitter

KB = 1024

GOOD = SubmissionMetadata(
    learner_email="a@b.com",
    course_name="Intro to X",
    issuer_name="Example University",
)


def _pdf(size_kb: float = 500, name: str = "certificate.pdf") -> DocumentFile:
    return DocumentFile(
        name=name, mime_type="application/pdf", size_bytes=int(size_kb * KB)
    )


def _validate(
    file: DocumentFile,
    metadata: SubmissionMetadata = GOOD,
    *,
    jitter: float = 0.0,
) -> ValidationResult:
    v = DocumentValidator(rng=FixedJitter(jitter), processing_delay=no_delay)
    return asyncio.run(v.validate(file, metadata))


# ---- format check ----


@pytest.mark.parametrize("mime", ["image/png", "text/plain", "", "application/x-pdf"])
def test_non_pdf_short_circuits_to_zero(mime: str) -> None:
    file = DocumentFile(name="certificate.pdf", mime_type=mime, size_bytes=500 * KB)
    result = _validate(file)
    assert result.score == 0
    assert result.is_valid is False
    assert result.reasons == ("Invalid file format: must be PDF",)
    assert result.analysis.has_required_fields is False
    assert result.analysis.content_quality == 0
    assert result.analysis.format_compliance == 0
    assert result.analysis.authenticity == 0


def test_non_pdf_skips_processing_delay() -> None:
    calls: list[float] = []

    async def record(seconds: float) -> None:
        calls.append(seconds)

    v = DocumentValidator(rng=FixedJitter(), processing_delay=record)
    asyncio.run(v.validate(DocumentFile("x.png", "image/png", 500 * KB), GOOD))
    assert calls == []


# ---- format compliance ----


def test_small_file_scores_20() -> None:
    result = _validate(_pdf(5))
    assert result.analysis.format_compliance == 20
    assert "File too small: suspicious or empty document" in result.reasons


def test_large_file_scores_40() -> None:
    result = _validate(_pdf(11000))
    assert result.analysis.format_compliance == 40
    assert "File too large: exceeds 10MB limit" in result.reasons


def test_normal_file_scores_100() -> None:
    result = _validate(_pdf(500))
    assert result.analysis.format_compliance == 100
    assert not any(r.startswith("File too") for r in result.reasons)


def test_size_boundaries_are_inclusive() -> None:
    assert _validate(_pdf(10)).analysis.format_compliance == 100
    assert _validate(_pdf(10240)).analysis.format_compliance == 100


# ---- required fields ----


def test_all_required_fields_present() -> None:
    assert _validate(_pdf()).analysis.has_required_fields is True


def test_email_without_at_fails_required_fields() -> None:
    meta = SubmissionMetadata("ab.com", "Intro to X", "Example University")
    result = _validate(_pdf(), meta)
    assert result.analysis.has_required_fields is False
    assert "Invalid learner email address" in result.reasons
    assert "Course name is too short or missing" not in result.reasons
    assert "Issuer name is too short or missing" not in result.reasons


def test_short_course_name_fails_required_fields() -> None:
    meta = SubmissionMetadata("a@b.com", "Art", "Example University")
    result = _validate(_pdf(), meta)
    assert result.analysis.has_required_fields is False
    assert "Course name is too short or missing" in result.reasons
    assert "Invalid learner email address" not in result.reasons


def test_short_issuer_name_fails_required_fields() -> None:
    meta = SubmissionMetadata("a@b.com", "Intro to X", "MIT")
    result = _validate(_pdf(), meta)
    assert result.analysis.has_required_fields is False
    assert "Issuer name is too short or missing" in result.reasons


def test_every_field_failure_is_reported() -> None:
    meta = SubmissionMetadata("nobody", "X", "Y")
    result = _validate(_pdf(), meta)
    for reason in (
        "Invalid learner email address",
        "Course name is too short or missing",
        "Issuer name is too short or missing",
        "Required metadata fields are incomplete or invalid",
    ):
        assert reason in result.reasons


# ---- content quality / authenticity ----


def test_content_quality_filename_bonus() -> None:
    assert _validate(_pdf(name="Certificate_2024.PDF")).analysis.content_quality == 80
    assert _validate(_pdf(name="my-credential.pdf")).analysis.content_quality == 80
    assert _validate(_pdf(name="scan.pdf")).analysis.content_quality == 75


def test_authenticity_keyword_bonus() -> None:
    assert _validate(_pdf()).analysis.authenticity == 90
    meta = SubmissionMetadata("a@b.com", "Intro to X", "NCVET Board")
    assert _validate(_pdf(), meta).analysis.authenticity == 90
    meta = SubmissionMetadata("a@b.com", "Intro to X", "Some Company")
    assert _validate(_pdf(), meta).analysis.authenticity == 80


def test_jitter_is_applied_and_clamped() -> None:
    assert _validate(_pdf(), jitter=7.4).analysis.content_quality == 87
    assert _validate(_pdf(), jitter=-10).analysis.content_quality == 70
    # authenticity 90 + 10 hits the upper clamp
    assert _validate(_pdf(), jitter=10).analysis.authenticity == 100


def test_sub_scores_round_half_up() -> None:
    # 80.5 -> 81; banker's round() would give 80
    assert _validate(_pdf(), jitter=0.5).analysis.content_quality == 81


def test_low_sub_scores_add_reasons() -> None:
    meta = SubmissionMetadata("a@b.com", "Intro to X", "Some Company")
    result = _validate(_pdf(name="scan.pdf"), meta, jitter=-10)
    assert "Content quality below threshold: 65%" in result.reasons
    assert "Authenticity verification failed: 70%" not in result.reasons

    result = _validate(_pdf(name="scan.pdf"), meta, jitter=-10.6)
    assert "Authenticity verification failed: 69%" in result.reasons


# ---- composite ----


def test_composite_score_passes_at_90() -> None:
    # 0.2*100 + 0.4*80 + 0.2*100 + 0.2*90 = 90
    result = _validate(_pdf())
    assert result.score == 90
    assert result.is_valid is True
    assert result.reasons[-1] == "Document meets all quality standards for blockchain upload"


def test_composite_score_below_threshold_fails() -> None:
    # 20 + 0.4*70 + 20 + 0.2*80 = 84
    result = _validate(_pdf(), jitter=-10)
    assert result.score == 84
    assert result.is_valid is False
    assert result.reasons[-1] == "Overall score 84% is below the required 90% threshold"


def test_processing_delay_runs_once_per_sub_score_in_order() -> None:
    calls: list[float] = []

    async def record(seconds: float) -> None:
        calls.append(seconds)

    v = DocumentValidator(rng=FixedJitter(), processing_delay=record)
    asyncio.run(v.validate(_pdf(), GOOD))
    assert calls == [
        validator_module.CONTENT_DELAY_SECONDS,
        validator_module.AUTHENTICITY_DELAY_SECONDS,
    ]


# ---- properties over random inputs ----


def test_score_bounds_and_reasons_hold_for_random_inputs() -> None:
    rng = random.Random(1234)
    v = DocumentValidator(rng=rng, processing_delay=no_delay)
    mimes = ["application/pdf", "application/pdf", "image/jpeg"]
    for _ in range(200):
        file = DocumentFile(
            name=rng.choice(["certificate.pdf", "scan.pdf", "credential.PDF"]),
            mime_type=rng.choice(mimes),
            size_bytes=rng.randint(0, 12000 * KB),
        )
        meta = SubmissionMetadata(
            learner_email=rng.choice(["a@b.com", "nope", ""]),
            course_name=rng.choice(["", "Art", "Intro to X"]),
            issuer_name=rng.choice(["MIT", "Example University", "Acme Corp"]),
        )
        result = asyncio.run(v.validate(file, meta))
        assert 0 <= result.score <= 100
        assert result.is_valid == (result.score >= 90)
        assert len(result.reasons) >= 1


def test_good_submission_passes_majority_of_jittered_draws() -> None:
    """The same submission can pass or fail; the jitter decides.

    It passes when 2 * content jitter + authenticity jitter, after
    rounding, is at least -2: about 56% of draws.
    """
    v = DocumentValidator(rng=random.Random(42), processing_delay=no_delay)
    passes = sum(
        asyncio.run(v.validate(_pdf(), GOOD)).is_valid for _ in range(1000)
    )
    assert 500 < passes < 700


# ---- pre-check ----


def test_quick_validate_accepts_good_metadata() -> None:
    assert quick_validate(GOOD).valid is True
    assert quick_validate(GOOD).message is None


@pytest.mark.parametrize(
    ("meta", "message"),
    [
        (SubmissionMetadata("ab.com", "Intro to X", "Example University"), "Invalid email address"),
        (SubmissionMetadata("a@b.com", "Art", "Example University"), "Course name too short"),
        (SubmissionMetadata("a@b.com", "Intro to X", "MIT"), "Issuer name too short"),
        # first failure wins
        (SubmissionMetadata("ab.com", "X", "Y"), "Invalid email address"),
    ],
)
def test_quick_validate_reports_first_failure(
    meta: SubmissionMetadata, message: str
) -> None:
    result = quick_validate(meta)
    assert result.valid is False
    assert result.message == message
