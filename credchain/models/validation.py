from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ValidationAnalysis:
    has_required_fields: bool = False
    content_quality: int = 0
    format_compliance: int = 0
    authenticity: int = 0


@dataclass(frozen=True, slots=True)
class ValidationSummary:
    """The part of a validation run the registry keeps on a record."""

    score: int
    is_valid: bool
    reasons: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ValidationResult:
    score: int  # 0-100
    is_valid: bool  # score >= 90
    reasons: tuple[str, ...]
    analysis: ValidationAnalysis

    def summary(self) -> ValidationSummary:
        return ValidationSummary(
            score=self.score, is_valid=self.is_valid, reasons=self.reasons
        )
