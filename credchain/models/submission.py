from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SubmissionMetadata:
    """Learner metadata an institution sends alongside a certificate."""

    learner_email: str
    course_name: str
    issuer_name: str


@dataclass(frozen=True, slots=True)
class DocumentFile:
    """What the validator needs to know about an uploaded file.

    The validator never reads file contents, only these properties.
    """

    name: str
    mime_type: str
    size_bytes: int

    @property
    def size_kb(self) -> float:
        return self.size_bytes / 1024
