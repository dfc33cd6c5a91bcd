from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from credchain.api import dependencies
from credchain.api.dependencies import get_validator
from credchain.main import app
from credchain.services.validator import DocumentValidator, no_delay

# Ensure repo root is on sys.path so `import credchain` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class FixedJitter:
    """Stands in for random.Random: every uniform() draw returns `value`."""

    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def uniform(self, a: float, b: float) -> float:
        return self.value


@pytest.fixture(autouse=True)
def reset_registry() -> None:
    """Empty the in-memory registry and restart ids at 1."""
    dependencies.credential_repo._records.clear()
    dependencies.credential_repo._next_id = 1


@pytest.fixture
def jitter() -> FixedJitter:
    return FixedJitter(0.0)


@pytest.fixture(autouse=True)
def pinned_validator(jitter: FixedJitter):
    """Route handlers get a validator with pinned jitter and no delay."""
    app.dependency_overrides[get_validator] = lambda: DocumentValidator(
        rng=jitter, processing_delay=no_delay
    )
    yield
    app.dependency_overrides.pop(get_validator, None)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


# ---------------------------------------------------------------------------
# Upload helpers
# ---------------------------------------------------------------------------

KB = 1024

GOOD_FORM = {
    "learnerEmail": "a@b.com",
    "courseName": "Intro to X",
    "issuerName": "Example University",
}


def pdf_bytes(size_kb: int = 500) -> bytes:
    return b"%PDF-1.4\n" + b"0" * (size_kb * KB - 9)


def upload(
    client: TestClient,
    *,
    form: dict[str, str] | None = None,
    filename: str = "certificate.pdf",
    content: bytes | None = None,
    mime_type: str = "application/pdf",
):
    return client.post(
        "/upload",
        data=GOOD_FORM if form is None else form,
        files={
            "certificate": (
                filename,
                pdf_bytes() if content is None else content,
                mime_type,
            )
        },
    )
