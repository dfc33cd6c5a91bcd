"""Demo: upload a certificate, list it, verify it and fetch its QR code.

Uses FastAPI TestClient against the in-memory registry.  The validator's
jitter is random, so the upload is accepted in roughly half of the runs.

Run with:
    python scripts/demo_upload_flow.py
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from credchain.api.dependencies import get_validator
from credchain.main import app
from credchain.services.validator import DocumentValidator, no_delay

FORM = {
    "learnerEmail": "demo@example.com",
    "courseName": "Applied Data Engineering",
    "issuerName": "Demo University",
}
PDF = b"%PDF-1.4\n" + b"0" * (200 * 1024)


def main() -> None:
    app.dependency_overrides[get_validator] = lambda: DocumentValidator(
        processing_delay=no_delay
    )
    client = TestClient(app)

    # ── Step 1: POST /upload (missing fields) ───────────────────────
    r = client.post("/upload", data={"learnerEmail": FORM["learnerEmail"]})
    print(f"1. POST /upload (missing)   → {r.status_code}  {r.json()}")

    # ── Step 2: POST /upload (pre-check fails) ──────────────────────
    r = client.post(
        "/upload",
        data={**FORM, "learnerEmail": "not-an-email"},
        files={"certificate": ("certificate.pdf", PDF, "application/pdf")},
    )
    print(f"2. POST /upload (bad email) → {r.status_code}  {r.json()['message']}")

    # ── Step 3: POST /upload (full validation) ──────────────────────
    r = client.post(
        "/upload",
        data=FORM,
        files={"certificate": ("certificate.pdf", PDF, "application/pdf")},
    )
    body = r.json()
    credential = body["credential"]
    print(
        f"3. POST /upload             → {r.status_code}  "
        f"score={body['validationScore']}  status={credential['verificationStatus']!r}"
    )
    for reason in body["reasons"]:
        print(f"     - {reason}")

    # ── Step 4: GET /credentials ────────────────────────────────────
    r = client.get("/credentials")
    print(f"4. GET  /credentials        → {r.status_code}  count={len(r.json()['credentials'])}")

    # ── Step 5: POST /verify by hash, then by id ────────────────────
    if credential["blockchainHash"]:
        r = client.post("/verify", json={"hash": credential["blockchainHash"]})
        print(f"5. POST /verify (hash)      → {r.status_code}  {r.json()}")
    r = client.post("/verify", json={"id": credential["id"]})
    print(f"5. POST /verify (id)        → {r.status_code}  {r.json()}")

    r = client.get(f"/credentials/{credential['id']}")
    print(f"   GET  /credentials/{credential['id']}    → status={r.json()['credential']['verificationStatus']!r}")

    # ── Step 6: GET /credentials/{id}/qr ────────────────────────────
    r = client.get(f"/credentials/{credential['id']}/qr")
    if r.status_code == 200:
        print(f"6. GET  /credentials/{credential['id']}/qr → {r.status_code}  {len(r.content)} bytes PNG")
    else:
        print(f"6. GET  /credentials/{credential['id']}/qr → {r.status_code}  {r.json()}")

    app.dependency_overrides.clear()
    print("\nAll steps completed.")


if __name__ == "__main__":
    main()
