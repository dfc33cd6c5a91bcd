"""Liveness and readiness probes.

/health answers 200 as long as the process can respond; the "status"
field says whether a dependency is impaired.  /ready answers 503 when the
configured database is unreachable, so a load balancer stops routing
uploads here without restarting the process.
"""

from __future__ import annotations

from fastapi import APIRouter, Response

from credchain.db import engine as db_engine

router = APIRouter(tags=["health"])


async def _database_check() -> str:
    if db_engine.engine is None:
        return "not_configured"
    return "ok" if await db_engine.ping_database() else "degraded"


@router.get("/health")
async def health() -> dict:
    checks = {"database": await _database_check()}
    overall = "degraded" if "degraded" in checks.values() else "ok"
    return {"status": overall, "checks": checks}


@router.get("/ready")
async def ready() -> Response:
    if await _database_check() == "degraded":
        return Response(status_code=503)
    return Response(status_code=200)
