from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from credchain.api.credentials import router as credentials_router
from credchain.api.health import router as health_router
from credchain.api.metrics_endpoint import router as metrics_router
from credchain.api.upload import router as upload_router
from credchain.api.verify import router as verify_router
from credchain.core.config import SETTINGS
from credchain.core.logging import setup_logging
from credchain.db.engine import lifespan_db
from credchain.middleware.metrics import MetricsMiddleware
from credchain.middleware.request_context import (
    RequestContextMiddleware,
    install_log_filter,
)

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
install_log_filter()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    async with lifespan_db():
        yield


app = FastAPI(
    title="credchain-registry",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Last added runs first: RequestContext → Metrics → CORS → route handler
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(metrics_router)
app.include_router(credentials_router)
app.include_router(health_router)
app.include_router(upload_router)
app.include_router(verify_router)

logger.info(
    "credchain-registry started  env=%s log_level=%s port=%d store=%s strict_verify=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "postgres" if SETTINGS.database_url else "memory",
    SETTINGS.strict_chain_verification,
)
