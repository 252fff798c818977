"""FastAPI service for Evaluation Sync."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import ALLOWED_ORIGINS, get_settings, get_sync_service
from api.routers import data_router, sync_router
from evaluation_sync import __version__

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Attempt the initial sync when a company is already configured."""
    service = get_sync_service()
    if service.initialize():
        logger.info("[STARTUP] Online mode active")
    else:
        logger.info("[STARTUP] Running in local mode")
    yield


app = FastAPI(
    title="Evaluation Sync API",
    version=__version__,
    description="Keeps the local evaluation data set in step with its remote copy.",
    lifespan=lifespan,
)

origins = [origin for origin in ALLOWED_ORIGINS if origin]

if origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(sync_router, prefix="/sync", tags=["sync"])
app.include_router(data_router, prefix="/data", tags=["data"])


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint with configuration summary."""
    settings = get_settings()
    service = get_sync_service()
    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "storagePrefix": settings.storage_prefix,
        "companyConfigured": service.config.is_configured,
    }
