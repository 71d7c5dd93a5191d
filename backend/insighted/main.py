"""InsightEd FastAPI application."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from insighted.config import get_settings
from insighted.dependencies import get_store
from insighted.routers import advisory, health, projects

_settings = get_settings()

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup/shutdown lifecycle."""
    # Startup: open the store (creates tables for the database backend)
    store = get_store()
    logger.info("InsightEd API started with %s store", store.backend)
    yield


app = FastAPI(
    title="InsightEd API",
    description="School infrastructure project monitoring",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS — allow frontend origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        _settings.app_url,
        "http://localhost:5173",
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers — all prefixed with /api
app.include_router(health.router, prefix="/api")
app.include_router(projects.router, prefix="/api")
app.include_router(advisory.router, prefix="/api")
