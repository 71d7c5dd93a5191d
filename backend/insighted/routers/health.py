"""Health check endpoints."""

from fastapi import APIRouter, Depends

from insighted.config import get_settings
from insighted.dependencies import get_store
from insighted.services.store import ProjectStore

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(store: ProjectStore = Depends(get_store)) -> dict:
    """Health check: reports the store backend and whether AI is configured."""
    settings = get_settings()
    return {
        "status": "healthy",
        "store": store.backend,
        "projects": len(store.list_all()),
        "advisory": "configured" if settings.anthropic_api_key else "unconfigured",
        "service": "insighted-api",
        "version": "0.1.0",
    }
