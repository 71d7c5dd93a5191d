"""Shared FastAPI dependencies.

The project store is synchronous. Routes that touch it are plain ``def``
handlers (or reach it through a sync dependency), so FastAPI runs the store
calls in its threadpool and the event loop stays free for advisory requests.
"""

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException

from insighted.config import get_settings
from insighted.db.session import create_session_factory, create_sync_engine, create_tables
from insighted.schemas.project import Project
from insighted.services.advisory import AdvisoryGuard, advisory_guard
from insighted.services.errors import ProjectNotFoundError
from insighted.services.store import InMemoryProjectStore, ProjectStore, SqlProjectStore

logger = logging.getLogger(__name__)


@lru_cache
def get_store() -> ProjectStore:
    """The process-wide project store, chosen by DATABASE_URL.

    Usage in routes:
        @router.get("/something")
        def handler(store: ProjectStore = Depends(get_store)):
            ...
    """
    settings = get_settings()
    if not settings.uses_database:
        logger.info("Using in-memory project store")
        return InMemoryProjectStore()

    engine = create_sync_engine(settings.database_url, echo=False)
    create_tables(engine)
    logger.info("Using database project store (%s)", engine.url.get_backend_name())
    return SqlProjectStore(create_session_factory(engine))


def get_project_or_404(
    project_id: str,
    store: ProjectStore = Depends(get_store),
) -> Project:
    """Load the project named by the ``project_id`` path parameter, or 404."""
    try:
        return store.get(project_id)
    except ProjectNotFoundError:
        raise HTTPException(status_code=404, detail="Project not found")


def get_advisory_guard() -> AdvisoryGuard:
    return advisory_guard


__all__ = ["get_store", "get_project_or_404", "get_advisory_guard"]
