"""Project record stores.

Both stores expose the same mutation API:

  insert(project)   — add a new record at the front (newest first)
  replace(project)  — swap the record with the same id, keeping its position
  get(project_id)   — fetch one record
  list_all()        — every record in store order

Records go in and come out as copies, so callers never share state with the store.
"""

import logging
import threading
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from insighted.models.project import ProjectRecord
from insighted.schemas.project import Project
from insighted.services.errors import DuplicateProjectError, ProjectNotFoundError

logger = logging.getLogger(__name__)

# Concurrent creates can race for the same position; the loser retries
INSERT_ATTEMPTS = 3


class ProjectStore(Protocol):
    backend: str

    def insert(self, project: Project) -> Project: ...

    def replace(self, project: Project) -> Project: ...

    def get(self, project_id: str) -> Project: ...

    def list_all(self) -> list[Project]: ...


class InMemoryProjectStore:
    """Ordered list of projects held in process memory."""

    backend = "memory"

    def __init__(self, projects: list[Project] | None = None) -> None:
        self._lock = threading.Lock()
        self._projects: list[Project] = [p.model_copy(deep=True) for p in projects or []]

    def insert(self, project: Project) -> Project:
        if not project.id:
            raise ValueError("Cannot insert a project without an id")
        with self._lock:
            if any(p.id == project.id for p in self._projects):
                raise DuplicateProjectError(project.id)
            self._projects.insert(0, project.model_copy(deep=True))
        return project.model_copy(deep=True)

    def replace(self, project: Project) -> Project:
        with self._lock:
            for index, existing in enumerate(self._projects):
                if existing.id == project.id:
                    self._projects[index] = project.model_copy(deep=True)
                    return project.model_copy(deep=True)
        raise ProjectNotFoundError(project.id)

    def get(self, project_id: str) -> Project:
        with self._lock:
            for existing in self._projects:
                if existing.id == project_id:
                    return existing.model_copy(deep=True)
        raise ProjectNotFoundError(project_id)

    def list_all(self) -> list[Project]:
        with self._lock:
            return [p.model_copy(deep=True) for p in self._projects]

    def __len__(self) -> int:
        with self._lock:
            return len(self._projects)


def _record_values(project: Project) -> dict:
    values = project.model_dump(exclude={"id", "coordinates"})
    values["coordinates"] = (
        project.coordinates.model_dump(mode="json", by_alias=True)
        if project.coordinates
        else None
    )
    values["photos"] = list(project.photos)
    values["documents"] = list(project.documents)
    return values


def _record_to_project(record: ProjectRecord) -> Project:
    data = {name: getattr(record, name) for name in Project.model_fields}
    return Project.model_validate(data)


class SqlProjectStore:
    """Projects persisted through SQLAlchemy.

    Each mutation is one transaction: committed before the call returns,
    rolled back if anything fails. Positions are unique, so concurrent
    inserts cannot share a slot in the newest-first order.
    """

    backend = "database"

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def insert(self, project: Project) -> Project:
        if not project.id:
            raise ValueError("Cannot insert a project without an id")
        for attempt in range(1, INSERT_ATTEMPTS + 1):
            try:
                with self._session_factory.begin() as session:
                    if session.get(ProjectRecord, project.id) is not None:
                        raise DuplicateProjectError(project.id)
                    record = ProjectRecord(
                        id=project.id,
                        position=self._next_position(session),
                        **_record_values(project),
                    )
                    session.add(record)
            except IntegrityError:
                if attempt == INSERT_ATTEMPTS:
                    raise
                logger.warning("Position conflict inserting project %s, retrying (%d)", project.id, attempt)
                continue
            break
        logger.debug("Inserted project %s at position %d", project.id, record.position)
        return project.model_copy(deep=True)

    def _next_position(self, session: Session) -> int:
        top = session.execute(select(func.max(ProjectRecord.position))).scalar()
        return (top or 0) + 1

    def replace(self, project: Project) -> Project:
        with self._session_factory.begin() as session:
            record = session.get(ProjectRecord, project.id)
            if record is None:
                raise ProjectNotFoundError(project.id)
            for field, value in _record_values(project).items():
                setattr(record, field, value)
        return project.model_copy(deep=True)

    def get(self, project_id: str) -> Project:
        with self._session_factory() as session:
            record = session.get(ProjectRecord, project_id)
            if record is None:
                raise ProjectNotFoundError(project_id)
            return _record_to_project(record)

    def list_all(self) -> list[Project]:
        with self._session_factory() as session:
            records = session.execute(
                select(ProjectRecord).order_by(ProjectRecord.position.desc())
            ).scalars().all()
            return [_record_to_project(r) for r in records]
