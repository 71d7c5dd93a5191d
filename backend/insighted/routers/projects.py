"""Projects API routes.

Endpoints:
  GET    /api/projects                          — List projects (newest first)
  POST   /api/projects                          — Create project
  GET    /api/projects/stats                    — Dashboard statistics
  GET    /api/projects/export                   — CSV download
  GET    /api/projects/policy                   — Field visibility for a status
  GET    /api/projects/{projectId}              — Get single project
  PUT    /api/projects/{projectId}              — Update project
  POST   /api/projects/{projectId}/realign      — Realigned draft (no save)
  POST   /api/projects/{projectId}/location     — Capture geolocation
  POST   /api/projects/{projectId}/attachments  — Attach a file by name
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from insighted.dependencies import get_project_or_404, get_store
from insighted.models.enums import ProjectStatus
from insighted.schemas.project import AttachmentRequest, LocationFix, Project
from insighted.services.dashboard import compute_stats
from insighted.services.errors import (
    DuplicateProjectError,
    FieldLockedError,
    InvalidDraftError,
    LocationCaptureError,
    ProjectNotFoundError,
)
from insighted.services.export import export_filename, export_projects_csv
from insighted.services.lifecycle import (
    attach_file,
    create_project,
    realign_project,
    record_location,
    update_project,
)
from insighted.services.status_policy import check_consistency, visibility_profile
from insighted.services.store import ProjectStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


def _matches(project: Project, search: str) -> bool:
    needle = search.lower()
    haystack = (
        project.school_name,
        project.project_name,
        project.school_id,
        project.project_id,
        project.contractor_name,
    )
    return any(needle in value.lower() for value in haystack)


def _with_warnings(project: Project) -> dict:
    return {"data": project.to_api(), "warnings": check_consistency(project)}


# ---------------------------------------------------------------------------
# GET /api/projects
# ---------------------------------------------------------------------------

@router.get("")
def list_projects(
    search: str | None = Query(default=None, max_length=200),
    status: ProjectStatus | None = Query(default=None),
    store: ProjectStore = Depends(get_store),
):
    """List projects in store order, optionally filtered."""
    projects = store.list_all()
    if status is not None:
        projects = [p for p in projects if p.status == status]
    if search:
        projects = [p for p in projects if _matches(p, search)]
    return {"data": [p.to_api() for p in projects]}


# ---------------------------------------------------------------------------
# POST /api/projects
# ---------------------------------------------------------------------------

@router.post("", status_code=201)
def create(
    body: Project,
    store: ProjectStore = Depends(get_store),
):
    """Create a new project from a draft without an id."""
    try:
        project = create_project(store, body)
    except InvalidDraftError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except DuplicateProjectError:
        raise HTTPException(status_code=409, detail="Project already exists")
    return _with_warnings(project)


# ---------------------------------------------------------------------------
# GET /api/projects/stats
# ---------------------------------------------------------------------------

@router.get("/stats")
def stats(store: ProjectStore = Depends(get_store)):
    """Totals, completed/ongoing/delayed counts and total allocation."""
    return {"data": compute_stats(store.list_all()).to_dict()}


# ---------------------------------------------------------------------------
# GET /api/projects/export
# ---------------------------------------------------------------------------

@router.get("/export")
def export_csv(store: ProjectStore = Depends(get_store)):
    """Download every project as CSV."""
    projects = store.list_all()
    filename = export_filename(date.today())
    logger.info("Exporting %d projects to %s", len(projects), filename)
    return Response(
        content=export_projects_csv(projects).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ---------------------------------------------------------------------------
# GET /api/projects/policy
# ---------------------------------------------------------------------------

@router.get("/policy")
async def policy(
    status: ProjectStatus = Query(...),
    realigning: bool = Query(default=False),
):
    """Which field groups are shown and editable for a status."""
    return {"data": visibility_profile(status, realigning).to_dict()}


# ---------------------------------------------------------------------------
# GET /api/projects/{projectId}
# ---------------------------------------------------------------------------

@router.get("/{project_id}")
def get_project(project: Project = Depends(get_project_or_404)):
    """Fetch a single project by ID."""
    return {"data": project.to_api()}


# ---------------------------------------------------------------------------
# PUT /api/projects/{projectId}
# ---------------------------------------------------------------------------

@router.put("/{project_id}")
def update(
    project_id: str,
    body: Project,
    realigning: bool = Query(default=False),
    store: ProjectStore = Depends(get_store),
):
    """Replace a project in place. Changes to locked fields are ignored."""
    if body.id and body.id != project_id:
        raise HTTPException(status_code=422, detail="Project id in body does not match the URL")

    draft = body.model_copy(update={"id": project_id})
    try:
        project = update_project(store, draft, realigning=realigning)
    except ProjectNotFoundError:
        raise HTTPException(status_code=404, detail="Project not found")
    return _with_warnings(project)


# ---------------------------------------------------------------------------
# POST /api/projects/{projectId}/realign
# ---------------------------------------------------------------------------

@router.post("/{project_id}/realign")
def realign(source: Project = Depends(get_project_or_404)):
    """Return a new unsaved draft that continues this project's contract at a new site."""
    draft = realign_project(source, today=date.today())
    logger.info("Prepared realignment draft from project %s", source.id)
    return {
        "data": draft.to_api(),
        "policy": visibility_profile(draft.status, realigning=True).to_dict(),
    }


# ---------------------------------------------------------------------------
# POST /api/projects/{projectId}/location
# ---------------------------------------------------------------------------

@router.post("/{project_id}/location")
def capture_location(
    project_id: str,
    body: LocationFix,
    store: ProjectStore = Depends(get_store),
):
    """Store a geolocation fix. A failed fix leaves the project unchanged."""
    try:
        project = record_location(store, project_id, body)
    except ProjectNotFoundError:
        raise HTTPException(status_code=404, detail="Project not found")
    except LocationCaptureError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except FieldLockedError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return {"data": project.to_api()}


# ---------------------------------------------------------------------------
# POST /api/projects/{projectId}/attachments
# ---------------------------------------------------------------------------

@router.post("/{project_id}/attachments", status_code=201)
def add_attachment(
    project_id: str,
    body: AttachmentRequest,
    store: ProjectStore = Depends(get_store),
):
    """Attach a photo, document or certificate by file name."""
    try:
        project = attach_file(store, project_id, body.kind, body.file_name)
    except ProjectNotFoundError:
        raise HTTPException(status_code=404, detail="Project not found")
    except FieldLockedError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return {"data": project.to_api()}
