"""Project lifecycle operations: create, update, realign, and field capture."""

import logging
from datetime import date, datetime, timezone

from insighted.models.enums import AttachmentKind, FieldGroup, LocationError, ProjectStatus
from insighted.models.helpers import generate_cuid
from insighted.schemas.project import Coordinates, LocationFix, Project
from insighted.services.errors import FieldLockedError, InvalidDraftError, LocationCaptureError
from insighted.services.status_policy import apply_status_policy, check_consistency, visibility_profile
from insighted.services.store import ProjectStore

logger = logging.getLogger(__name__)

LOCATION_ERROR_MESSAGES = {
    LocationError.PERMISSION_DENIED: "Location permission was denied. Enable location access and try again.",
    LocationError.POSITION_UNAVAILABLE: "Your location is currently unavailable.",
    LocationError.TIMEOUT: "Timed out while getting your location.",
}

# Fields a realigned draft starts without
_REALIGN_RESET = {
    "id": "",
    "region": "",
    "division": "",
    "barangay": "",
    "school_id": "",
    "school_name": "",
    "project_name": "",
    "project_id": "",
    "status": ProjectStatus.NOT_YET_STARTED,
    "accomplishment_percentage": 0,
    "actual_completion_date": None,
    "coordinates": None,
    "certificate_url": None,
}


def create_project(store: ProjectStore, draft: Project) -> Project:
    """Persist a new draft under a freshly generated id, first in store order."""
    if draft.id:
        raise InvalidDraftError("A new project must not carry an id")

    project = draft.model_copy(update={"id": generate_cuid()}, deep=True)
    saved = store.insert(project)
    logger.info("Created project %s (%s)", saved.id, saved.project_name or "unnamed")
    _log_consistency(saved)
    return saved


def update_project(store: ProjectStore, draft: Project, realigning: bool = False) -> Project:
    """Replace an existing record in place, ignoring changes to locked fields."""
    if not draft.id:
        raise InvalidDraftError("An update requires the id of an existing project")

    current = store.get(draft.id)
    project = apply_status_policy(current, draft, realigning=realigning)
    saved = store.replace(project)
    logger.info("Updated project %s (%s)", saved.id, saved.status.value)
    _log_consistency(saved)
    return saved


def save_project(store: ProjectStore, draft: Project, realigning: bool = False) -> Project:
    """Create when the draft has no id, update otherwise."""
    if draft.id:
        return update_project(store, draft, realigning=realigning)
    return create_project(store, draft)


def realign_project(source: Project, today: date | None = None) -> Project:
    """Derive a new, unsaved draft that keeps the contract but not the site.

    Allocation, year, batch, contract data and milestone dates carry over;
    location, identity and progress start fresh.
    """
    update = {
        **_REALIGN_RESET,
        "photos": [],
        "documents": [],
        "status_as_of_date": today or date.today(),
    }
    return source.model_copy(update=update, deep=True)


def record_location(store: ProjectStore, project_id: str, fix: LocationFix) -> Project:
    """Store a geolocation fix on the project.

    A failed fix aborts with LocationCaptureError; the record is left as it was.
    """
    if fix.error is not None:
        logger.warning("Location capture failed for project %s: %s", project_id, fix.error.value)
        raise LocationCaptureError(LOCATION_ERROR_MESSAGES[fix.error])
    if fix.latitude is None or fix.longitude is None:
        raise LocationCaptureError(LOCATION_ERROR_MESSAGES[LocationError.POSITION_UNAVAILABLE])

    project = store.get(project_id)
    if not visibility_profile(project.status).is_editable("coordinates"):
        raise FieldLockedError(f"Location cannot be captured while the project is {project.status.value}")

    coordinates = Coordinates(
        latitude=fix.latitude,
        longitude=fix.longitude,
        accuracy=fix.accuracy,
        captured_at=fix.timestamp or datetime.now(timezone.utc),
    )
    saved = store.replace(project.model_copy(update={"coordinates": coordinates}, deep=True))
    logger.info("Captured location for project %s", project_id)
    return saved


def attach_file(store: ProjectStore, project_id: str, kind: AttachmentKind, file_name: str) -> Project:
    """Record a file by name on the project (no file content is kept)."""
    project = store.get(project_id)
    profile = visibility_profile(project.status)

    if kind == AttachmentKind.CERTIFICATE:
        if not profile.access(FieldGroup.COMPLETION_EXTRAS).editable:
            raise FieldLockedError("A certificate can only be attached to a completed project")
        update = {"certificate_url": file_name}
    else:
        if not profile.access(FieldGroup.ONGOING_EXTRAS).editable:
            raise FieldLockedError(
                f"Photos and documents cannot be attached while the project is {project.status.value}"
            )
        field = "photos" if kind == AttachmentKind.PHOTO else "documents"
        update = {field: [*getattr(project, field), file_name]}

    saved = store.replace(project.model_copy(update=update, deep=True))
    logger.info("Attached %s %s to project %s", kind.value, file_name, project_id)
    return saved


def _log_consistency(project: Project) -> None:
    for warning in check_consistency(project):
        logger.info("Project %s: %s", project.id, warning)
