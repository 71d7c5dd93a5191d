"""CSV export of the project registry."""

import csv
import io
from collections.abc import Iterable
from datetime import date

from insighted.schemas.project import Project

CSV_COLUMNS = (
    "Region",
    "Division",
    "Barangay",
    "School Name",
    "School ID",
    "Project Name",
    "Project ID",
    "Status",
    "Accomplishment(%)",
    "Allocation",
    "Batch",
    "Year",
    "Contractor",
    "Contract ID",
    "Target Date",
    "Actual Date",
    "Invitation to Bid",
    "Notice to Proceed",
    "Lat",
    "Lng",
    "Other Remarks",
)


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def project_to_row(project: Project) -> list[str]:
    coords = project.coordinates
    return [
        _text(project.region),
        _text(project.division),
        _text(project.barangay),
        _text(project.school_name),
        _text(project.school_id),
        _text(project.project_name),
        _text(project.project_id),
        project.status.value,
        _text(project.accomplishment_percentage),
        _text(project.project_allocation),
        _text(project.batch_of_funds),
        _text(project.year),
        _text(project.contractor_name),
        _text(project.contract_id),
        _text(project.target_completion_date),
        _text(project.actual_completion_date),
        _text(project.invitation_to_bid),
        _text(project.notice_to_proceed),
        _text(coords.latitude if coords else None),
        _text(coords.longitude if coords else None),
        _text(project.other_remarks),
    ]


def export_projects_csv(projects: Iterable[Project]) -> str:
    """Render projects as CSV text, one row per project in the given order.

    Fields containing a comma, quote or line break are quoted, with inner
    quotes doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for project in projects:
        writer.writerow(project_to_row(project))
    return buffer.getvalue()


def export_filename(today: date | None = None) -> str:
    return f"school_projects_{(today or date.today()).isoformat()}.csv"
