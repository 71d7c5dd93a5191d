"""Dashboard summary statistics."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from insighted.models.enums import ProjectStatus
from insighted.schemas.project import Project


@dataclass
class DashboardStats:
    total: int = 0
    completed: int = 0
    ongoing: int = 0
    delayed: int = 0
    total_allocation: Decimal = Decimal("0")
    by_status: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "completed": self.completed,
            "ongoing": self.ongoing,
            "delayed": self.delayed,
            "totalAllocation": float(self.total_allocation),
            "byStatus": self.by_status,
        }


def is_delayed(project: Project, today: date) -> bool:
    """Past its target date, not completed, and not at 100%."""
    if project.status == ProjectStatus.COMPLETED:
        return False
    if project.target_completion_date is None:
        return False
    return today > project.target_completion_date and project.accomplishment_percentage < 100


def compute_stats(projects: list[Project], today: date | None = None) -> DashboardStats:
    today = today or date.today()
    stats = DashboardStats(by_status={s.value: 0 for s in ProjectStatus})
    for project in projects:
        stats.total += 1
        stats.total_allocation += project.project_allocation
        stats.by_status[project.status.value] += 1
        if project.status == ProjectStatus.COMPLETED:
            stats.completed += 1
        elif project.status == ProjectStatus.ONGOING:
            stats.ongoing += 1
        if is_delayed(project, today):
            stats.delayed += 1
    return stats
