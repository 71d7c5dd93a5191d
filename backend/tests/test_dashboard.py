"""Tests for insighted.services.dashboard."""

from datetime import date
from decimal import Decimal

from insighted.services.dashboard import compute_stats, is_delayed

from conftest import make_project

TODAY = date(2025, 1, 10)


def test_counts_and_total_allocation():
    projects = [
        make_project(status="Completed", accomplishment_percentage=100, project_allocation=1000),
        make_project(status="Ongoing", project_allocation=2500),
        make_project(status="Under Procurement", project_allocation="500.50",
                     target_completion_date=date(2025, 12, 31)),
    ]

    stats = compute_stats(projects, today=TODAY)

    assert stats.total == 3
    assert stats.completed == 1
    assert stats.ongoing == 1
    assert stats.total_allocation == Decimal("4000.50")
    assert stats.by_status["Under Procurement"] == 1
    assert stats.by_status["Not Yet Started"] == 0


def test_delayed_requires_past_target_and_incomplete():
    late = make_project(target_completion_date=date(2024, 12, 15), accomplishment_percentage=70)
    done_late = make_project(status="Completed", target_completion_date=date(2024, 12, 15))
    full_late = make_project(target_completion_date=date(2024, 12, 15), accomplishment_percentage=100)
    no_target = make_project(target_completion_date=None)
    on_time = make_project(target_completion_date=date(2025, 3, 1))

    assert is_delayed(late, TODAY)
    assert not is_delayed(done_late, TODAY)
    assert not is_delayed(full_late, TODAY)
    assert not is_delayed(no_target, TODAY)
    assert not is_delayed(on_time, TODAY)

    assert compute_stats([late, done_late, full_late, no_target, on_time], today=TODAY).delayed == 1


def test_empty_registry():
    data = compute_stats([], today=TODAY).to_dict()
    assert data["total"] == 0
    assert data["totalAllocation"] == 0.0
    assert data["delayed"] == 0
