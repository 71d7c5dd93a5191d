"""Shared pytest fixtures for the InsightEd test suite."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from insighted.config import get_settings
from insighted.dependencies import get_advisory_guard, get_store
from insighted.models.enums import ProjectStatus
from insighted.schemas.project import Project
from insighted.services.advisory import AdvisoryGuard
from insighted.services.store import InMemoryProjectStore


def make_project(**overrides) -> Project:
    """A fully filled-in project draft (no id unless given)."""
    data = {
        "region": "Region IV-A",
        "division": "Batangas",
        "barangay": "Poblacion",
        "school_id": "107654",
        "school_name": "Lipa Central Elementary School",
        "project_name": "Construction of 2-Storey 4-Classroom Building",
        "project_id": "P-2024-001",
        "contract_id": "C-24-0192",
        "year": 2024,
        "batch_of_funds": "Batch 1",
        "invitation_to_bid": date(2024, 1, 15),
        "pre_submission_conference": date(2024, 1, 22),
        "bid_opening": date(2024, 2, 5),
        "resolution_to_award": date(2024, 2, 20),
        "notice_to_proceed": date(2024, 3, 1),
        "target_completion_date": date(2024, 12, 15),
        "project_allocation": Decimal("12500000"),
        "contractor_name": "Tanauan Builders Corp.",
        "status": ProjectStatus.ONGOING,
        "accomplishment_percentage": 45,
        "status_as_of_date": date(2024, 8, 1),
        "other_remarks": "Roofing works in progress",
    }
    data.update(overrides)
    return Project(**data)


def anthropic_message(text: str) -> SimpleNamespace:
    """Minimal stand-in for an anthropic Message."""
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        usage=SimpleNamespace(input_tokens=120, output_tokens=40),
    )


def mock_anthropic_client(*, text: str | None = None, error: Exception | None = None) -> MagicMock:
    client = MagicMock()
    if error is not None:
        client.messages.create = AsyncMock(side_effect=error)
    else:
        client.messages.create = AsyncMock(return_value=anthropic_message(text or ""))
    return client


@pytest.fixture(autouse=True)
def _settings_env(monkeypatch):
    """Isolate every test from the developer's environment."""
    monkeypatch.setenv("DATABASE_URL", "")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store():
    return InMemoryProjectStore()


@pytest.fixture
def guard():
    return AdvisoryGuard()


@pytest.fixture
def client(store, guard):
    from insighted.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_advisory_guard] = lambda: guard
    yield TestClient(app)
    app.dependency_overrides.clear()
