"""Tests for insighted.services.lifecycle."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from insighted.models.enums import AttachmentKind, LocationError, ProjectStatus
from insighted.schemas.project import Coordinates, LocationFix
from insighted.services.errors import (
    FieldLockedError,
    InvalidDraftError,
    LocationCaptureError,
    ProjectNotFoundError,
)
from insighted.services.lifecycle import (
    attach_file,
    create_project,
    realign_project,
    record_location,
    save_project,
    update_project,
)

from conftest import make_project


# ---------------------------------------------------------------------------
# Create / Update
# ---------------------------------------------------------------------------

class TestCreate:
    def test_assigns_id_and_prepends(self, store):
        first = create_project(store, make_project(project_name="First"))
        second = create_project(store, make_project(project_name="Second"))

        assert first.id and second.id and first.id != second.id
        assert [p.project_name for p in store.list_all()] == ["Second", "First"]

    def test_rejects_draft_with_id(self, store):
        with pytest.raises(InvalidDraftError):
            create_project(store, make_project(id="already-there"))
        assert store.list_all() == []

    def test_returned_record_is_a_copy(self, store):
        created = create_project(store, make_project())
        created.photos.append("tampered.jpg")

        assert store.get(created.id).photos == []


class TestUpdate:
    def test_replaces_in_place(self, store):
        a = create_project(store, make_project(project_name="A"))
        b = create_project(store, make_project(project_name="B"))
        c = create_project(store, make_project(project_name="C"))

        update_project(store, b.model_copy(update={"other_remarks": "Updated"}))

        assert [p.id for p in store.list_all()] == [c.id, b.id, a.id]
        assert store.get(b.id).other_remarks == "Updated"

    def test_unknown_id(self, store):
        with pytest.raises(ProjectNotFoundError):
            update_project(store, make_project(id="missing"))

    def test_requires_id(self, store):
        with pytest.raises(InvalidDraftError):
            update_project(store, make_project())

    def test_completed_basic_info_unchanged(self, store):
        created = create_project(store, make_project(status="Completed", accomplishment_percentage=100))

        saved = update_project(store, created.model_copy(update={"school_name": "Someplace Else"}))

        assert saved.school_name == "Lipa Central Elementary School"
        assert store.get(created.id).school_name == "Lipa Central Elementary School"

    def test_status_change_does_not_bypass_completed_lock(self, store):
        created = create_project(store, make_project(status="Completed", accomplishment_percentage=100))
        draft = created.model_copy(
            update={
                "status": ProjectStatus.NOT_YET_STARTED,
                "school_name": "Elsewhere",
                "project_allocation": 1,
                "contractor_name": "Other Corp",
            }
        )

        update_project(store, draft)

        stored = store.get(created.id)
        assert stored.status == ProjectStatus.NOT_YET_STARTED
        assert stored.school_name == "Lipa Central Elementary School"
        assert stored.project_allocation == Decimal("12500000")
        assert stored.contractor_name == "Tanauan Builders Corp."

    def test_create_then_update_changes_only_edited_fields(self, store):
        created = create_project(store, make_project())

        saved = update_project(
            store, created.model_copy(update={"accomplishment_percentage": 60, "other_remarks": "Walls done"})
        )

        expected = created.model_copy(update={"accomplishment_percentage": 60, "other_remarks": "Walls done"})
        assert saved == expected

    def test_update_with_unchanged_draft_is_idempotent(self, store):
        created = create_project(store, make_project())

        once = update_project(store, created)
        twice = update_project(store, once)

        assert once == created
        assert twice == created


def test_save_dispatches_on_id(store):
    created = save_project(store, make_project())
    assert len(store.list_all()) == 1

    save_project(store, created.model_copy(update={"other_remarks": "Again"}))
    assert len(store.list_all()) == 1
    assert store.get(created.id).other_remarks == "Again"


# ---------------------------------------------------------------------------
# Realign
# ---------------------------------------------------------------------------

class TestRealign:
    def _source(self):
        return make_project(
            id="src-1",
            status="Completed",
            accomplishment_percentage=100,
            actual_completion_date=date(2024, 11, 30),
            photos=["front.jpg", "roof.jpg"],
            documents=["pow.pdf"],
            certificate_url="certificate.pdf",
            coordinates=Coordinates(latitude=13.94, longitude=121.16, accuracy=8.0),
        )

    def test_resets_identity_and_progress(self):
        draft = realign_project(self._source(), today=date(2025, 2, 1))

        assert draft.id == ""
        assert draft.status == ProjectStatus.NOT_YET_STARTED
        assert draft.accomplishment_percentage == 0
        assert draft.status_as_of_date == date(2025, 2, 1)
        for name in ("region", "division", "barangay", "school_id", "school_name", "project_name", "project_id"):
            assert getattr(draft, name) == ""
        assert draft.actual_completion_date is None
        assert draft.coordinates is None
        assert draft.photos == []
        assert draft.documents == []
        assert draft.certificate_url is None

    def test_keeps_contract_and_timeline(self):
        source = self._source()
        draft = realign_project(source)

        for name in (
            "project_allocation",
            "year",
            "batch_of_funds",
            "contract_id",
            "contractor_name",
            "invitation_to_bid",
            "pre_submission_conference",
            "bid_opening",
            "resolution_to_award",
            "notice_to_proceed",
            "target_completion_date",
        ):
            assert getattr(draft, name) == getattr(source, name), name

    def test_defaults_as_of_date_to_today(self):
        assert realign_project(self._source()).status_as_of_date == date.today()

    def test_source_untouched(self):
        source = self._source()
        realign_project(source)
        assert source.photos == ["front.jpg", "roof.jpg"]
        assert source.id == "src-1"

    def test_saving_realigned_draft_creates_new_record(self, store):
        original = create_project(store, make_project())
        draft = realign_project(original).model_copy(update={"school_name": "New Site ES"})

        saved = save_project(store, draft)

        assert saved.id != original.id
        assert [p.id for p in store.list_all()] == [saved.id, original.id]
        assert saved.project_allocation == Decimal("12500000")


# ---------------------------------------------------------------------------
# Location / attachments
# ---------------------------------------------------------------------------

class TestRecordLocation:
    def test_stores_fix(self, store):
        created = create_project(store, make_project())
        taken = datetime(2024, 8, 2, 9, 30, tzinfo=timezone.utc)

        saved = record_location(
            store, created.id, LocationFix(latitude=13.94, longitude=121.16, accuracy=12.5, timestamp=taken)
        )

        assert saved.coordinates.latitude == 13.94
        assert saved.coordinates.accuracy == 12.5
        assert saved.coordinates.captured_at == taken

    def test_permission_denied_leaves_record_unchanged(self, store):
        created = create_project(store, make_project())

        with pytest.raises(LocationCaptureError, match="permission"):
            record_location(store, created.id, LocationFix(error=LocationError.PERMISSION_DENIED))

        assert store.get(created.id) == created

    def test_missing_coordinates(self, store):
        created = create_project(store, make_project())
        with pytest.raises(LocationCaptureError):
            record_location(store, created.id, LocationFix(latitude=13.9))

    def test_locked_before_work_starts(self, store):
        created = create_project(store, make_project(status="Under Procurement"))
        with pytest.raises(FieldLockedError):
            record_location(store, created.id, LocationFix(latitude=13.9, longitude=121.1))


class TestAttachFile:
    def test_photo_appended_while_ongoing(self, store):
        created = create_project(store, make_project(photos=["a.jpg"]))

        saved = attach_file(store, created.id, AttachmentKind.PHOTO, "b.jpg")

        assert saved.photos == ["a.jpg", "b.jpg"]

    def test_document_appended(self, store):
        created = create_project(store, make_project(status="For Final Inspection and Punchlisting"))
        assert attach_file(store, created.id, AttachmentKind.DOCUMENT, "punchlist.pdf").documents == ["punchlist.pdf"]

    def test_certificate_requires_completed(self, store):
        ongoing = create_project(store, make_project())
        with pytest.raises(FieldLockedError):
            attach_file(store, ongoing.id, AttachmentKind.CERTIFICATE, "coc.pdf")

        done = create_project(store, make_project(status="Completed", accomplishment_percentage=100))
        assert attach_file(store, done.id, AttachmentKind.CERTIFICATE, "coc.pdf").certificate_url == "coc.pdf"

    def test_photos_locked_once_completed(self, store):
        done = create_project(store, make_project(status="Completed", accomplishment_percentage=100))
        with pytest.raises(FieldLockedError):
            attach_file(store, done.id, AttachmentKind.PHOTO, "late.jpg")
