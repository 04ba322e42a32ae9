from datetime import date, datetime

import pytest

from src.school_attendance.school_attendance.attendance.model import EditableEntry
from src.school_attendance.school_attendance.attendance.reconciliation import (
    AttendanceSheet,
    SheetContext,
    attendance_stats,
    build_editable_state,
    bulk_set_status,
    compute_submission,
    set_field,
    unmarked_students,
)
from src.school_attendance.school_attendance.core.enums import AttendanceStatus
from src.school_attendance.school_attendance.core.exceptions import ValidationError
from tests.fakes import make_record, make_student

DAY = date(2026, 10, 17)
CTX = SheetContext(teacher_id=10, class_id=1, attendance_date=DAY)
STAMP = datetime(2026, 10, 17, 9, 30)


def test_build_editable_state_empty_when_no_records(roster):
    editable, existing_ids = build_editable_state(roster, [])

    assert editable == {}
    assert existing_ids == {}


def test_build_editable_state_maps_existing_records(roster):
    records = [make_record(99, 2, AttendanceStatus.ABSENT, on=DAY, notes="sick")]

    editable, existing_ids = build_editable_state(roster, records)

    assert editable == {2: EditableEntry(status=AttendanceStatus.ABSENT, notes="sick")}
    assert existing_ids == {2: 99}


def test_build_editable_state_ignores_students_off_the_roster(roster):
    records = [make_record(50, 7, AttendanceStatus.PRESENT, on=DAY)]

    editable, existing_ids = build_editable_state(roster, records)

    assert editable == {}
    assert existing_ids == {}


def test_new_mark_becomes_an_insert(roster):
    editable = set_field({}, 1, "status", "present")

    submission = compute_submission(editable, {}, CTX, updated_at=STAMP)

    assert len(submission.inserts) == 1
    insert = submission.inserts[0]
    assert insert.student_id == 1
    assert insert.status == AttendanceStatus.PRESENT
    assert insert.class_id == 1
    assert insert.teacher_id == 10
    assert insert.attendance_date == DAY
    assert insert.notes is None
    assert submission.updates == ()


def test_changed_mark_becomes_an_update(roster):
    editable, existing_ids = build_editable_state(roster, [make_record(99, 2, AttendanceStatus.ABSENT, on=DAY)])
    editable = set_field(editable, 2, "status", "late")

    submission = compute_submission(editable, existing_ids, CTX, updated_at=STAMP)

    assert submission.inserts == ()
    assert len(submission.updates) == 1
    update = submission.updates[0]
    assert update.record_id == 99
    assert update.student_id == 2
    assert update.status == AttendanceStatus.LATE
    assert update.updated_at == STAMP


def test_unchanged_existing_record_is_still_updated(roster):
    editable, existing_ids = build_editable_state(roster, [make_record(99, 2, AttendanceStatus.ABSENT, on=DAY)])

    submission = compute_submission(editable, existing_ids, CTX, updated_at=STAMP)

    assert [u.record_id for u in submission.updates] == [99]
    assert submission.total == 1


def test_entries_without_status_are_skipped(roster):
    editable = set_field({}, 1, "notes", "arrived with parent")

    submission = compute_submission(editable, {}, CTX, updated_at=STAMP)

    assert submission.total == 0


def test_empty_notes_are_stored_as_null(roster):
    editable = set_field({}, 1, "status", "present")
    editable = set_field(editable, 1, "notes", "")

    submission = compute_submission(editable, {}, CTX, updated_at=STAMP)

    assert submission.inserts[0].notes is None


def test_compute_submission_is_idempotent(roster):
    editable, existing_ids = build_editable_state(roster, [make_record(99, 2, AttendanceStatus.ABSENT, on=DAY)])
    editable = set_field(editable, 1, "status", "present")

    first = compute_submission(editable, existing_ids, CTX, updated_at=STAMP)
    second = compute_submission(editable, existing_ids, CTX, updated_at=STAMP)

    assert first == second


def test_set_field_does_not_mutate_input():
    original = {1: EditableEntry(status=AttendanceStatus.PRESENT, notes="")}

    updated = set_field(original, 1, "notes", "left early")

    assert original[1].notes == ""
    assert updated[1] == EditableEntry(status=AttendanceStatus.PRESENT, notes="left early")


def test_set_field_keeps_the_other_field():
    editable = set_field({}, 1, "notes", "bus late")
    editable = set_field(editable, 1, "status", "late")

    assert editable[1] == EditableEntry(status=AttendanceStatus.LATE, notes="bus late")


def test_set_field_can_clear_status():
    editable = set_field({}, 1, "status", "present")
    editable = set_field(editable, 1, "status", "")

    assert editable[1].status is None


@pytest.mark.parametrize("field,value", [("teacher", "x"), ("status", "excused")])
def test_set_field_rejects_unknown_field_or_status(field, value):
    with pytest.raises(ValidationError):
        set_field({}, 1, field, value)


def test_bulk_set_status_covers_roster_and_preserves_notes(roster):
    editable = set_field({}, 2, "notes", "sick")
    editable = set_field(editable, 2, "status", "absent")

    result = bulk_set_status(editable, roster, "present")

    assert list(result) == [1, 2]
    assert result[1] == EditableEntry(status=AttendanceStatus.PRESENT, notes="")
    assert result[2] == EditableEntry(status=AttendanceStatus.PRESENT, notes="sick")


def test_bulk_set_status_requires_a_status(roster):
    with pytest.raises(ValidationError):
        bulk_set_status({}, roster, None)


def test_unmarked_and_stats(roster):
    carl = make_student(3, "Carl", "Cole")
    roster = [*roster, carl]
    editable = set_field({}, 1, "status", "present")
    editable = set_field(editable, 3, "status", "late")

    assert unmarked_students(roster, editable) == [roster[1]]
    assert attendance_stats(roster, editable) == {"present": 1, "late": 1, "absent": 0, "unmarked": 1}


class TestAttendanceSheet:
    def test_starts_clean_and_edits_make_it_dirty(self, roster):
        sheet = AttendanceSheet.load(CTX, roster, [])
        assert sheet.dirty is False

        sheet.set_field(1, "status", "present")

        assert sheet.dirty is True
        assert sheet.editable[1].status == AttendanceStatus.PRESENT

    def test_mark_saved_clears_dirty(self, roster):
        sheet = AttendanceSheet.load(CTX, roster, [])
        sheet.bulk_set_status("late")

        sheet.mark_saved()

        assert sheet.dirty is False

    def test_rejects_students_off_the_roster(self, roster):
        sheet = AttendanceSheet.load(CTX, roster, [])

        with pytest.raises(ValidationError):
            sheet.set_field(42, "status", "present")
        assert sheet.dirty is False

    def test_targets(self, roster):
        sheet = AttendanceSheet.load(CTX, roster, [])

        assert sheet.targets(1, DAY)
        assert not sheet.targets(2, DAY)
        assert not sheet.targets(1, date(2026, 10, 16))

    def test_exposed_maps_are_copies(self, roster):
        sheet = AttendanceSheet.load(CTX, roster, [make_record(99, 2, AttendanceStatus.ABSENT, on=DAY)])

        sheet.editable.clear()
        sheet.existing_ids.clear()

        assert sheet.existing_ids == {2: 99}
        assert 2 in sheet.editable

    def test_to_public(self, roster):
        sheet = AttendanceSheet.load(CTX, roster, [make_record(99, 2, AttendanceStatus.ABSENT, on=DAY, notes="sick")])

        data = sheet.to_public()

        assert data["attendance_date"] == "2026-10-17"
        assert data["dirty"] is False
        assert data["stats"]["absent"] == 1
        assert data["stats"]["unmarked"] == 1
        assert [row["student_id"] for row in data["students"]] == [1, 2]
        assert data["students"][0]["status"] is None
        assert data["students"][1] == {
            "student_id": 2,
            "student_number": "S-0002",
            "first_name": "Bob",
            "last_name": "Brown",
            "status": "absent",
            "notes": "sick",
            "has_record": True,
        }
