from __future__ import annotations

from datetime import datetime

import pytest

from attendance_dashboard.api.client import ApiResponse
from attendance_dashboard.attendance.model import MarkEntry, ReportFilters
from attendance_dashboard.attendance.store import AttendanceStore
from attendance_dashboard.core.enums import AttendanceStatus
from attendance_dashboard.core.exceptions import ApiError, ServerError, ValidationError

from ..conftest import FakeResponse, ok


@pytest.fixture
def store(container) -> AttendanceStore:
    return container.attendance_store


@pytest.mark.parametrize("subject", ["", "   ", None])
def test_start_session_requires_subject_without_request(store, backend, subject):
    with pytest.raises(ValidationError):
        store.start_session(subject)
    assert backend.calls == []
    assert store.current_session is None


def test_start_session_keeps_handle(store, backend, notifier):
    session = store.start_session(" Math ", "10A")

    assert session.session_id == "S1"
    assert session.subject == "Math"
    assert session.class_name == "10A"
    assert store.current_session == session
    assert store.state.loading is False
    _, _, _, payload = backend.calls[-1]
    assert payload == {"subject": "Math", "className": "10A"}
    assert ("success", "Attendance session started") in notifier.messages


def test_mark_bulk_sends_one_request_and_clears_session(store, backend, notifier):
    backend.add_student()
    backend.add_student()
    session = store.start_session("Math")

    count = store.mark_bulk(
        [MarkEntry(1, AttendanceStatus.PRESENT), MarkEntry(2, AttendanceStatus.ABSENT, "sick")],
        "Math",
        session.session_id,
    )

    assert count == 2
    assert store.current_session is None
    assert backend.paths()[-1] == "POST /attendance/bulk"
    _, _, _, payload = backend.calls[-1]
    assert payload == {
        "attendanceData": [
            {"studentId": 1, "status": "PRESENT", "remarks": ""},
            {"studentId": 2, "status": "ABSENT", "remarks": "sick"},
        ],
        "subject": "Math",
        "sessionId": "S1",
    }
    assert ("success", "Attendance marked for 2 students") in notifier.messages


def test_mark_bulk_failure_keeps_session(store, backend, notifier):
    store.start_session("Math")
    backend.fail_next(500)

    with pytest.raises(ServerError):
        store.mark_bulk([MarkEntry(1, AttendanceStatus.ABSENT)], "Math", "S1")

    assert store.current_session is not None
    assert notifier.errors == ["Server error. Please try again later."]


def test_mark_bulk_rejects_empty_batch(store, backend):
    with pytest.raises(ValidationError):
        store.mark_bulk([], "Math")
    assert backend.calls == []


def test_mark_single_record_appends(store, backend):
    backend.add_student(name="Asha")

    record = store.mark_attendance(student_id=1, status=AttendanceStatus.ABSENT, subject="Math")

    assert record.status == AttendanceStatus.ABSENT
    assert record.student.name == "Asha"
    assert store.records == [record]


def test_report_replaces_records_and_statistics(store, backend):
    backend.add_student()
    backend.add_record(1, "PRESENT", "Math")
    backend.add_record(1, "ABSENT", "Science")
    store.mark_attendance(student_id=1, status=AttendanceStatus.PRESENT, subject="Art")

    report = store.get_report(ReportFilters(subject="Math"))

    assert [r.subject for r in store.records] == ["Math"]
    assert report.statistics.total == 1
    assert store.statistics.present == 1
    assert store.statistics.attendance_rate == "100.0"
    _, _, params, _ = backend.calls[-1]
    assert params == {"subject": "Math"}


def test_list_shaped_report_keeps_previous_statistics(store, backend):
    backend.add_student()
    backend.add_record(1, "PRESENT")
    store.get_report()
    before = store.statistics

    backend.respond_next(ok([{"studentId": 1, "status": "absent", "subject": "Math"}]))
    store.get_report()

    assert store.statistics == before
    assert store.records[0].status == AttendanceStatus.ABSENT


def test_student_history_uses_student_endpoint(store, backend):
    backend.add_student()
    backend.add_student()
    backend.add_record(1, "PRESENT")
    backend.add_record(2, "ABSENT")

    store.get_student_attendance(2, ReportFilters(subject="Math", class_name="ignored"))

    assert backend.paths()[-1] == "GET /attendance/student/2"
    _, _, params, _ = backend.calls[-1]
    assert params == {"subject": "Math"}
    assert [r.student_id for r in store.records] == [2]


def test_report_failure_records_error_and_keeps_cache(store, backend, notifier):
    backend.add_student()
    backend.add_record(1, "PRESENT")
    store.get_report()
    backend.fail_next(404)

    with pytest.raises(ApiError):
        store.get_report(ReportFilters(subject="X"))

    assert len(store.records) == 1
    assert store.state.error == "Resource not found"
    assert notifier.errors == ["Resource not found"]


def test_unsuccessful_envelope_is_an_error(store, backend):
    backend.respond_next(FakeResponse(200, {"success": False}))
    with pytest.raises(ApiError) as exc:
        store.get_report()
    assert str(exc.value) == "Invalid response format"


class _SlowFirstApi:
    """Answers the first report only after a second one was issued and applied."""

    def __init__(self):
        self.store = None
        self.calls = 0

    def get_report(self, params):
        self.calls += 1
        if self.calls == 1:
            self.store.get_report(ReportFilters(subject="Science"))
            return self._response("Math")
        return self._response(params.get("subject"))

    @staticmethod
    def _response(subject):
        return ApiResponse(
            status_code=200,
            success=True,
            data={"records": [{"id": 1, "studentId": 1, "subject": subject, "status": "PRESENT"}]},
        )


def test_stale_report_does_not_overwrite_newer_one(notifier):
    api = _SlowFirstApi()
    store = AttendanceStore(api, notifier)
    api.store = store

    stale = store.get_report(ReportFilters(subject="Math"))

    assert stale.records[0].subject == "Math"
    assert [r.subject for r in store.records] == ["Science"]


@pytest.mark.parametrize(
    "record",
    [
        {"id": 1, "studentId": 1, "subject": "Math", "status": "LATE"},
        {"id": 1, "studentId": 1, "subject": "Math"},
        {"id": 1, "studentId": "abc", "subject": "Math", "status": "PRESENT"},
        "not-a-record",
    ],
)
def test_malformed_record_is_an_invalid_response(store, backend, notifier, record):
    backend.respond_next(ok({"records": [record], "statistics": {"total": 1}}))

    with pytest.raises(ApiError) as exc:
        store.get_report()

    assert str(exc.value) == "Invalid response format"
    assert store.state.loading is False
    assert store.state.error == "Invalid response format"
    assert store.records == []
    assert notifier.errors == ["Invalid response format"]


def test_malformed_single_mark_leaves_records(store, backend):
    backend.respond_next(ok({"id": 5, "studentId": 1, "subject": "Math", "status": "?"}))

    with pytest.raises(ApiError):
        store.mark_attendance(student_id=1, status=AttendanceStatus.PRESENT, subject="Math")

    assert store.records == []


def test_clearing_another_session_keeps_the_current_one(store, backend):
    store.start_session("Math")

    store.clear_session("S9")
    assert store.current_session.session_id == "S1"

    store.mark_bulk([MarkEntry(1, AttendanceStatus.PRESENT)], "Science", "S9")
    assert store.current_session.session_id == "S1"

    store.clear_session("S1")
    assert store.current_session is None


def test_session_start_time_uses_local_clock(store, monkeypatch):
    started = datetime(2026, 3, 2, 8, 30)
    monkeypatch.setattr("attendance_dashboard.attendance.model.now_local", lambda: started)

    assert store.start_session("Math").started_at == started
