from __future__ import annotations

from datetime import date
from typing import Optional
from urllib.parse import urlparse

import pytest
import requests

from attendance_dashboard.container import build_container

API_BASE_URL = "http://testserver/api"


class FakeResponse:
    def __init__(self, status_code: int, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


def ok(data=None, message: Optional[str] = None, status: int = 200) -> FakeResponse:
    return FakeResponse(status, {"success": True, "data": data, "message": message})


def fail(status: int, message: Optional[str] = None) -> FakeResponse:
    return FakeResponse(status, {"success": False, "data": None, "message": message})


class FakeAttendanceBackend:
    """In-memory stand-in for the REST API, plugged in as the ``requests`` session."""

    def __init__(self):
        self.students: dict[int, dict] = {}
        self.records: list[dict] = []
        self.calls: list[tuple[str, str, Optional[dict], Optional[dict]]] = []
        self._next_student_id = 1
        self._next_record_id = 1
        self._next_session_id = 1
        self._queued: list = []

    # test helpers
    def fail_next(self, status: Optional[int] = None, message: Optional[str] = None, *, exc=None) -> None:
        self._queued.append(exc or fail(status or 500, message))

    def respond_next(self, response: FakeResponse) -> None:
        self._queued.append(response)

    def add_student(self, **fields) -> dict:
        sid = self._next_student_id
        self._next_student_id += 1
        data = {
            "id": sid,
            "rollNo": fields.get("rollNo", str(100 + sid)),
            "name": fields.get("name", f"Student {sid}"),
            "email": fields.get("email", f"s{sid}@school.test"),
            "parentEmail": fields.get("parentEmail", f"p{sid}@school.test"),
            "className": fields.get("className", "10A"),
        }
        self.students[sid] = data
        return data

    def add_record(self, student_id: int, status: str, subject: str = "Math", on: Optional[date] = None) -> dict:
        rec = {
            "id": self._next_record_id,
            "studentId": student_id,
            "attendanceDate": (on or date.today()).isoformat(),
            "subject": subject,
            "status": status,
            "remarks": "",
        }
        self._next_record_id += 1
        self.records.append(rec)
        return rec

    def paths(self) -> list[str]:
        return [f"{method} {path}" for method, path, _, _ in self.calls]

    # requests.Session protocol
    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        path = urlparse(url).path
        if path.startswith("/api"):
            path = path[len("/api"):]
        self.calls.append((method, path, params, json))

        if self._queued:
            queued = self._queued.pop(0)
            if isinstance(queued, Exception):
                raise queued
            return queued

        parts = [p for p in path.split("/") if p]
        return self._route(method, parts, params or {}, json or {})

    def _route(self, method, parts, params, body):
        if parts == ["health"]:
            return ok({"status": "ok"})

        if parts[:1] == ["students"]:
            if len(parts) == 1 and method == "GET":
                return ok(list(self.students.values()))
            if len(parts) == 1 and method == "POST":
                if any(s["rollNo"] == body.get("rollNo") for s in self.students.values()):
                    return fail(400, "Roll number already exists")
                return ok(self.add_student(**body), status=201)
            sid = int(parts[1])
            if sid not in self.students:
                return fail(404, "Student not found")
            if method == "GET":
                return ok(self.students[sid])
            if method == "PUT":
                self.students[sid] = {**self.students[sid], **body, "id": sid}
                return ok(self.students[sid])
            if method == "DELETE":
                del self.students[sid]
                return ok(None)

        if parts == ["attendance", "start"]:
            if not body.get("subject"):
                return fail(400, "Subject is required")
            session_id = f"S{self._next_session_id}"
            self._next_session_id += 1
            return ok({"sessionId": session_id, "subject": body["subject"], "className": body.get("className")})

        if parts == ["attendance", "mark"]:
            rec = self.add_record(body["studentId"], body["status"], body.get("subject", ""))
            return ok(self._with_student(rec), status=201)

        if parts == ["attendance", "bulk"]:
            for entry in body.get("attendanceData", []):
                rec = self.add_record(entry["studentId"], entry["status"], body.get("subject", ""))
                rec["remarks"] = entry.get("remarks", "")
            return ok({"successful": len(body.get("attendanceData", [])), "failed": 0})

        if parts == ["attendance", "report"]:
            return ok(self._report(self._filter(self.records, params)))

        if parts[:2] == ["attendance", "student"]:
            sid = int(parts[2])
            rows = [r for r in self._filter(self.records, params) if r["studentId"] == sid]
            return ok(self._report(rows))

        return fail(404, "Route not found")

    def _filter(self, records, params):
        out = []
        for r in records:
            student = self.students.get(r["studentId"], {})
            if params.get("startDate") and r["attendanceDate"] < params["startDate"]:
                continue
            if params.get("endDate") and r["attendanceDate"] > params["endDate"]:
                continue
            if params.get("subject") and r["subject"] != params["subject"]:
                continue
            if params.get("status") and r["status"] != params["status"]:
                continue
            if params.get("className") and student.get("className") != params["className"]:
                continue
            if params.get("studentId") and str(r["studentId"]) != str(params["studentId"]):
                continue
            out.append(r)
        return out

    def _with_student(self, rec):
        student = self.students.get(rec["studentId"])
        if student:
            return {**rec, "student": {"id": student["id"], "name": student["name"], "rollNo": student["rollNo"]}}
        return dict(rec)

    def _report(self, rows):
        present = sum(1 for r in rows if r["status"] == "PRESENT")
        total = len(rows)
        return {
            "records": [self._with_student(r) for r in rows],
            "statistics": {
                "total": total,
                "present": present,
                "absent": total - present,
                "attendanceRate": f"{present / total * 100:.1f}" if total else 0,
            },
        }


class RecordingNotifier:
    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    @property
    def errors(self) -> list[str]:
        return [m for level, m in self.messages if level == "error"]


@pytest.fixture
def backend() -> FakeAttendanceBackend:
    return FakeAttendanceBackend()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def container(backend, notifier):
    return build_container(api_base_url=API_BASE_URL, http_session=backend, notifier=notifier)


@pytest.fixture
def app(backend, monkeypatch):
    from attendance_dashboard.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("API_BASE_URL", API_BASE_URL)
    return create_app(http_session=backend)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def network_down():
    return requests.ConnectionError("connection refused")
