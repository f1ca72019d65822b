from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local, parse_api_date
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class StudentRef:
    """Student summary the API may embed in an attendance record."""

    id: Optional[int]
    name: str
    roll_no: str
    class_name: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    id: Optional[int]
    student_id: int
    attendance_date: Optional[date]
    subject: str
    status: AttendanceStatus
    remarks: Optional[str] = None
    student: Optional[StudentRef] = None

    @classmethod
    def from_api(cls, data: dict) -> "AttendanceRecord":
        embedded = data.get("student")
        student = None
        if isinstance(embedded, dict):
            student = StudentRef(
                id=embedded.get("id"),
                name=str(embedded.get("name") or ""),
                roll_no=str(embedded.get("rollNo") or ""),
                class_name=embedded.get("className"),
            )
        student_id = data.get("studentId")
        if student_id is None and student is not None:
            student_id = student.id
        return cls(
            id=data.get("id"),
            student_id=int(student_id) if student_id is not None else 0,
            attendance_date=parse_api_date(data.get("attendanceDate") or data.get("date")),
            subject=str(data.get("subject") or ""),
            status=AttendanceStatus(str(data.get("status", "")).upper()),
            remarks=data.get("remarks") or None,
            student=student,
        )


@dataclass(frozen=True)
class Statistics:
    """Server-computed aggregate mirrored into the store."""

    total: int = 0
    present: int = 0
    absent: int = 0
    attendance_rate: object = 0

    @classmethod
    def from_api(cls, data: dict) -> "Statistics":
        return cls(
            total=int(data.get("total") or 0),
            present=int(data.get("present") or 0),
            absent=int(data.get("absent") or 0),
            attendance_rate=data.get("attendanceRate") or 0,
        )


@dataclass(frozen=True)
class AttendanceSession:
    session_id: Optional[str]
    subject: str
    class_name: Optional[str] = None
    started_at: datetime = field(default_factory=now_local)

    @classmethod
    def from_api(cls, data: dict, *, subject: str, class_name: Optional[str]) -> "AttendanceSession":
        session_id = data.get("sessionId")
        return cls(
            session_id=str(session_id) if session_id is not None else None,
            subject=str(data.get("subject") or subject),
            class_name=data.get("className") or class_name or None,
            started_at=now_local(),
        )


@dataclass(frozen=True)
class MarkEntry:
    student_id: int
    status: AttendanceStatus
    remarks: str = ""

    def to_api(self) -> dict:
        return {"studentId": int(self.student_id), "status": self.status.value, "remarks": self.remarks}


@dataclass(frozen=True)
class ReportFilters:
    """Filters accepted by ``/attendance/report``; blank means not filtered."""

    start_date: str = ""
    end_date: str = ""
    class_name: str = ""
    subject: str = ""
    status: str = ""
    student_id: str = ""

    @classmethod
    def from_mapping(cls, data) -> "ReportFilters":
        return cls(
            start_date=(data.get("start_date") or "").strip(),
            end_date=(data.get("end_date") or "").strip(),
            class_name=(data.get("class_name") or "").strip(),
            subject=(data.get("subject") or "").strip(),
            status=(data.get("status") or "").strip().upper(),
            student_id=str(data.get("student_id") or "").strip(),
        )

    def to_params(self) -> dict:
        params = {
            "startDate": self.start_date,
            "endDate": self.end_date,
            "className": self.class_name,
            "subject": self.subject,
            "status": self.status,
            "studentId": self.student_id,
        }
        return {k: v for k, v in params.items() if v}

    def to_student_params(self) -> dict:
        params = {"startDate": self.start_date, "endDate": self.end_date, "subject": self.subject}
        return {k: v for k, v in params.items() if v}

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date,
            "end_date": self.end_date,
            "class_name": self.class_name,
            "subject": self.subject,
            "status": self.status,
            "student_id": self.student_id,
        }
