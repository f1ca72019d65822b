from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status as stored by the API."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"


class MarkingState(str, Enum):
    """Lifecycle of a marking session held by the session page."""

    IDLE = "idle"
    ACTIVE = "active"
    SAVING = "saving"
    SAVE_FAILED = "save_failed"


class ReportType(str, Enum):
    OVERVIEW = "overview"
    STUDENT = "student"
    CLASS = "class"
