"""Derived chart/table data, recomputed from the cached records and roster on every render."""
from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence, Union

from ..attendance.model import AttendanceRecord, Statistics
from ..core.constants import UNKNOWN_LABEL
from ..core.enums import AttendanceStatus
from ..students.model import Student

PRESENT_COLOR = "#10b981"
ABSENT_COLOR = "#ef4444"


def attendance_rate(present: int, total: int) -> Union[str, int]:
    """Percentage with one decimal as a string ("75.0"), or ``0`` when total is 0."""
    if total <= 0:
        return 0
    return f"{present / total * 100:.1f}"


def count_statuses(records: Iterable[AttendanceRecord]) -> tuple[int, int]:
    counts = Counter(r.status for r in records)
    return counts[AttendanceStatus.PRESENT], counts[AttendanceStatus.ABSENT]


def statistics_for(records: Iterable[AttendanceRecord]) -> Statistics:
    """Totals for a report the server sent without statistics."""
    present, absent = count_statuses(records)
    total = present + absent
    return Statistics(total=total, present=present, absent=absent, attendance_rate=attendance_rate(present, total))


def status_pie(present: int, absent: int) -> list[dict]:
    return [
        {"name": "Present", "value": present, "color": PRESENT_COLOR},
        {"name": "Absent", "value": absent, "color": ABSENT_COLOR},
    ]


def class_distribution(students: Iterable[Student]) -> list[dict]:
    counts: dict[str, int] = {}
    for s in students:
        name = s.class_name or UNKNOWN_LABEL
        counts[name] = counts.get(name, 0) + 1
    return [{"name": name, "value": value} for name, value in counts.items()]


def group_by_class(
    students: Sequence[Student],
    records: Iterable[AttendanceRecord],
    *,
    only_class: Optional[str] = None,
) -> list[dict]:
    """Per-class totals; the rate is present records over students in the class.

    Records whose student is not on the roster are left out.
    """
    groups: dict[str, dict] = {}
    for s in students:
        if only_class and s.class_name != only_class:
            continue
        g = groups.setdefault(s.class_name, {"total": 0, "present": 0, "absent": 0})
        g["total"] += 1

    by_id = {s.id: s for s in students}
    for r in records:
        student = by_id.get(r.student_id)
        if student is None or student.class_name not in groups:
            continue
        groups[student.class_name][r.status.value.lower()] += 1

    return [
        {
            "className": name,
            "total": g["total"],
            "present": g["present"],
            "absent": g["absent"],
            "attendanceRate": attendance_rate(g["present"], g["total"]),
        }
        for name, g in groups.items()
    ]


def group_by_date(records: Iterable[AttendanceRecord], *, student_id: Optional[int] = None) -> list[dict]:
    groups: dict[str, dict] = {}
    for r in records:
        if student_id is not None and r.student_id != student_id:
            continue
        key = r.attendance_date.isoformat() if r.attendance_date else UNKNOWN_LABEL
        g = groups.setdefault(key, {"present": 0, "absent": 0})
        g[r.status.value.lower()] += 1

    return [{"date": d, "present": g["present"], "absent": g["absent"]} for d, g in sorted(groups.items())]


def subjects(records: Iterable[AttendanceRecord]) -> list[str]:
    return sorted({r.subject for r in records if r.subject})


def record_rows(records: Iterable[AttendanceRecord], students: Sequence[Student]) -> list[dict]:
    """Table rows joining records to the roster; missing students render as Unknown."""
    by_id = {s.id: s for s in students}
    rows = []
    for r in records:
        student = by_id.get(r.student_id)
        if student is not None:
            name, roll_no, class_name = student.name, student.roll_no, student.class_name
        elif r.student is not None:
            name, roll_no, class_name = r.student.name, r.student.roll_no, r.student.class_name or ""
        else:
            name, roll_no, class_name = UNKNOWN_LABEL, "", ""

        rows.append(
            {
                "student_id": r.student_id,
                "student_name": name or UNKNOWN_LABEL,
                "roll_no": roll_no,
                "class_name": class_name,
                "date": r.attendance_date.isoformat() if r.attendance_date else "",
                "subject": r.subject,
                "status": r.status.value,
                "remarks": r.remarks or "",
            }
        )
    return rows
