from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.model import AttendanceRecord, ReportFilters
from ..attendance.store import AttendanceReport, AttendanceStore
from ..common.datetime_utils import today_local
from ..core.constants import RECENT_ACTIVITY_LIMIT
from ..reports import aggregation
from ..students.store import StudentStore


@dataclass(frozen=True)
class DashboardData:
    total_students: int
    present_today: int
    absent_today: int
    attendance_rate: object
    class_data: list[dict]
    pie: list[dict]
    recent: list[dict]


class DashboardService:
    def __init__(self, students: StudentStore, attendance: AttendanceStore):
        self._students = students
        self._attendance = attendance

    def load_today(self) -> DashboardData:
        today = today_local().isoformat()
        report = self._attendance.get_report(ReportFilters(start_date=today, end_date=today))
        return self.build(report)

    def build(self, report: Optional[AttendanceReport] = None) -> DashboardData:
        students = self._students.students
        records: list[AttendanceRecord] = self._attendance.records if report is None else list(report.records)
        present, absent = aggregation.count_statuses(records)

        return DashboardData(
            total_students=len(students),
            present_today=present,
            absent_today=absent,
            # measured against the whole roster, not the number of records
            attendance_rate=aggregation.attendance_rate(present, len(students)),
            class_data=aggregation.class_distribution(students),
            pie=aggregation.status_pie(present, absent),
            recent=aggregation.record_rows(records[:RECENT_ACTIVITY_LIMIT], students),
        )
