from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.model import ReportFilters, Statistics
from ..attendance.store import AttendanceReport, AttendanceStore
from ..core.enums import ReportType
from ..students.model import Student
from ..students.store import StudentStore
from . import aggregation


@dataclass(frozen=True)
class ReportData:
    report_type: ReportType
    filters: ReportFilters
    selected_student: Optional[Student]
    rows: list[dict]
    chart: list[dict]
    chart_key: str
    pie: list[dict]
    statistics: Statistics
    subjects: list[str]
    classes: list[str]


class ReportService:
    """Reports page: fetches through the attendance store, then derives chart/table data."""

    def __init__(self, students: StudentStore, attendance: AttendanceStore):
        self._students = students
        self._attendance = attendance

    def _selected_student(self, filters: ReportFilters) -> Optional[Student]:
        if filters.student_id.isdigit():
            return self._students.get(int(filters.student_id))
        return None

    def load(self, report_type: ReportType, filters: ReportFilters) -> ReportData:
        selected = self._selected_student(filters)
        if report_type == ReportType.STUDENT and selected:
            report = self._attendance.get_student_attendance(selected.id, filters)
        else:
            report = self._attendance.get_report(filters)
        return self.build(report_type, filters, report)

    def build(
        self,
        report_type: ReportType,
        filters: ReportFilters,
        report: Optional[AttendanceReport] = None,
    ) -> ReportData:
        """Page data for ``report``; without one, the store's shared cache is used."""
        students = self._students.students
        if report is None:
            records = self._attendance.records
            statistics = self._attendance.statistics
        else:
            records = report.records
            statistics = report.statistics or aggregation.statistics_for(records)
        selected = self._selected_student(filters)

        if report_type == ReportType.STUDENT and selected:
            chart = aggregation.group_by_date(records, student_id=selected.id)
            chart_key = "date"
        else:
            only_class = filters.class_name if report_type == ReportType.CLASS else None
            chart = aggregation.group_by_class(students, records, only_class=only_class or None)
            chart_key = "className"

        return ReportData(
            report_type=report_type,
            filters=filters,
            selected_student=selected,
            rows=aggregation.record_rows(records, students),
            chart=chart,
            chart_key=chart_key,
            pie=aggregation.status_pie(statistics.present, statistics.absent),
            statistics=statistics,
            subjects=aggregation.subjects(records),
            classes=self._students.class_names(),
        )
