from __future__ import annotations

from dataclasses import asdict

from flask import Flask, abort, current_app, jsonify, render_template, request

from ..attendance.model import ReportFilters
from ..container import Container
from ..core.enums import AttendanceStatus, ReportType
from ..core.exceptions import ApiError
from .export import rows_to_csv, rows_to_xlsx

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    students = container.student_store
    reports = container.report_service

    def _report_type() -> ReportType:
        try:
            return ReportType(request.args.get("report_type") or ReportType.OVERVIEW.value)
        except ValueError:
            return ReportType.OVERVIEW

    def _load():
        """Fetch the report for the current query string; on API failure use the cache."""
        try:
            students.ensure_loaded()
        except ApiError as e:
            current_app.logger.info("Roster load failed: %s", e)

        report_type = _report_type()
        filters = ReportFilters.from_mapping(request.args)
        try:
            return reports.load(report_type, filters)
        except ApiError as e:
            current_app.logger.info("Report fetch failed: %s", e)
            return reports.build(report_type, filters)

    @app.route("/reports", endpoint="reports")
    def reports_page():
        data = _load()
        return render_template(
            "reports/index.html",
            report=data,
            students=students.students,
            statuses=[s.value for s in AttendanceStatus],
            report_types=[t.value for t in ReportType],
            active_page="reports",
        )

    @app.route("/reports/export/<fmt>", endpoint="reports_export")
    def reports_export(fmt: str):
        if fmt not in {"csv", "xlsx"}:
            abort(404)

        data = _load()
        if fmt == "csv":
            body, mimetype = rows_to_csv(data.rows), "text/csv"
        else:
            body, mimetype = rows_to_xlsx(data.rows), XLSX_MIMETYPE

        return app.response_class(
            body,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename=attendance_report.{fmt}"},
        )

    @app.route("/api/reports/chart", endpoint="api_reports_chart")
    def api_reports_chart():
        data = _load()
        return jsonify(
            {
                "success": True,
                "reportType": data.report_type.value,
                "chartKey": data.chart_key,
                "chart": data.chart,
                "pie": data.pie,
                "statistics": asdict(data.statistics),
            }
        )
