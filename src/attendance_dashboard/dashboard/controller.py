from __future__ import annotations

from flask import Flask, current_app, jsonify, redirect, render_template, url_for

from ..container import Container
from ..core.exceptions import ApiError


def register(app: Flask, container: Container) -> None:
    students = container.student_store
    dashboard_service = container.dashboard_service

    def _load():
        try:
            students.ensure_loaded()
        except ApiError as e:
            current_app.logger.info("Roster load failed: %s", e)
        try:
            return dashboard_service.load_today()
        except ApiError as e:
            current_app.logger.info("Today's report failed: %s", e)
            return dashboard_service.build()

    @app.route("/", endpoint="index")
    def index():
        return redirect(url_for("dashboard"))

    @app.route("/dashboard", endpoint="dashboard")
    def dashboard():
        data = _load()
        return render_template("dashboard.html", data=data, active_page="dashboard")

    @app.route("/api/dashboard/stats", endpoint="api_dashboard_stats")
    def api_dashboard_stats():
        data = _load()
        return jsonify(
            {
                "success": True,
                "pie": data.pie,
                "bar": {
                    "labels": [c["name"] for c in data.class_data],
                    "data": [c["value"] for c in data.class_data],
                },
                "totalStudents": data.total_students,
                "attendanceRate": data.attendance_rate,
            }
        )

    @app.route("/health", endpoint="health")
    def health():
        try:
            response = container.client.health_check()
        except ApiError as e:
            return jsonify({"success": False, "api": container.client.base_url, "message": str(e)}), 503
        return jsonify({"success": response.success, "api": container.client.base_url, "data": response.data})
