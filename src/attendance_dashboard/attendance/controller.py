from __future__ import annotations

from flask import Flask, current_app, flash, jsonify, redirect, render_template, request, session, url_for

from ..common.validators import require_non_empty
from ..container import Container
from ..core.enums import AttendanceStatus
from ..core.exceptions import ApiError, StateTransitionError, ValidationError
from ..students.roster import filter_students
from .marking import MarkingSession

MARKING_KEY = "marking"


def register(app: Flask, container: Container) -> None:
    students = container.student_store
    attendance = container.attendance_store

    def _load_marking() -> MarkingSession:
        return MarkingSession.from_dict(session.get(MARKING_KEY))

    def _save_marking(marking: MarkingSession) -> None:
        session[MARKING_KEY] = marking.to_dict()

    @app.route("/attendance/session", endpoint="attendance_session")
    def attendance_session():
        try:
            students.ensure_loaded()
        except ApiError as e:
            current_app.logger.info("Roster load failed: %s", e)

        marking = _load_marking()
        class_name = marking.class_name if marking.is_active else request.args.get("class_name", "")
        roster = filter_students(students.students, class_name=class_name)

        return render_template(
            "attendance/session.html",
            marking=marking,
            roster=roster,
            classes=students.class_names(),
            class_name=class_name,
            stats=marking.stats(),
            active_page="attendance",
        )

    @app.route("/attendance/session/start", methods=["POST"], endpoint="attendance_session_start")
    def attendance_session_start():
        marking = _load_marking()
        if marking.is_active:
            flash("A session is already in progress", "warning")
            return redirect(url_for("attendance_session"))

        subject = request.form.get("subject", "")
        class_name = request.form.get("class_name", "").strip()
        try:
            # checked here so a blank subject never reaches the API
            subject = require_non_empty(subject, "Subject")
            students.ensure_loaded()
            started = attendance.start_session(subject, class_name or None)
            roster = filter_students(students.students, class_name=class_name)
            marking.start(
                subject=subject,
                class_name=class_name,
                student_ids=[s.id for s in roster],
                session_id=started.session_id,
            )
            _save_marking(marking)
        except ValidationError as e:
            flash(str(e), "warning")
        except ApiError as e:
            current_app.logger.info("Start session failed: %s", e)
        except Exception:
            current_app.logger.exception("Unexpected error while starting a session")
            flash("System error while starting the session", "danger")

        return redirect(url_for("attendance_session", class_name=class_name or None))

    @app.route("/attendance/session/mark", methods=["POST"], endpoint="attendance_session_mark")
    def attendance_session_mark():
        marking = _load_marking()
        try:
            student_id = int(request.form.get("student_id", ""))
            status = request.form.get("status")
            if status:
                marking.set_status(student_id, AttendanceStatus(status.upper()))
            else:
                marking.toggle(student_id)
            _save_marking(marking)
        except ValueError:
            flash("Invalid attendance mark", "warning")
        except (ValidationError, StateTransitionError) as e:
            flash(str(e), "warning")

        return redirect(url_for("attendance_session"))

    @app.route("/attendance/session/save", methods=["POST"], endpoint="attendance_session_save")
    def attendance_session_save():
        marking = _load_marking()
        try:
            entries = marking.begin_save()
        except (ValidationError, StateTransitionError) as e:
            flash(str(e), "warning")
            return redirect(url_for("attendance_session"))

        try:
            attendance.mark_bulk(entries, marking.subject, marking.session_id)
            marking.save_succeeded()
        except ApiError as e:
            marking.save_failed(str(e))
        except Exception:
            current_app.logger.exception("Unexpected error while saving attendance")
            marking.save_failed("System error while saving attendance")
            flash("System error while saving attendance", "danger")
        finally:
            _save_marking(marking)

        return redirect(url_for("attendance_session"))

    @app.route("/attendance/session/end", methods=["POST"], endpoint="attendance_session_end")
    def attendance_session_end():
        marking = _load_marking()
        attendance.clear_session(marking.session_id)
        marking.reset()
        _save_marking(marking)
        return redirect(url_for("attendance_session"))

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="api_attendance_mark")
    def api_attendance_mark():
        data = request.get_json(silent=True) or {}
        try:
            subject = require_non_empty(str(data.get("subject") or ""), "Subject")
            record = attendance.mark_attendance(
                student_id=int(data.get("studentId") or 0),
                status=AttendanceStatus(str(data.get("status", "")).upper()),
                subject=subject,
                remarks=str(data.get("remarks") or ""),
            )
        except (ValidationError, ValueError) as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except ApiError as e:
            return jsonify({"success": False, "message": str(e)}), e.status_code or 502

        return jsonify(
            {
                "success": True,
                "data": {
                    "id": record.id,
                    "studentId": record.student_id,
                    "subject": record.subject,
                    "status": record.status.value,
                },
            }
        )
