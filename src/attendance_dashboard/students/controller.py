from __future__ import annotations

from flask import Flask, current_app, flash, redirect, render_template, request, url_for

from ..container import Container
from ..core.exceptions import ApiError, ValidationError
from .model import FORM_FIELDS
from .roster import filter_students


def register(app: Flask, container: Container) -> None:
    store = container.student_store

    def _form_data() -> dict:
        return {field: request.form.get(field, "") for field in FORM_FIELDS}

    # API failures below were already flashed by the store; views only log
    # them and stay on the page with whatever is cached.

    @app.route("/students", endpoint="students")
    def students():
        try:
            store.fetch_students()
        except ApiError as e:
            current_app.logger.info("Roster refresh failed: %s", e)

        search = request.args.get("q", "")
        class_name = request.args.get("class_name", "")
        all_students = store.students
        shown = filter_students(all_students, search=search, class_name=class_name)

        return render_template(
            "students/list.html",
            students=shown,
            total=len(all_students),
            classes=store.class_names(),
            search=search,
            class_name=class_name,
            active_page="students",
        )

    @app.route("/students/new", methods=["GET", "POST"], endpoint="student_new")
    def student_new():
        form = {field: "" for field in FORM_FIELDS}
        errors: dict[str, str] = {}

        if request.method == "POST":
            form = _form_data()
            try:
                store.add_student(form)
                return redirect(url_for("students"))
            except ValidationError as e:
                errors = e.errors
                flash(str(e), "warning")
            except ApiError as e:
                current_app.logger.info("Add student failed: %s", e)
            except Exception:
                current_app.logger.exception("Unexpected error while adding a student")
                flash("System error while adding the student", "danger")

        return render_template(
            "students/form.html",
            form=form,
            errors=errors,
            student=None,
            active_page="students",
        )

    @app.route("/students/<int:student_id>/edit", methods=["GET", "POST"], endpoint="student_edit")
    def student_edit(student_id: int):
        try:
            store.ensure_loaded()
        except ApiError as e:
            current_app.logger.info("Roster load failed: %s", e)

        student = store.get(student_id)
        if student is None:
            flash("Student not found", "warning")
            return redirect(url_for("students"))

        form = student.to_form()
        errors: dict[str, str] = {}

        if request.method == "POST":
            form = _form_data()
            # the roll number input is disabled in the edit form
            form["roll_no"] = student.roll_no
            try:
                store.update_student(student_id, form)
                return redirect(url_for("students"))
            except ValidationError as e:
                errors = e.errors
                flash(str(e), "warning")
            except ApiError as e:
                current_app.logger.info("Update of student %s failed: %s", student_id, e)
            except Exception:
                current_app.logger.exception("Unexpected error while updating student %s", student_id)
                flash("System error while updating the student", "danger")

        return render_template(
            "students/form.html",
            form=form,
            errors=errors,
            student=student,
            active_page="students",
        )

    @app.route("/students/<int:student_id>/delete", methods=["POST"], endpoint="student_delete")
    def student_delete(student_id: int):
        if request.form.get("confirm") != "yes":
            flash("Please confirm before deleting a student", "warning")
            return redirect(url_for("students"))

        try:
            store.delete_student(student_id)
        except ApiError as e:
            current_app.logger.info("Delete of student %s failed: %s", student_id, e)
        except Exception:
            current_app.logger.exception("Unexpected error while deleting student %s", student_id)
            flash("System error while deleting the student", "danger")

        return redirect(url_for("students"))
