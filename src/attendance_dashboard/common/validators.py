from __future__ import annotations

import re

from ..core.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def is_valid_email(value: str) -> bool:
    return bool(value) and EMAIL_PATTERN.search(value) is not None


def student_form_errors(data: dict) -> dict[str, str]:
    """Return per-field messages for a student form, empty when valid."""

    def text(key: str) -> str:
        return str(data.get(key) or "").strip()

    errors: dict[str, str] = {}
    if not text("roll_no"):
        errors["roll_no"] = "Roll number is required"
    if not text("name"):
        errors["name"] = "Name is required"

    email = text("email")
    if not email:
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Email is invalid"

    parent_email = text("parent_email")
    if not parent_email:
        errors["parent_email"] = "Parent email is required"
    elif not is_valid_email(parent_email):
        errors["parent_email"] = "Parent email is invalid"

    if not text("class_name"):
        errors["class_name"] = "Class is required"
    return errors


def validate_student_form(data: dict) -> None:
    errors = student_form_errors(data)
    if errors:
        raise ValidationError("Please fix the highlighted fields", errors)
