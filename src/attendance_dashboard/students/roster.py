from __future__ import annotations

from typing import Iterable

from .model import Student


def filter_students(students: Iterable[Student], *, search: str = "", class_name: str = "") -> list[Student]:
    """Case-insensitive search on name, roll number or email, plus optional class filter."""
    term = (search or "").strip().lower()
    out = []
    for s in students:
        if class_name and s.class_name != class_name:
            continue
        if term and not (term in s.name.lower() or term in s.roll_no.lower() or term in s.email.lower()):
            continue
        out.append(s)
    return out
