from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# form/python field -> API field
_WIRE_FIELDS = {
    "roll_no": "rollNo",
    "name": "name",
    "email": "email",
    "parent_email": "parentEmail",
    "class_name": "className",
    "phone": "phone",
    "address": "address",
}

FORM_FIELDS = tuple(_WIRE_FIELDS)


@dataclass(frozen=True)
class Student:
    """A roster entry as returned by the API."""

    id: int
    roll_no: str
    name: str
    email: str
    parent_email: str
    class_name: str
    phone: Optional[str] = None
    address: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "Student":
        return cls(
            id=int(data["id"]),
            roll_no=str(data.get("rollNo") or ""),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            parent_email=str(data.get("parentEmail") or ""),
            class_name=str(data.get("className") or ""),
            phone=data.get("phone") or None,
            address=data.get("address") or None,
        )

    def to_form(self) -> dict:
        return {field: getattr(self, field) or "" for field in FORM_FIELDS}

    @property
    def initial(self) -> str:
        return self.name[:1].upper()


def to_payload(form: dict) -> dict:
    """Form dict (snake_case) -> API payload (camelCase), stripped strings."""
    payload = {}
    for field, wire in _WIRE_FIELDS.items():
        value = form.get(field)
        payload[wire] = value.strip() if isinstance(value, str) else value
    # optional fields are omitted when blank
    for wire in ("phone", "address"):
        if not payload.get(wire):
            payload.pop(wire, None)
    return payload
