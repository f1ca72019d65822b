from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, MarkingState
from ..core.exceptions import StateTransitionError, ValidationError
from .model import MarkEntry


@dataclass
class MarkingSession:
    """Per-browser marking workflow: idle -> active -> saving -> idle.

    A failed save moves to ``save_failed`` which keeps every mark so the
    user can resubmit. Nothing here talks to the API; the controller drives
    the transitions around the store calls and keeps the serialized form in
    the Flask session.
    """

    state: MarkingState = MarkingState.IDLE
    subject: str = ""
    class_name: str = ""
    session_id: Optional[str] = None
    started_at: Optional[datetime] = None
    statuses: dict[int, AttendanceStatus] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.state != MarkingState.IDLE

    def _require(self, *allowed: MarkingState) -> None:
        if self.state not in allowed:
            raise StateTransitionError(f"Not allowed while session is {self.state.value}")

    def start(
        self,
        *,
        subject: str,
        student_ids: Iterable[int],
        class_name: str = "",
        session_id: Optional[str] = None,
        started_at: Optional[datetime] = None,
    ) -> None:
        self._require(MarkingState.IDLE)
        subject = (subject or "").strip()
        if not subject:
            raise ValidationError("Please enter a subject", {"subject": "Subject is required"})

        self.subject = subject
        self.class_name = class_name or ""
        self.session_id = session_id
        self.started_at = started_at or now_local()
        # everyone starts present
        self.statuses = {int(sid): AttendanceStatus.PRESENT for sid in student_ids}
        self.error = None
        self.state = MarkingState.ACTIVE

    def _session_student(self, student_id: int) -> int:
        self._require(MarkingState.ACTIVE, MarkingState.SAVE_FAILED)
        student_id = int(student_id)
        # only students on the roster the session started with
        if student_id not in self.statuses:
            raise ValidationError(f"Student {student_id} is not part of this session")
        return student_id

    def set_status(self, student_id: int, status: AttendanceStatus) -> None:
        student_id = self._session_student(student_id)
        self.statuses[student_id] = AttendanceStatus(status)

    def toggle(self, student_id: int) -> AttendanceStatus:
        student_id = self._session_student(student_id)
        current = self.statuses[student_id]
        new = AttendanceStatus.ABSENT if current == AttendanceStatus.PRESENT else AttendanceStatus.PRESENT
        self.statuses[student_id] = new
        return new

    def status_of(self, student_id: int) -> Optional[AttendanceStatus]:
        return self.statuses.get(int(student_id))

    def stats(self) -> dict:
        total = len(self.statuses)
        present = sum(1 for s in self.statuses.values() if s == AttendanceStatus.PRESENT)
        return {"total": total, "present": present, "absent": total - present}

    def entries(self) -> list[MarkEntry]:
        return [MarkEntry(student_id=sid, status=status) for sid, status in self.statuses.items()]

    def begin_save(self) -> list[MarkEntry]:
        self._require(MarkingState.ACTIVE, MarkingState.SAVE_FAILED)
        if not self.statuses:
            raise ValidationError("No attendance data to save")
        self.state = MarkingState.SAVING
        self.error = None
        return self.entries()

    def save_succeeded(self) -> None:
        self._require(MarkingState.SAVING)
        self.reset()

    def save_failed(self, message: str) -> None:
        self._require(MarkingState.SAVING)
        self.error = message
        self.state = MarkingState.SAVE_FAILED

    def reset(self) -> None:
        self.state = MarkingState.IDLE
        self.subject = ""
        self.class_name = ""
        self.session_id = None
        self.started_at = None
        self.statuses = {}
        self.error = None

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "subject": self.subject,
            "class_name": self.class_name,
            "session_id": self.session_id,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "statuses": {str(k): v.value for k, v in self.statuses.items()},
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "MarkingSession":
        if not data:
            return cls()
        started_at = data.get("started_at")
        return cls(
            state=MarkingState(data.get("state", MarkingState.IDLE.value)),
            subject=data.get("subject") or "",
            class_name=data.get("class_name") or "",
            session_id=data.get("session_id"),
            started_at=datetime.fromisoformat(started_at) if started_at else None,
            statuses={int(k): AttendanceStatus(v) for k, v in (data.get("statuses") or {}).items()},
            error=data.get("error"),
        )
