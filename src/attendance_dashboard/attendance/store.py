from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, Optional

from ..api.resources import AttendanceApi
from ..common.notifications import Notifier
from ..common.store import Action, Store, error_message, require_data
from ..core.constants import MSG_INVALID_RESPONSE
from ..core.enums import AttendanceStatus
from ..core.exceptions import ApiError, ValidationError
from .model import AttendanceRecord, AttendanceSession, MarkEntry, ReportFilters, Statistics

logger = logging.getLogger(__name__)

SET_LOADING = "SET_LOADING"
SET_ATTENDANCE_RECORDS = "SET_ATTENDANCE_RECORDS"
ADD_ATTENDANCE_RECORD = "ADD_ATTENDANCE_RECORD"
SET_CURRENT_SESSION = "SET_CURRENT_SESSION"
CLEAR_SESSION = "CLEAR_SESSION"
SET_ERROR = "SET_ERROR"


@dataclass(frozen=True)
class AttendanceState:
    records: tuple[AttendanceRecord, ...] = ()
    current_session: Optional[AttendanceSession] = None
    loading: bool = False
    error: Optional[str] = None
    statistics: Statistics = field(default_factory=Statistics)


@dataclass(frozen=True)
class AttendanceReport:
    records: list[AttendanceRecord]
    statistics: Optional[Statistics]


def attendance_reducer(state: AttendanceState, action: Action) -> AttendanceState:
    if action.type == SET_LOADING:
        return replace(state, loading=bool(action.payload))
    if action.type == SET_ATTENDANCE_RECORDS:
        report: AttendanceReport = action.payload
        return replace(
            state,
            records=tuple(report.records),
            statistics=report.statistics or state.statistics,
            loading=False,
            error=None,
        )
    if action.type == ADD_ATTENDANCE_RECORD:
        return replace(state, records=state.records + (action.payload,))
    if action.type == SET_CURRENT_SESSION:
        return replace(state, current_session=action.payload, loading=False)
    if action.type == CLEAR_SESSION:
        # a session id payload only clears that session
        current = state.current_session
        if action.payload is not None and (current is None or current.session_id != action.payload):
            return state
        return replace(state, current_session=None)
    if action.type == SET_ERROR:
        return replace(state, error=action.payload, loading=False)
    return state


def _parse_record(data: dict) -> AttendanceRecord:
    try:
        return AttendanceRecord.from_api(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ApiError(MSG_INVALID_RESPONSE) from e


def _parse_report(data) -> AttendanceReport:
    """Accepts a bare record list or ``{records, statistics}``; anything else is an invalid response."""
    if isinstance(data, list):
        return AttendanceReport(records=[_parse_record(r) for r in data], statistics=None)
    if not isinstance(data, dict):
        raise ApiError(MSG_INVALID_RESPONSE)

    stats = data.get("statistics")
    try:
        statistics = Statistics.from_api(stats) if isinstance(stats, dict) else None
    except (TypeError, ValueError) as e:
        raise ApiError(MSG_INVALID_RESPONSE) from e
    return AttendanceReport(
        records=[_parse_record(r) for r in data.get("records") or []],
        statistics=statistics,
    )


class AttendanceStore(Store[AttendanceState]):
    """Attendance records, current session and statistics.

    Fetches fully overwrite the cached records. Each fetch takes a ticket and
    only the most recently issued one may apply its result, so a slow answer
    to an older filter never replaces a newer report.
    """

    def __init__(self, api: AttendanceApi, notifier: Notifier):
        super().__init__(attendance_reducer, AttendanceState())
        self._api = api
        self._notifier = notifier
        self._ticket_lock = threading.Lock()
        self._last_ticket = 0

    @property
    def records(self) -> list[AttendanceRecord]:
        return list(self.state.records)

    @property
    def statistics(self) -> Statistics:
        return self.state.statistics

    @property
    def current_session(self) -> Optional[AttendanceSession]:
        return self.state.current_session

    def _next_ticket(self) -> int:
        with self._ticket_lock:
            self._last_ticket += 1
            return self._last_ticket

    def _is_latest(self, ticket: int) -> bool:
        with self._ticket_lock:
            return ticket == self._last_ticket

    def _fail(self, error: ApiError, fallback: str, *, record: bool = False) -> None:
        message = error_message(error, fallback)
        if record:
            self.dispatch(SET_ERROR, message)
        self._notifier.error(message)

    def start_session(self, subject: str, class_name: Optional[str] = None) -> AttendanceSession:
        subject = (subject or "").strip()
        if not subject:
            raise ValidationError("Please enter a subject", {"subject": "Subject is required"})

        self.dispatch(SET_LOADING, True)
        try:
            data = require_data(self._api.start_session({"subject": subject, "className": class_name or ""}))
        except ApiError as e:
            self._fail(e, "Failed to start attendance session", record=True)
            raise

        session = AttendanceSession.from_api(data, subject=subject, class_name=class_name)
        self.dispatch(SET_CURRENT_SESSION, session)
        self._notifier.success("Attendance session started")
        return session

    def mark_attendance(
        self,
        *,
        student_id: int,
        status: AttendanceStatus,
        subject: str,
        remarks: str = "",
        attendance_date: Optional[date] = None,
    ) -> AttendanceRecord:
        payload = {
            "studentId": int(student_id),
            "status": AttendanceStatus(status).value,
            "subject": subject,
            "remarks": remarks,
        }
        if attendance_date:
            payload["attendanceDate"] = attendance_date.isoformat()

        try:
            record = _parse_record(require_data(self._api.mark(payload)))
        except ApiError as e:
            self._fail(e, "Failed to mark attendance")
            raise

        self.dispatch(ADD_ATTENDANCE_RECORD, record)
        self._notifier.success("Attendance marked successfully")
        return record

    def mark_bulk(self, entries: Iterable[MarkEntry], subject: str, session_id: Optional[str] = None) -> int:
        """Persist all entries in one request; returns the number of successful writes."""
        entries = list(entries)
        if not entries:
            raise ValidationError("No attendance data to save")

        payload = {
            "attendanceData": [e.to_api() for e in entries],
            "subject": subject,
            "sessionId": session_id,
        }
        try:
            data = require_data(self._api.mark_bulk(payload))
        except ApiError as e:
            self._fail(e, "Failed to mark bulk attendance")
            raise

        successful = int(data.get("successful", len(entries)))
        self.dispatch(CLEAR_SESSION, session_id)
        self._notifier.success(f"Attendance marked for {successful} students")
        return successful

    def _fetch(self, call, fallback: str) -> AttendanceReport:
        ticket = self._next_ticket()
        self.dispatch(SET_LOADING, True)
        try:
            response = call()
            if not response.success or response.data is None:
                raise ApiError(response.message or MSG_INVALID_RESPONSE, status_code=response.status_code)
            report = _parse_report(response.data)
        except ApiError as e:
            self._fail(e, fallback, record=self._is_latest(ticket))
            raise

        if self._is_latest(ticket):
            self.dispatch(SET_ATTENDANCE_RECORDS, report)
        else:
            logger.debug("Dropping stale attendance response (ticket %s)", ticket)
        return report

    def get_report(self, filters: Optional[ReportFilters] = None) -> AttendanceReport:
        params = (filters or ReportFilters()).to_params()
        return self._fetch(lambda: self._api.get_report(params), "Failed to fetch attendance report")

    def get_student_attendance(self, student_id: int, filters: Optional[ReportFilters] = None) -> AttendanceReport:
        params = (filters or ReportFilters()).to_student_params()
        return self._fetch(
            lambda: self._api.get_student_attendance(int(student_id), params),
            "Failed to fetch student attendance",
        )

    def clear_session(self, session_id: Optional[str] = None) -> None:
        """Forget the current session; with ``session_id``, only if it is that session."""
        self.dispatch(CLEAR_SESSION, session_id)
