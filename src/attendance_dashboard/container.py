from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .api.client import ApiClient
from .api.resources import AttendanceApi, StudentApi
from .attendance.store import AttendanceStore
from .common.notifications import FlashNotifier, Notifier
from .core.constants import DEFAULT_API_TIMEOUT
from .dashboard.service import DashboardService
from .reports.service import ReportService
from .students.store import StudentStore


@dataclass(frozen=True)
class Container:
    client: ApiClient

    student_api: StudentApi
    attendance_api: AttendanceApi

    student_store: StudentStore
    attendance_store: AttendanceStore

    report_service: ReportService
    dashboard_service: DashboardService


def build_container(
    *,
    api_base_url: str,
    timeout: float = DEFAULT_API_TIMEOUT,
    http_session=None,
    notifier: Optional[Notifier] = None,
) -> Container:
    client = ApiClient(api_base_url, timeout=timeout, session=http_session)
    notifier = notifier or FlashNotifier()

    student_api = StudentApi(client)
    attendance_api = AttendanceApi(client)

    student_store = StudentStore(student_api, notifier)
    attendance_store = AttendanceStore(attendance_api, notifier)

    report_service = ReportService(student_store, attendance_store)
    dashboard_service = DashboardService(student_store, attendance_store)

    return Container(
        client=client,
        student_api=student_api,
        attendance_api=attendance_api,
        student_store=student_store,
        attendance_store=attendance_store,
        report_service=report_service,
        dashboard_service=dashboard_service,
    )
