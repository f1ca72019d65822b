from __future__ import annotations

from typing import Optional

from .client import ApiClient, ApiResponse


class StudentApi:
    """``/students`` resource."""

    def __init__(self, client: ApiClient):
        self._client = client

    def get_all(self) -> ApiResponse:
        return self._client.get("/students")

    def get_by_id(self, student_id: int) -> ApiResponse:
        return self._client.get(f"/students/{student_id}")

    def create(self, payload: dict) -> ApiResponse:
        return self._client.post("/students", json=payload)

    def update(self, student_id: int, payload: dict) -> ApiResponse:
        return self._client.put(f"/students/{student_id}", json=payload)

    def delete(self, student_id: int) -> ApiResponse:
        return self._client.delete(f"/students/{student_id}")


class AttendanceApi:
    """``/attendance`` resource."""

    def __init__(self, client: ApiClient):
        self._client = client

    def start_session(self, payload: dict) -> ApiResponse:
        return self._client.post("/attendance/start", json=payload)

    def mark(self, payload: dict) -> ApiResponse:
        return self._client.post("/attendance/mark", json=payload)

    def mark_bulk(self, payload: dict) -> ApiResponse:
        return self._client.post("/attendance/bulk", json=payload)

    def get_report(self, params: Optional[dict] = None) -> ApiResponse:
        return self._client.get("/attendance/report", params=params)

    def get_student_attendance(self, student_id: int, params: Optional[dict] = None) -> ApiResponse:
        return self._client.get(f"/attendance/student/{student_id}", params=params)
