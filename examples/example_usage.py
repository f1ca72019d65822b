"""Example: drive the stores directly (no Flask).

Controllers are a thin layer; everything below also works from a script or a
shell against a running API.
"""

import importlib
import logging

from attendance_dashboard.config import get_settings_module
from attendance_dashboard.container import build_container
from attendance_dashboard.reports import aggregation


def main():
    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    container = build_container(api_base_url=settings.API_BASE_URL, timeout=settings.API_TIMEOUT)

    students = container.student_store.fetch_students()
    print(f"{len(students)} students in {len(container.student_store.class_names())} classes")

    today = container.dashboard_service.load_today()
    print(f"today: present={today.present_today} absent={today.absent_today} rate={today.attendance_rate}")
    for row in aggregation.group_by_class(students, container.attendance_store.records):
        print(row)


if __name__ == "__main__":
    main()
