from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import build_container
from .attendance.controller import register as register_attendance
from .dashboard.controller import register as register_dashboard
from .reports.controller import register as register_reports
from .students.controller import register as register_students


def create_app(*, http_session=None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../templates")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["API_BASE_URL"] = getattr(settings, "API_BASE_URL")
    app.config["API_TIMEOUT"] = float(getattr(settings, "API_TIMEOUT", 10))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.info("[attendance-dashboard] settings=%s api=%s", settings_module, app.config["API_BASE_URL"])

    container = build_container(
        api_base_url=app.config["API_BASE_URL"],
        timeout=app.config["API_TIMEOUT"],
        http_session=http_session,
    )
    app.extensions["container"] = container

    register_dashboard(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
