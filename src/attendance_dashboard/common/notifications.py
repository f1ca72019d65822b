from __future__ import annotations

import logging
from typing import Protocol

from flask import flash, has_request_context

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def success(self, message: str) -> None:
        raise NotImplementedError

    def error(self, message: str) -> None:
        raise NotImplementedError


class FlashNotifier:
    """Transient user notifications via Flask flash messages.

    Outside a request (scripts, background use) messages are only logged.
    """

    def success(self, message: str) -> None:
        logger.info(message)
        if has_request_context():
            flash(message, "success")

    def error(self, message: str) -> None:
        logger.warning(message)
        if has_request_context():
            flash(message, "danger")
