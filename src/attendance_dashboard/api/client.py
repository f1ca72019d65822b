from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from ..core.constants import (
    DEFAULT_API_TIMEOUT,
    MSG_BAD_REQUEST,
    MSG_NETWORK_ERROR,
    MSG_NOT_FOUND,
    MSG_SERVER_ERROR,
)
from ..core.exceptions import ApiError, BadRequestError, NetworkError, NotFoundError, ServerError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    """The ``{success, data, message}`` envelope every endpoint answers with."""

    status_code: int
    success: bool
    data: Any = None
    message: Optional[str] = None

    @classmethod
    def from_body(cls, status_code: int, body) -> "ApiResponse":
        if not isinstance(body, dict):
            return cls(status_code=status_code, success=False, data=body)
        return cls(
            status_code=status_code,
            success=bool(body.get("success", False)),
            data=body.get("data"),
            message=body.get("message"),
        )


def _clean_params(params: Optional[dict]) -> Optional[dict]:
    # Blank filter fields are sent as "not filtered"
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None and v != ""}


def _read_json(response):
    try:
        return response.json()
    except ValueError:
        return None


def _error_for(status_code: int, body) -> ApiError:
    server_message = body.get("message") if isinstance(body, dict) else None

    if status_code == 400:
        return BadRequestError(server_message or MSG_BAD_REQUEST, status_code=status_code, payload=body)
    if status_code == 404:
        return NotFoundError(MSG_NOT_FOUND, status_code=status_code, payload=body)
    if status_code == 500:
        return ServerError(MSG_SERVER_ERROR, status_code=status_code, payload=body)
    return ApiError(
        server_message or f"Request failed with status {status_code}",
        status_code=status_code,
        payload=body,
    )


class ApiClient:
    """Thin wrapper around a ``requests.Session`` bound to the API base URL.

    Every call returns an :class:`ApiResponse` for 2xx answers and raises an
    :class:`ApiError` subclass otherwise, so callers only deal with one error
    taxonomy regardless of the transport failure.
    """

    def __init__(self, base_url: str, *, timeout: float = DEFAULT_API_TIMEOUT, session=None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._headers = {"Content-Type": "application/json"}

    @property
    def base_url(self) -> str:
        return self._base_url

    def request(self, method: str, path: str, *, params: Optional[dict] = None, json=None) -> ApiResponse:
        method = method.upper()
        url = f"{self._base_url}/{path.lstrip('/')}"
        logger.debug("Making %s request to %s", method, path)

        try:
            response = self._session.request(
                method,
                url,
                params=_clean_params(params),
                json=json,
                headers=self._headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("API Error: %s %s: %s", method, path, e)
            raise NetworkError(MSG_NETWORK_ERROR) from e

        body = _read_json(response)
        if response.status_code >= 400:
            logger.warning("API Error: %s %s -> %s %r", method, path, response.status_code, body)
            raise _error_for(response.status_code, body)

        return ApiResponse.from_body(response.status_code, body)

    def get(self, path: str, *, params: Optional[dict] = None) -> ApiResponse:
        return self.request("GET", path, params=params)

    def post(self, path: str, json=None) -> ApiResponse:
        return self.request("POST", path, json=json)

    def put(self, path: str, json=None) -> ApiResponse:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> ApiResponse:
        return self.request("DELETE", path)

    def health_check(self) -> ApiResponse:
        return self.get("/health")
