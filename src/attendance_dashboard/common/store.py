from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from ..api.client import ApiResponse
from ..core.constants import MSG_INVALID_RESPONSE
from ..core.exceptions import ApiError

S = TypeVar("S")


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None


class Store(Generic[S]):
    """Single-writer state container.

    State is an immutable value replaced by ``reducer(state, action)`` on each
    dispatch; dispatches are serialized so concurrent requests never interleave
    inside one reducer step.
    """

    def __init__(self, reducer: Callable[[S, Action], S], initial_state: S):
        self._reducer = reducer
        self._state = initial_state
        self._lock = threading.Lock()

    @property
    def state(self) -> S:
        return self._state

    def dispatch(self, action_type: str, payload: Any = None) -> S:
        with self._lock:
            self._state = self._reducer(self._state, Action(action_type, payload))
            return self._state


def require_data(response: ApiResponse, *, expect: type = dict):
    """Return ``response.data`` or raise when the envelope is not usable."""
    if not response.success or not isinstance(response.data, expect):
        raise ApiError(response.message or MSG_INVALID_RESPONSE, status_code=response.status_code)
    return response.data


def error_message(error: ApiError, fallback: str) -> str:
    return str(error) or fallback
