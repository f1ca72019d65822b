from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..api.resources import StudentApi
from ..common.notifications import Notifier
from ..common.store import Action, Store, error_message, require_data
from ..common.validators import validate_student_form
from ..core.constants import MSG_INVALID_RESPONSE
from ..core.exceptions import ApiError
from .model import Student, to_payload

SET_LOADING = "SET_LOADING"
SET_STUDENTS = "SET_STUDENTS"
ADD_STUDENT = "ADD_STUDENT"
UPDATE_STUDENT = "UPDATE_STUDENT"
DELETE_STUDENT = "DELETE_STUDENT"
SET_ERROR = "SET_ERROR"


@dataclass(frozen=True)
class StudentState:
    students: tuple[Student, ...] = ()
    loaded: bool = False
    loading: bool = False
    error: Optional[str] = None


def student_reducer(state: StudentState, action: Action) -> StudentState:
    if action.type == SET_LOADING:
        return replace(state, loading=bool(action.payload))
    if action.type == SET_STUDENTS:
        return replace(state, students=tuple(action.payload), loaded=True, loading=False, error=None)
    if action.type == ADD_STUDENT:
        return replace(state, students=state.students + (action.payload,))
    if action.type == UPDATE_STUDENT:
        updated: Student = action.payload
        return replace(
            state,
            students=tuple(updated if s.id == updated.id else s for s in state.students),
        )
    if action.type == DELETE_STUDENT:
        return replace(state, students=tuple(s for s in state.students if s.id != action.payload))
    if action.type == SET_ERROR:
        return replace(state, error=action.payload, loading=False)
    return state


def _parse_student(data: dict) -> Student:
    try:
        return Student.from_api(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ApiError(MSG_INVALID_RESPONSE) from e


class StudentStore(Store[StudentState]):
    """Roster cache backed by the ``/students`` resource.

    Mutations are applied locally only after the API acknowledged them.
    Errors are recorded, notified and re-raised to the caller.
    """

    def __init__(self, api: StudentApi, notifier: Notifier):
        super().__init__(student_reducer, StudentState())
        self._api = api
        self._notifier = notifier

    @property
    def students(self) -> list[Student]:
        return list(self.state.students)

    def get(self, student_id: int) -> Optional[Student]:
        for s in self.state.students:
            if s.id == student_id:
                return s
        return None

    def class_names(self) -> list[str]:
        return sorted({s.class_name for s in self.state.students})

    def _fail(self, error: ApiError, fallback: str, *, record: bool = False) -> None:
        message = error_message(error, fallback)
        if record:
            self.dispatch(SET_ERROR, message)
        self._notifier.error(message)

    def fetch_students(self) -> list[Student]:
        self.dispatch(SET_LOADING, True)
        try:
            data = require_data(self._api.get_all(), expect=list)
            students = [_parse_student(item) for item in data]
        except ApiError as e:
            self._fail(e, "Failed to fetch students", record=True)
            raise

        self.dispatch(SET_STUDENTS, students)
        return students

    def add_student(self, form: dict) -> Student:
        validate_student_form(form)
        try:
            student = _parse_student(require_data(self._api.create(to_payload(form))))
        except ApiError as e:
            self._fail(e, "Failed to add student")
            raise

        self.dispatch(ADD_STUDENT, student)
        self._notifier.success("Student added successfully")
        return student

    def _current_roll_no(self, student_id: int) -> str:
        cached = self.get(student_id)
        if cached:
            return cached.roll_no
        data = require_data(self._api.get_by_id(student_id))
        return _parse_student(data).roll_no

    def update_student(self, student_id: int, form: dict) -> Student:
        form = dict(form)
        try:
            # roll number is fixed once the student exists
            form["roll_no"] = self._current_roll_no(student_id)
        except ApiError as e:
            self._fail(e, "Failed to update student")
            raise
        validate_student_form(form)

        try:
            student = _parse_student(require_data(self._api.update(student_id, to_payload(form))))
        except ApiError as e:
            self._fail(e, "Failed to update student")
            raise

        self.dispatch(UPDATE_STUDENT, student)
        self._notifier.success("Student updated successfully")
        return student

    def delete_student(self, student_id: int) -> None:
        try:
            self._api.delete(student_id)
        except ApiError as e:
            self._fail(e, "Failed to delete student")
            raise

        self.dispatch(DELETE_STUDENT, student_id)
        self._notifier.success("Student deleted successfully")

    def ensure_loaded(self) -> list[Student]:
        """Fetch the roster once; later calls reuse the cache."""
        if not self.state.loaded:
            return self.fetch_students()
        return self.students
