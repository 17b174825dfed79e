# src/educloud/grading/bulk.py
"""
Bulk assessment entry: one score sheet for a whole class, saved in one request.

The workflow is a small state machine over immutable states:

    Idle -> Selecting -> Entering -> Submitting -> Succeeded
                            ^            |-------> PartiallyFailed
                            |            `-------> Failed
                            `------ acknowledge -------'

The transition functions are pure; `BulkGradeEntry` drives them against the
grades API. A batch is validated before anything is sent, so a sheet with
no scores never produces a request.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union

from educloud.grading.engine import GradeBand, to_number, grade_band, percentage
from educloud.portal.models import BulkGradeItem, BulkGradeRequest, Student
from educloud.portal.students import class_roster
from educloud.shared.exceptions import RequestError, ValidationError
from educloud.shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_SCORE = 100

_SELECTION_FIELDS = ("class_id", "subject_id", "grade_type_id", "term_id", "title", "assessment_date", "max_score")
_ROW_FIELDS = ("score", "teacher_notes", "student_feedback")


def _today() -> str:
    return date.today().isoformat()


@dataclass(frozen=True)
class Selection:
    """Metadata shared by every grade in the batch."""

    class_id: str = ""
    subject_id: str = ""
    grade_type_id: str = ""
    term_id: Optional[str] = None
    title: Optional[str] = None
    assessment_date: str = field(default_factory=_today)
    max_score: Union[int, str, None] = DEFAULT_MAX_SCORE

    @property
    def missing(self) -> Tuple[str, ...]:
        required = ("class_id", "subject_id", "grade_type_id", "assessment_date")
        return tuple(name for name in required if not getattr(self, name))

    @property
    def is_complete(self) -> bool:
        return not self.missing

    @property
    def resolved_max_score(self) -> int:
        """Integer part of max_score; anything unusable falls back to 100."""
        value = to_number(self.max_score)
        if value is None or int(value) <= 0:
            return DEFAULT_MAX_SCORE
        return int(value)


@dataclass(frozen=True)
class Row:
    student_id: str
    student_name: str = ""
    score: str = ""
    teacher_notes: str = ""
    student_feedback: str = ""

    @property
    def score_value(self) -> Optional[float]:
        return to_number(self.score)

    @property
    def is_filled(self) -> bool:
        return self.score_value is not None

    def blank(self) -> "Row":
        return replace(self, score="", teacher_notes="", student_feedback="")


# ─────────────────────────────── States ───────────────────────────────────


@dataclass(frozen=True)
class BulkState:
    selection: Selection = field(default_factory=Selection)
    rows: Tuple[Row, ...] = ()

    @property
    def filled_count(self) -> int:
        return sum(1 for r in self.rows if r.is_filled)

    def row(self, student_id: str) -> Optional[Row]:
        return next((r for r in self.rows if r.student_id == student_id), None)


@dataclass(frozen=True)
class Idle(BulkState):
    pass


@dataclass(frozen=True)
class Selecting(BulkState):
    pass


@dataclass(frozen=True)
class Entering(BulkState):
    pass


@dataclass(frozen=True)
class Submitting(BulkState):
    batch: Optional[BulkGradeRequest] = None

    @property
    def batch_size(self) -> int:
        return len(self.batch.grades) if self.batch else 0


@dataclass(frozen=True)
class Succeeded(BulkState):
    saved_count: int = 0


@dataclass(frozen=True)
class PartiallyFailed(BulkState):
    saved_count: int = 0
    failed_count: int = 0
    message: str = ""


@dataclass(frozen=True)
class Failed(BulkState):
    message: str = ""


_OUTCOMES = (Succeeded, PartiallyFailed, Failed)


def _editable(state: BulkState) -> BulkState:
    """Selecting or Entering depending on whether the selection is complete."""
    cls = Entering if state.selection.is_complete else Selecting
    return cls(selection=state.selection, rows=state.rows)


# ───────────────────────────── Transitions ────────────────────────────────


def select(state: BulkState, **fields: Any) -> BulkState:
    """Change selection metadata. Clears any previous outcome banner."""
    if isinstance(state, Submitting):
        return state
    unknown = set(fields) - set(_SELECTION_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown selection field(s): {', '.join(sorted(unknown))}")
    selection = replace(state.selection, **fields)
    rows = state.rows
    if "class_id" in fields and fields["class_id"] != state.selection.class_id:
        rows = ()
    return _editable(BulkState(selection=selection, rows=rows))


def load_roster(state: BulkState, students: Iterable[Student]) -> BulkState:
    """
    Build one row per active student of the selected class, sorted by name.

    Values already typed for a student who is still on the roster are kept.
    """
    if isinstance(state, Submitting):
        return state
    existing = {r.student_id: r for r in state.rows}
    rows = []
    for student in class_roster(list(students), state.selection.class_id):
        row = existing.get(student.id)
        if row is None:
            row = Row(student_id=student.id, student_name=student.full_name)
        rows.append(row)
    return _editable(BulkState(selection=state.selection, rows=tuple(rows)))


def begin_entry(state: BulkState) -> Entering:
    if not state.selection.is_complete:
        raise ValidationError(code="missing_selection", details={"missing": list(state.selection.missing)})
    return Entering(selection=state.selection, rows=state.rows)


def enter(state: BulkState, student_id: str, **values: Any) -> BulkState:
    """Set score / notes / feedback for one student's row."""
    if isinstance(state, Submitting):
        return state
    unknown = set(values) - set(_ROW_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown row field(s): {', '.join(sorted(unknown))}")
    if state.row(student_id) is None:
        raise ValidationError("Student is not on this roster", details={"studentId": student_id})
    changes = {k: "" if v is None else str(v) for k, v in values.items()}
    rows = tuple(replace(r, **changes) if r.student_id == student_id else r for r in state.rows)
    return _editable(BulkState(selection=state.selection, rows=rows))


def build_batch(state: BulkState) -> BulkGradeRequest:
    """
    Payload for `POST /portal/grades/bulk`.

    Only rows with a parseable score are included; blank notes are sent as
    absent. Raises ValidationError (and nothing is sent) when the selection is
    incomplete or no row has a score.
    """
    selection = state.selection
    if not selection.is_complete:
        raise ValidationError(code="missing_selection", details={"missing": list(selection.missing)})
    items = [
        BulkGradeItem(
            student_id=row.student_id,
            score=row.score_value,
            teacher_notes=row.teacher_notes or None,
            student_feedback=row.student_feedback or None,
        )
        for row in state.rows
        if row.is_filled
    ]
    if not items:
        raise ValidationError(code="no_grades_entered")
    return BulkGradeRequest(
        class_id=selection.class_id,
        subject_id=selection.subject_id,
        grade_type_id=selection.grade_type_id,
        term_id=selection.term_id or None,
        title=selection.title or None,
        assessment_date=selection.assessment_date,
        max_score=selection.resolved_max_score,
        grades=items,
    )


def start_submit(state: BulkState) -> Submitting:
    return Submitting(selection=state.selection, rows=state.rows, batch=build_batch(state))


def submit_succeeded(state: BulkState, count: int) -> Succeeded:
    """Entries are cleared; the selection stays for the next assessment."""
    return Succeeded(
        selection=state.selection,
        rows=tuple(r.blank() for r in state.rows),
        saved_count=count,
    )


def submit_partially_failed(
    state: BulkState,
    saved: int,
    failed: int,
    message: str,
    failed_student_ids: Optional[Sequence[str]] = None,
) -> PartiallyFailed:
    """
    Keep what still needs attention.

    When the failing students are known only their rows keep their values;
    otherwise every entered row is kept for review.
    """
    rows = state.rows
    if failed_student_ids is not None:
        keep = set(failed_student_ids)
        rows = tuple(r if r.student_id in keep else r.blank() for r in rows)
    return PartiallyFailed(
        selection=state.selection,
        rows=rows,
        saved_count=saved,
        failed_count=failed,
        message=message,
    )


def submit_failed(state: BulkState, message: str) -> Failed:
    return Failed(selection=state.selection, rows=state.rows, message=message)


def acknowledge(state: BulkState) -> BulkState:
    if isinstance(state, _OUTCOMES):
        return _editable(state)
    return state


def reset(state: Optional[BulkState] = None) -> Idle:
    return Idle()


def preview(state: BulkState, student_id: str) -> Tuple[Optional[float], Optional[GradeBand]]:
    """Live percentage and colour band for one row, before anything is saved."""
    row = state.row(student_id)
    if row is None:
        return None, None
    pct = percentage(row.score, state.selection.resolved_max_score)
    return pct, grade_band(pct)


# ─────────────────────────────── Driver ───────────────────────────────────


class BulkGradeEntry:
    """Holds the current state and performs the one network call the workflow needs."""

    def __init__(self, grades, state: Optional[BulkState] = None) -> None:
        self._grades = grades
        self.state: BulkState = state or Idle()

    @property
    def submitting(self) -> bool:
        return isinstance(self.state, Submitting)

    def select(self, **fields: Any) -> BulkState:
        self.state = select(self.state, **fields)
        return self.state

    def load_roster(self, students: Iterable[Student]) -> BulkState:
        self.state = load_roster(self.state, students)
        return self.state

    def enter(self, student_id: str, **values: Any) -> BulkState:
        self.state = enter(self.state, student_id, **values)
        return self.state

    def preview(self, student_id: str) -> Tuple[Optional[float], Optional[GradeBand]]:
        return preview(self.state, student_id)

    def acknowledge(self) -> BulkState:
        self.state = acknowledge(self.state)
        return self.state

    def reset(self) -> BulkState:
        self.state = reset(self.state)
        return self.state

    async def submit(self) -> BulkState:
        """
        Save every filled row in a single request.

        A call made while a submission is in flight returns immediately.
        Validation failures raise before any request is made. Whatever
        happens to the request, the workflow never stays in Submitting.
        """
        if self.submitting:
            return self.state
        submitting = start_submit(self.state)
        self.state = submitting
        sent = submitting.batch_size
        try:
            result = await self._grades.bulk_create(submitting.batch)
        except RequestError as e:
            logger.warning("Bulk grade submission failed", rows=sent, error=e.message)
            self.state = submit_failed(submitting, e.message)
            return self.state
        finally:
            if self.state is submitting:
                logger.error("Bulk grade submission interrupted", rows=sent)
                self.state = submit_failed(submitting, "Saving grades was interrupted. Please try again.")

        if result.count < sent:
            failed = sent - result.count
            message = result.message or f"{failed} of {sent} grades were not saved"
            logger.warning("Bulk grade submission partially failed", rows=sent, saved=result.count)
            self.state = submit_partially_failed(submitting, result.count, failed, message)
        else:
            logger.info("Bulk grades saved", rows=sent, saved=result.count)
            self.state = submit_succeeded(submitting, result.count)
        return self.state

    def as_dict(self) -> Dict[str, Any]:
        state = self.state
        data: Dict[str, Any] = {
            "state": type(state).__name__,
            "selection": {
                "classId": state.selection.class_id,
                "subjectId": state.selection.subject_id,
                "gradeTypeId": state.selection.grade_type_id,
                "termId": state.selection.term_id,
                "title": state.selection.title,
                "assessmentDate": state.selection.assessment_date,
                "maxScore": state.selection.resolved_max_score,
            },
            "filledCount": state.filled_count,
            "rows": [
                {
                    "studentId": r.student_id,
                    "studentName": r.student_name,
                    "score": r.score,
                    "teacherNotes": r.teacher_notes,
                    "studentFeedback": r.student_feedback,
                }
                for r in state.rows
            ],
        }
        for attr, key in (("saved_count", "savedCount"), ("failed_count", "failedCount"), ("message", "message")):
            if hasattr(state, attr):
                data[key] = getattr(state, attr)
        return data
