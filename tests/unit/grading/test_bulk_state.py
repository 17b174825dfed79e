import pytest

from educloud.grading import bulk
from educloud.grading.bulk import Entering, Failed, Idle, Selecting, Succeeded
from educloud.grading.engine import GradeBand
from educloud.portal.models import Student
from educloud.shared.exceptions import ValidationError


def _student(sid, first, last, class_id="c1", active=True):
    return Student.model_validate(
        {"_id": sid, "firstName": first, "lastName": last, "classId": {"_id": class_id, "name": "7A"}, "isActive": active}
    )


STUDENTS = [
    _student("s1", "Zed", "Brown"),
    _student("s2", "Amy", "Adams"),
    _student("s3", "Bob", "Brown"),
    _student("s4", "Cat", "Cole", class_id="c2"),
    _student("s5", "Dan", "Dean", active=False),
]


def _entering():
    state = bulk.select(Idle(), class_id="c1", subject_id="math", grade_type_id="exam", assessment_date="2024-03-01")
    return bulk.load_roster(state, STUDENTS)


def test_incomplete_selection_stays_selecting():
    state = bulk.select(Idle(), class_id="c1")
    assert isinstance(state, Selecting)
    state = bulk.load_roster(state, STUDENTS)
    assert isinstance(state, Selecting)
    with pytest.raises(ValidationError) as exc:
        bulk.begin_entry(state)
    assert exc.value.code == "missing_selection"


def test_roster_is_active_students_of_class_sorted_by_last_then_first():
    state = _entering()
    assert isinstance(state, Entering)
    assert [r.student_id for r in state.rows] == ["s2", "s3", "s1"]
    assert state.rows[0].student_name == "Amy Adams"


def test_reloading_roster_keeps_typed_values():
    state = bulk.enter(_entering(), "s3", score="17", teacher_notes="late")
    state = bulk.load_roster(state, STUDENTS + [_student("s6", "Eve", "Evans")])
    assert state.row("s3").score == "17"
    assert state.row("s3").teacher_notes == "late"
    assert state.row("s6").score == ""


def test_changing_class_drops_rows():
    state = bulk.enter(_entering(), "s1", score="5")
    state = bulk.select(state, class_id="c2")
    assert state.rows == ()


def test_enter_unknown_student_rejected():
    with pytest.raises(ValidationError):
        bulk.enter(_entering(), "nobody", score="10")


def test_build_batch_only_includes_parseable_scores():
    state = _entering()
    state = bulk.enter(state, "s1", score="18.5", student_feedback="Good work")
    state = bulk.enter(state, "s2", score="  ")
    state = bulk.enter(state, "s3", score="n/a", teacher_notes="absent")
    state = bulk.select(state, max_score="20", term_id="t1", title="Quiz 1")

    batch = bulk.build_batch(state)
    body = batch.model_dump(by_alias=True, exclude_none=True, mode="json")

    assert body == {
        "classId": "c1",
        "subjectId": "math",
        "gradeTypeId": "exam",
        "termId": "t1",
        "title": "Quiz 1",
        "assessmentDate": "2024-03-01",
        "maxScore": 20,
        "grades": [{"studentId": "s1", "score": 18.5, "studentFeedback": "Good work"}],
    }


def test_unusable_max_score_falls_back_to_100():
    state = bulk.enter(bulk.select(_entering(), max_score="abc"), "s1", score="50")
    assert bulk.build_batch(state).max_score == 100


def test_build_batch_without_scores_fails():
    with pytest.raises(ValidationError) as exc:
        bulk.build_batch(_entering())
    assert exc.value.code == "no_grades_entered"


def test_success_clears_entries_and_keeps_selection():
    state = bulk.enter(_entering(), "s1", score="90")
    submitting = bulk.start_submit(state)
    assert submitting.batch_size == 1

    done = bulk.submit_succeeded(submitting, 1)
    assert isinstance(done, Succeeded)
    assert done.saved_count == 1
    assert done.selection == state.selection
    assert [r.student_id for r in done.rows] == ["s2", "s3", "s1"]
    assert all(r.score == "" for r in done.rows)

    assert isinstance(bulk.acknowledge(done), Entering)


def test_failure_keeps_everything():
    state = bulk.enter(_entering(), "s1", score="90")
    failed = bulk.submit_failed(bulk.start_submit(state), "boom")
    assert isinstance(failed, Failed)
    assert failed.row("s1").score == "90"
    assert failed.message == "boom"


def test_partial_failure_keeps_known_failed_rows():
    state = bulk.enter(bulk.enter(_entering(), "s1", score="90"), "s2", score="70")
    partial = bulk.submit_partially_failed(bulk.start_submit(state), 1, 1, "one failed", failed_student_ids=["s2"])
    assert partial.row("s2").score == "70"
    assert partial.row("s1").score == ""


def test_preview_uses_selected_max_score():
    state = bulk.enter(bulk.select(_entering(), max_score=50), "s1", score="45")
    assert bulk.preview(state, "s1") == (pytest.approx(90.0), GradeBand.EXCEPTIONAL)
    assert bulk.preview(state, "s2") == (None, None)


def test_reset_returns_to_idle():
    assert isinstance(bulk.reset(_entering()), Idle)


def test_non_finite_scores_count_as_blank():
    state = bulk.enter(_entering(), "s1", score="NaN")
    state = bulk.enter(state, "s2", score="-Infinity")
    assert state.filled_count == 0
    assert bulk.preview(state, "s1") == (None, None)
    with pytest.raises(ValidationError):
        bulk.build_batch(state)
