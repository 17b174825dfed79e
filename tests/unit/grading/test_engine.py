import pytest

from educloud.grading.engine import (
    GradeBand,
    Trend,
    class_average,
    class_distribution,
    gpa_for,
    grade_band,
    grade_trend,
    letter_grade,
    percentage,
    student_summary,
    total_weight,
    weight_warning,
    weighted_average,
    weighted_breakdown,
)
from educloud.portal.models import Grade, GradeType


def _type(type_id, weight, name=None, active=True, max_score=100):
    return GradeType.model_validate(
        {"_id": type_id, "name": name or type_id, "weight": weight, "maxScore": max_score, "isActive": active}
    )


def _grade(type_id, score, max_score=100, student="s1", **extra):
    data = {
        "_id": f"{type_id}-{student}-{score}",
        "studentId": student,
        "classId": "c1",
        "subjectId": "math",
        "gradeTypeId": type_id,
        "score": score,
        "maxScore": max_score,
    }
    data.update(extra)
    return Grade.model_validate(data)


@pytest.mark.parametrize(
    "score,max_score,expected",
    [(80, 100, 80.0), (40, 50, 80.0), (0, 20, 0.0), ("7.5", "10", 75.0), (12, 10, 120.0)],
)
def test_percentage(score, max_score, expected):
    assert percentage(score, max_score) == pytest.approx(expected)


@pytest.mark.parametrize("score,max_score", [(5, 0), (5, -10), ("", 100), (None, 100), ("abc", 100), (5, ""), ("nan", 100), ("inf", 100), (5, "Infinity"), (float("nan"), 100)])
def test_percentage_undefined(score, max_score):
    assert percentage(score, max_score) is None


def test_grade_band_thresholds():
    assert grade_band(90) is GradeBand.EXCEPTIONAL
    assert grade_band(89.99) is GradeBand.GOOD
    assert grade_band(70) is GradeBand.SATISFACTORY
    assert grade_band(60) is GradeBand.PASSING
    assert grade_band(59.9) is GradeBand.FAILING
    assert grade_band(None) is None


def test_letter_grade_default_scale():
    assert letter_grade(100) == "A+"
    assert letter_grade(97) == "A+"
    assert letter_grade(92.5) == "A-"
    assert letter_grade(80) == "B-"
    assert letter_grade(60) == "D-"
    assert letter_grade(12) == "F"
    assert letter_grade(-5) == "F"
    assert letter_grade(None) is None


def test_weighted_average_exam_and_quiz():
    types = [_type("exam", 0.5, "Exam"), _type("quiz", 0.5, "Quiz", max_score=50)]
    grades = [_grade("exam", 80, 100), _grade("quiz", 40, 50)]
    assert weighted_average(grades, types) == pytest.approx(80)


def test_weighted_average_ignores_null_weight_types():
    types = [_type("exam", 0.5), _type("quiz", 0.5), _type("homework", None)]
    grades = [_grade("exam", 80), _grade("quiz", 40, 50), _grade("homework", 10)]
    assert weighted_average(grades, types) == pytest.approx(80)


def test_weighted_average_averages_within_type():
    types = [_type("exam", 0.6), _type("quiz", 0.4)]
    grades = [_grade("exam", 70), _grade("exam", 90), _grade("quiz", 50)]
    # exam avg 80, quiz 50
    assert weighted_average(grades, types) == pytest.approx(0.6 * 80 + 0.4 * 50)


def test_weighted_average_normalizes_partial_weights():
    types = [_type("exam", 0.3), _type("quiz", 0.3), _type("project", 0.4)]
    grades = [_grade("exam", 90), _grade("quiz", 70)]
    assert weighted_average(grades, types) == pytest.approx(80)


def test_weighted_average_none_when_nothing_weighted():
    types = [_type("homework", None)]
    assert weighted_average([_grade("homework", 50)], types) is None
    assert weighted_average([], types) is None


def test_server_percentage_wins_over_derived():
    g = _grade("exam", 1, 100, percentage=95)
    assert weighted_average([g], [_type("exam", 1.0)]) == pytest.approx(95)


def test_weighted_breakdown():
    types = [_type("exam", 0.5, "Exam")]
    rows = weighted_breakdown([_grade("exam", 70), _grade("exam", 85)], types)
    assert rows == [{"gradeTypeId": "exam", "name": "Exam", "count": 2, "averagePercentage": 77.5, "weight": 0.5}]


def test_total_weight_counts_active_non_null_only():
    types = [_type("a", 0.5), _type("b", 0.25), _type("c", None), _type("d", 0.25, active=False)]
    assert total_weight(types) == pytest.approx(0.75)
    assert "75%" in weight_warning(types)


def test_weight_warning_silent_at_one():
    assert weight_warning([_type("a", 0.1), _type("b", 0.2), _type("c", 0.7)]) is None


def test_grade_type_weight_range():
    with pytest.raises(ValueError):
        _type("a", 1.5)


def test_class_average_is_mean_of_student_means():
    grades = [_grade("exam", 80, student="s1"), _grade("exam", 100, student="s1"), _grade("exam", 70, student="s2")]
    assert class_average(grades) == pytest.approx(80)
    assert class_average([]) is None


def test_grade_trend():
    assert grade_trend([_grade("exam", 50), _grade("exam", 90)]) is Trend.STABLE
    assert grade_trend([_grade("exam", s) for s in (60, 62, 80, 85)]) is Trend.IMPROVING
    assert grade_trend([_grade("exam", s) for s in (90, 88, 70, 60)]) is Trend.DECLINING
    assert grade_trend([_grade("exam", s) for s in (80, 81, 83)]) is Trend.STABLE


def test_gpa_lookup():
    assert gpa_for("B") == 3.0
    assert gpa_for(None) is None


def test_class_distribution_counts_students_by_letter():
    grades = [
        _grade("exam", 95, student="s1"),
        _grade("exam", 99, student="s1"),
        _grade("exam", 85, student="s2"),
        _grade("exam", 40, student="s3"),
    ]
    result = class_distribution(grades)
    assert result["studentCount"] == 3
    assert result["distribution"] == {"A+": 1, "B": 1, "F": 1}
    assert result["classAverage"] == pytest.approx((97 + 85 + 40) / 3, abs=0.01)


def test_class_distribution_empty():
    assert class_distribution([]) == {"classAverage": None, "studentCount": 0, "distribution": {}}


def test_student_summary_per_subject_and_overall():
    types = [_type("exam", 0.5), _type("quiz", 0.5)]
    grades = [
        _grade("exam", 80, subjectId="math"),
        _grade("quiz", 40, 50, subjectId="math"),
        _grade("exam", 90, subjectId="art"),
        _grade("quiz", 100, subjectId="art"),
    ]
    summary = student_summary(grades, types)
    by_subject = {s["subjectId"]: s for s in summary["subjects"]}
    assert by_subject["math"]["weightedAverage"] == pytest.approx(80)
    assert by_subject["math"]["letterGrade"] == "B-"
    assert by_subject["math"]["gpa"] == 2.7
    assert by_subject["art"]["letterGrade"] == "A"
    assert by_subject["art"]["gradeCount"] == 2
    assert summary["overallAverage"] == pytest.approx(87.5)
    assert summary["overallGPA"] == pytest.approx(3.35)


def test_student_summary_skips_unweighted_subjects_in_overall():
    types = [_type("exam", 1.0), _type("homework", None)]
    grades = [_grade("exam", 70, subjectId="math"), _grade("homework", 100, subjectId="art")]
    summary = student_summary(grades, types)
    art = next(s for s in summary["subjects"] if s["subjectId"] == "art")
    assert art["weightedAverage"] is None and art["letterGrade"] is None
    assert summary["overallAverage"] == pytest.approx(70)
    assert summary["overallGPA"] == pytest.approx(1.7)
    assert student_summary([], types) == {"subjects": [], "overallAverage": None, "overallGPA": None}
