# src/educloud/grading/engine.py
"""
Grade arithmetic shared by single-grade forms, bulk entry previews and reports.

Everything here is pure. `percentage` and the letter grade stored on a
`Grade` are authoritative server values; the functions below only mirror them
for live previews and client-side summaries, so there is exactly one
implementation of each rule on this side.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from educloud.portal.models import Grade, GradeType

WEIGHT_TOLERANCE = 1e-6
TREND_THRESHOLD = 5.0


class GradeBand(str, Enum):
    """Colour bands used when rendering a percentage."""

    EXCEPTIONAL = "exceptional"
    GOOD = "good"
    SATISFACTORY = "satisfactory"
    PASSING = "passing"
    FAILING = "failing"


class Trend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


@dataclass(frozen=True)
class ScaleEntry:
    letter: str
    min_percentage: float
    gpa: float


# Default tenant grading scale, highest band first. Cosmetic approximation only.
DEFAULT_SCALE: Tuple[ScaleEntry, ...] = (
    ScaleEntry("A+", 97, 4.0),
    ScaleEntry("A", 93, 4.0),
    ScaleEntry("A-", 90, 3.7),
    ScaleEntry("B+", 87, 3.3),
    ScaleEntry("B", 83, 3.0),
    ScaleEntry("B-", 80, 2.7),
    ScaleEntry("C+", 77, 2.3),
    ScaleEntry("C", 73, 2.0),
    ScaleEntry("C-", 70, 1.7),
    ScaleEntry("D+", 67, 1.3),
    ScaleEntry("D", 63, 1.0),
    ScaleEntry("D-", 60, 0.7),
    ScaleEntry("F", 0, 0.0),
)


def to_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    # "nan" and "inf" parse as floats but are not scores.
    return number if math.isfinite(number) else None


def percentage(score: Any, max_score: Any) -> Optional[float]:
    """`score / max_score * 100`, or None when either side is unusable or max_score <= 0."""
    s = to_number(score)
    m = to_number(max_score)
    if s is None or m is None or m <= 0:
        return None
    return s / m * 100


def grade_band(pct: Optional[float]) -> Optional[GradeBand]:
    if pct is None:
        return None
    if pct >= 90:
        return GradeBand.EXCEPTIONAL
    if pct >= 80:
        return GradeBand.GOOD
    if pct >= 70:
        return GradeBand.SATISFACTORY
    if pct >= 60:
        return GradeBand.PASSING
    return GradeBand.FAILING


def letter_grade(pct: Optional[float], scale: Sequence[ScaleEntry] = DEFAULT_SCALE) -> Optional[str]:
    if pct is None or not scale:
        return None
    ordered = sorted(scale, key=lambda e: e.min_percentage, reverse=True)
    for entry in ordered:
        if pct >= entry.min_percentage:
            return entry.letter
    return ordered[-1].letter


def gpa_for(letter: Optional[str], scale: Sequence[ScaleEntry] = DEFAULT_SCALE) -> Optional[float]:
    return next((e.gpa for e in scale if e.letter == letter), None)


def grade_percentage(grade: Grade) -> Optional[float]:
    """The server's percentage when present, otherwise derived from score/maxScore."""
    if grade.percentage is not None:
        return grade.percentage
    return percentage(grade.score, grade.max_score)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def _group_by_type(grades: Iterable[Grade]) -> Dict[str, List[float]]:
    groups: Dict[str, List[float]] = {}
    for grade in grades:
        pct = grade_percentage(grade)
        if pct is None:
            continue
        groups.setdefault(grade.grade_type_id, []).append(pct)
    return groups


def weighted_breakdown(grades: Iterable[Grade], grade_types: Iterable[GradeType]) -> List[Dict[str, Any]]:
    types = {t.id: t for t in grade_types}
    rows = []
    for type_id, scores in _group_by_type(grades).items():
        grade_type = types.get(type_id)
        rows.append(
            {
                "gradeTypeId": type_id,
                "name": grade_type.name if grade_type else None,
                "count": len(scores),
                "averagePercentage": round(_mean(scores), 2),
                "weight": grade_type.weight if grade_type else None,
            }
        )
    return rows


def weighted_average(grades: Iterable[Grade], grade_types: Iterable[GradeType]) -> Optional[float]:
    """
    Weighted mean of per-type average percentages.

    Types whose weight is null (or unknown) are excluded from both the sum
    and the normalising total. With weights summing to 1 this is exactly the
    weighted sum. Returns None when no weighted type has grades.
    """
    types = {t.id: t for t in grade_types}
    weighted_sum = 0.0
    weight_total = 0.0
    for type_id, scores in _group_by_type(grades).items():
        grade_type = types.get(type_id)
        if grade_type is None or grade_type.weight is None:
            continue
        weighted_sum += _mean(scores) * grade_type.weight
        weight_total += grade_type.weight
    if weight_total <= 0:
        return None
    return weighted_sum / weight_total


def total_weight(grade_types: Iterable[GradeType]) -> float:
    return sum(t.weight for t in grade_types if t.is_active and t.weight is not None)


def weight_warning(grade_types: Iterable[GradeType]) -> Optional[str]:
    """Advisory message when active weights do not add up to 100%."""
    total = total_weight(grade_types)
    if abs(total - 1.0) <= WEIGHT_TOLERANCE:
        return None
    return f"Active grade type weights add up to {total * 100:.0f}%, not 100%"


def class_average(grades: Iterable[Grade]) -> Optional[float]:
    """Mean of each student's mean percentage."""
    by_student: Dict[str, List[float]] = {}
    for grade in grades:
        pct = grade_percentage(grade)
        if pct is not None:
            by_student.setdefault(grade.student_id, []).append(pct)
    if not by_student:
        return None
    return round(_mean([_mean(v) for v in by_student.values()]), 2)


def class_distribution(grades: Iterable[Grade], scale: Sequence[ScaleEntry] = DEFAULT_SCALE) -> Dict[str, Any]:
    """Class average, number of graded students and a count of students per letter."""
    by_student: Dict[str, List[float]] = {}
    for grade in grades:
        pct = grade_percentage(grade)
        if pct is not None:
            by_student.setdefault(grade.student_id, []).append(pct)
    distribution: Dict[str, int] = {}
    for scores in by_student.values():
        letter = letter_grade(_mean(scores), scale)
        distribution[letter] = distribution.get(letter, 0) + 1
    averages = [_mean(v) for v in by_student.values()]
    return {
        "classAverage": round(_mean(averages), 2) if averages else None,
        "studentCount": len(averages),
        "distribution": distribution,
    }


def student_summary(
    grades: Iterable[Grade],
    grade_types: Iterable[GradeType],
    scale: Sequence[ScaleEntry] = DEFAULT_SCALE,
) -> Dict[str, Any]:
    """
    One student's report across subjects.

    Each subject gets its weighted average, letter and GPA. The overall
    figures are plain means over the subjects that have a weighted average.
    """
    types = list(grade_types)
    by_subject: Dict[str, List[Grade]] = {}
    for grade in grades:
        by_subject.setdefault(grade.subject_id, []).append(grade)

    subjects = []
    averages: List[float] = []
    gpas: List[float] = []
    for subject_id, subject_grades in by_subject.items():
        avg = weighted_average(subject_grades, types)
        avg = round(avg, 2) if avg is not None else None
        letter = letter_grade(avg, scale)
        gpa = gpa_for(letter, scale)
        subjects.append(
            {
                "subjectId": subject_id,
                "gradeCount": len(subject_grades),
                "weightedAverage": avg,
                "letterGrade": letter,
                "gpa": gpa,
                "breakdown": weighted_breakdown(subject_grades, types),
            }
        )
        if avg is not None:
            averages.append(avg)
            gpas.append(gpa or 0.0)

    return {
        "subjects": subjects,
        "overallAverage": round(_mean(averages), 2) if averages else None,
        "overallGPA": round(_mean(gpas), 2) if gpas else None,
    }


def grade_trend(grades: Sequence[Grade]) -> Trend:
    """Compare the first and second half of chronologically ordered grades."""
    scores = [p for p in (grade_percentage(g) for g in grades) if p is not None]
    if len(scores) < 3:
        return Trend.STABLE
    mid = len(scores) // 2
    diff = _mean(scores[mid:]) - _mean(scores[:mid])
    if diff > TREND_THRESHOLD:
        return Trend.IMPROVING
    if diff < -TREND_THRESHOLD:
        return Trend.DECLINING
    return Trend.STABLE
