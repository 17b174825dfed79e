"""
Grade arithmetic and the bulk assessment entry workflow.
"""
from educloud.grading.engine import (
    DEFAULT_SCALE,
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

__all__ = [
    "DEFAULT_SCALE",
    "GradeBand",
    "Trend",
    "class_average",
    "class_distribution",
    "gpa_for",
    "grade_band",
    "grade_trend",
    "letter_grade",
    "percentage",
    "student_summary",
    "total_weight",
    "weight_warning",
    "weighted_average",
    "weighted_breakdown",
]
