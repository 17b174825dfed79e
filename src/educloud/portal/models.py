# src/educloud/portal/models.py
"""
School portal resources as the API returns them.

Every entity here is tenant-scoped; the tenant is derived server-side from the
school session token and never appears in a request.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from pydantic import Field, field_validator

from educloud.shared.models import ApiModel, ApiPayload, OptionalRefId, RefId


class Student(ApiModel):
    first_name: str
    last_name: str
    student_id_number: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    class_id: OptionalRefId = None
    guardian_name: Optional[str] = None
    guardian_email: Optional[str] = None
    guardian_phone: Optional[str] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def sort_key(self) -> str:
        return f"{self.last_name} {self.first_name}".lower()


class Teacher(ApiModel):
    first_name: str
    last_name: str
    email: str
    phone_number: Optional[str] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class ClassRoom(ApiModel):
    name: str
    grade_level: Optional[str] = None
    section: Optional[str] = None
    academic_year: Optional[str] = None
    room: Optional[str] = None
    is_active: bool = True
    student_count: int = 0


class Subject(ApiModel):
    name: str
    code: str
    is_active: bool = True


class ClassSubject(ApiModel):
    """A teacher assigned to teach one subject to one class. Unique per (class, subject)."""

    class_id: RefId
    subject_id: RefId
    teacher_id: RefId

    @property
    def pair(self) -> tuple[str, str]:
        return (self.class_id, self.subject_id)


class GradeType(ApiModel):
    name: str
    weight: Optional[float] = None
    max_score: int = 100
    is_active: bool = True

    @field_validator("weight")
    @classmethod
    def _weight_in_unit_range(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not 0 <= v <= 1:
            raise ValueError("weight must be between 0 and 1")
        return v


class Term(ApiModel):
    name: str
    academic_year: str
    start_date: datetime
    end_date: datetime
    is_current: bool = False
    is_active: bool = True


class Grade(ApiModel):
    student_id: RefId
    class_id: RefId
    subject_id: RefId
    grade_type_id: RefId
    term_id: OptionalRefId = None
    teacher_id: OptionalRefId = None
    title: Optional[str] = None
    score: float
    max_score: int = 100
    # Derived server-side; read-only on the client.
    percentage: Optional[float] = None
    letter_grade: Optional[str] = None
    assessment_date: Optional[datetime] = None
    teacher_notes: Optional[str] = None
    student_feedback: Optional[str] = None
    is_published: bool = False


# ─────────────────────────────── Request bodies ───────────────────────────────

DateLike = Union[date, str]


class GradeCreate(ApiPayload):
    student_id: str
    class_id: str
    subject_id: str
    grade_type_id: str
    score: float = Field(ge=0)
    assessment_date: DateLike
    term_id: Optional[str] = None
    title: Optional[str] = None
    max_score: int = Field(default=100, gt=0)
    teacher_notes: Optional[str] = None
    student_feedback: Optional[str] = None


class GradeUpdate(ApiPayload):
    """Fields a grade edit may touch. Publish state has its own transition."""

    title: Optional[str] = None
    score: Optional[float] = Field(default=None, ge=0)
    max_score: Optional[int] = Field(default=None, gt=0)
    teacher_notes: Optional[str] = None
    student_feedback: Optional[str] = None
    assessment_date: Optional[DateLike] = None
    grade_type_id: Optional[str] = None


class BulkGradeItem(ApiPayload):
    student_id: str
    score: float
    teacher_notes: Optional[str] = None
    student_feedback: Optional[str] = None


class BulkGradeRequest(ApiPayload):
    class_id: str
    subject_id: str
    grade_type_id: str
    assessment_date: DateLike
    term_id: Optional[str] = None
    title: Optional[str] = None
    max_score: int = Field(default=100, gt=0)
    grades: list[BulkGradeItem]


class BulkGradeResult(ApiPayload):
    model_config = {"extra": "ignore"}

    message: Optional[str] = None
    count: int = 0
