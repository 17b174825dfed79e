"""
School portal resources, scoped to the tenant of the school session.
"""
from educloud.portal.models import (
    BulkGradeRequest,
    BulkGradeResult,
    ClassRoom,
    ClassSubject,
    Grade,
    GradeCreate,
    GradeType,
    GradeUpdate,
    Student,
    Subject,
    Teacher,
    Term,
)
from educloud.portal.class_subjects import AssignmentStore
from educloud.portal.classes import ClassDetail, ClassStore
from educloud.portal.grade_types import GradeTypeStore
from educloud.portal.grades import GradeFilters, GradeStore
from educloud.portal.students import StudentStore, class_roster
from educloud.portal.subjects import SubjectStore
from educloud.portal.teachers import TeacherStore
from educloud.portal.terms import TermStore

__all__ = [
    "BulkGradeRequest",
    "BulkGradeResult",
    "ClassRoom",
    "ClassSubject",
    "Grade",
    "GradeCreate",
    "GradeType",
    "GradeUpdate",
    "Student",
    "Subject",
    "Teacher",
    "Term",
    "AssignmentStore",
    "ClassDetail",
    "ClassStore",
    "GradeTypeStore",
    "GradeFilters",
    "GradeStore",
    "StudentStore",
    "class_roster",
    "SubjectStore",
    "TeacherStore",
    "TermStore",
]
