import pytest
from pydantic import ValidationError as PydanticValidationError

from educloud.portal.models import GradeUpdate
from educloud.shared.exceptions import MalformedResponseError, ValidationError


def _term(tid, current=False):
    return {
        "_id": tid,
        "name": f"Term {tid}",
        "academicYear": "2024-2025",
        "startDate": "2024-09-01T00:00:00Z",
        "endDate": "2024-12-20T00:00:00Z",
        "isCurrent": current,
    }


async def test_set_current_term_leaves_exactly_one(client, api):
    api.on("GET", "/portal/terms", json=[_term("t1", True), _term("t2"), _term("t3")])
    api.on("PATCH", "/portal/terms/t3/current", json=_term("t3", True))
    store = client.portal.terms

    await store.fetch_all()
    assert store.current.id == "t1"

    await store.set_current("t3")
    await store.set_current("t3")
    assert [t.id for t in store.items if t.is_current] == ["t3"]
    assert store.current.id == "t3"


async def test_creating_current_term_clears_others(client, api):
    api.on("GET", "/portal/terms", json=[_term("t1", True)])
    api.on("POST", "/portal/terms", json=_term("t2", True))
    store = client.portal.terms
    await store.fetch_all()

    await store.create({"name": "Term t2", "academicYear": "2024-2025", "isCurrent": True})
    assert [t.id for t in store.items if t.is_current] == ["t2"]
    assert [t.id for t in store.items] == ["t2", "t1"]


async def test_fetch_current_term(client, api):
    api.on("GET", "/portal/terms/current", json=_term("t9", True))
    term = await client.portal.terms.fetch_current()
    assert term.id == "t9"
    assert term.start_date.year == 2024


async def test_assign_existing_pair_updates_instead_of_creating(client, api):
    api.on("GET", "/portal/class-subjects", json=[{"_id": "a1", "classId": "c1", "subjectId": "math", "teacherId": "tA"}])
    api.on("PUT", "/portal/class-subjects/a1", json={"_id": "a1", "classId": "c1", "subjectId": "math", "teacherId": {"_id": "tB"}})
    api.on("POST", "/portal/class-subjects", json={"_id": "a2", "classId": "c1", "subjectId": "art", "teacherId": "tA"})
    store = client.portal.assignments
    await store.fetch_assignments(class_id="c1")

    await store.assign("c1", "math", "tB")
    await store.assign("c1", "art", "tA")

    assert api.calls_to("PUT", "/portal/class-subjects/a1")[0]["json"] == {"teacherId": "tB"}
    assert len(api.calls_to("POST", "/portal/class-subjects")) == 1
    assert {a.pair: a.teacher_id for a in store.items} == {("c1", "math"): "tB", ("c1", "art"): "tA"}


async def test_grade_type_delete_deactivates_and_hides(client, api):
    api.on(
        "GET",
        "/portal/grade-types",
        json=[{"_id": "exam", "name": "Exam", "weight": 0.6}, {"_id": "quiz", "name": "Quiz", "weight": 0.4}],
    )
    api.on("DELETE", "/portal/grade-types/quiz", json={"message": "Grade type deactivated"})
    store = client.portal.grade_types
    await store.fetch_grade_types()
    assert store.weight_warning is None

    await store.deactivate("quiz")
    assert [g.id for g in store.items] == ["exam"]
    assert store.weight_warning is not None


async def test_teacher_temp_password_is_taken_once(client, api):
    api.on(
        "POST",
        "/portal/teachers",
        json={"_id": "t1", "firstName": "Ann", "lastName": "Lee", "email": "ann@greenfield.edu", "tempPassword": "Xy7!"},
    )
    api.on("POST", "/portal/teachers/t1/reset-password", json={"tempPassword": "Zz9?"})
    store = client.portal.teachers

    teacher = await store.create({"firstName": "Ann", "lastName": "Lee", "email": "ann@greenfield.edu"})
    assert teacher.full_name == "Ann Lee"
    assert store.take_temp_password() == "Xy7!"
    assert store.take_temp_password() is None

    await store.reset_password("t1")
    assert store.take_temp_password() == "Zz9?"


async def test_toggle_active_status(client, api):
    api.on("GET", "/portal/students", json=[{"_id": "s1", "firstName": "A", "lastName": "B", "classId": "c1"}])
    api.on("PATCH", "/portal/students/s1/status", json={"_id": "s1", "firstName": "A", "lastName": "B", "isActive": False})
    store = client.portal.students
    await store.fetch_students(class_id="c1", is_active=True)
    assert api.calls[0]["params"] == {"classId": "c1", "isActive": "true"}

    await store.set_active("s1", False)
    assert api.calls[1]["json"] == {"isActive": False}
    assert store.roster("c1") == []


def _grade(gid, published=False):
    return {
        "_id": gid,
        "studentId": {"_id": "s1", "firstName": "A"},
        "classId": "c1",
        "subjectId": "math",
        "gradeTypeId": "exam",
        "score": 45,
        "maxScore": 50,
        "percentage": 90,
        "letterGrade": "A-",
        "isPublished": published,
    }


async def test_publish_uses_dedicated_transition(client, api):
    api.on("GET", "/portal/grades/by-class/c1", json=[_grade("g1")])
    api.on("PATCH", "/portal/grades/g1/publish", json={"message": "Grade published", "grade": _grade("g1", True)})
    store = client.portal.grades
    await store.fetch_by_class("c1", subject_id="math")
    assert api.calls[0]["params"] == {"subjectId": "math"}
    assert store.items[0].student_id == "s1"

    grade = await store.publish("g1")
    assert api.calls[1]["json"] == {"isPublished": True}
    assert grade.is_published
    assert store.items[0].is_published


async def test_grade_update_cannot_carry_derived_or_publish_fields(client, api):
    with pytest.raises(PydanticValidationError):
        GradeUpdate.model_validate({"score": 40, "percentage": 80})
    with pytest.raises(PydanticValidationError):
        GradeUpdate.model_validate({"isPublished": True})

    api.on("PUT", "/portal/grades/g1", json=_grade("g1"))
    await client.portal.grades.update("g1", {"score": 45, "teacherNotes": "rechecked"})
    assert api.calls[0]["json"] == {"score": 45.0, "teacherNotes": "rechecked"}


async def test_grade_filters_become_query_params(client, api):
    api.on("GET", "/portal/grades", json=[])
    store = client.portal.grades
    store.set_filters(class_id="c1", term_id="t1", is_published=False)
    await store.fetch_grades()
    assert api.calls[0]["params"] == {"classId": "c1", "termId": "t1", "isPublished": "false"}

    store.clear_filters()
    await store.fetch_grades()
    assert api.calls[1]["params"] == {}


async def test_assign_looks_up_uncached_pair_before_creating(client, api):
    api.on("GET", "/portal/class-subjects", json=[{"_id": "a1", "classId": "c1", "subjectId": "math", "teacherId": "tA"}])
    api.on("PUT", "/portal/class-subjects/a1", json={"_id": "a1", "classId": "c1", "subjectId": "math", "teacherId": "tB"})
    store = client.portal.assignments

    assigned = await store.assign("c1", "math", "tB")

    lookup = api.calls_to("GET", "/portal/class-subjects")[0]
    assert lookup["params"] == {"classId": "c1", "subjectId": "math"}
    assert api.calls_to("POST", "/portal/class-subjects") == []
    assert assigned.teacher_id == "tB"
    assert [a.id for a in store.items] == ["a1"]


async def test_own_assignments_do_not_replace_the_full_list(client, api):
    api.on(
        "GET",
        "/portal/class-subjects",
        json=[
            {"_id": "a1", "classId": "c1", "subjectId": "math", "teacherId": "tA"},
            {"_id": "a2", "classId": "c1", "subjectId": "art", "teacherId": "tB"},
        ],
    )
    api.on("GET", "/portal/my/assignments", json=[{"_id": "a2", "classId": "c1", "subjectId": "art", "teacherId": "tB"}])
    api.on("PUT", "/portal/class-subjects/a1", json={"_id": "a1", "classId": "c1", "subjectId": "math", "teacherId": "tB"})
    store = client.portal.assignments
    await store.fetch_assignments()

    mine = await store.my_assignments()
    assert [a.id for a in mine] == ["a2"] and [a.id for a in store.mine] == ["a2"]
    assert [a.id for a in store.items] == ["a1", "a2"]

    await store.assign("c1", "math", "tB")
    assert len(api.calls_to("PUT", "/portal/class-subjects/a1")) == 1
    assert api.calls_to("POST", "/portal/class-subjects") == []


async def test_invalid_grade_is_rejected_before_any_request(client, api):
    store = client.portal.grades
    with pytest.raises(ValidationError) as exc:
        await store.create({"studentId": "s1"})
    assert exc.value.details["errors"]
    assert store.error == exc.value.message
    assert api.calls == []


async def test_malformed_grade_response_is_a_request_error(client, api):
    api.on("GET", "/portal/grades", json=[{"_id": "g1"}])
    store = client.portal.grades
    with pytest.raises(MalformedResponseError):
        await store.fetch_grades()
    assert store.error == "Unexpected response from the server."
    assert not store.is_loading
