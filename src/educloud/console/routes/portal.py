# src/educloud/console/routes/portal.py
"""
School portal routes under /portal, guarded by the school session only.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import RedirectResponse

from educloud.client import EduCloudClient
from educloud.console.dependencies import enforce_route_guard, get_client, get_school_session
from educloud.grading.engine import class_average, weighted_breakdown
from educloud.identity.domain import AuthDomain
from educloud.identity.session import SessionStore

router = APIRouter(prefix="/portal", tags=["School Portal"], dependencies=[Depends(enforce_route_guard)])

HOME = AuthDomain.SCHOOL.routes.home_route
LOGIN = AuthDomain.SCHOOL.routes.login_route


@router.get("/login")
async def login_page() -> Dict[str, Any]:
    return {"page": "school_login"}


@router.post("/login")
async def login(
    credentials: Dict[str, Any] = Body(...),
    session: SessionStore = Depends(get_school_session),
):
    await session.login(credentials)
    return RedirectResponse(HOME, status_code=303)


@router.post("/logout")
async def logout(session: SessionStore = Depends(get_school_session)):
    await session.logout()
    return RedirectResponse(LOGIN, status_code=303)


@router.get("")
async def dashboard(
    client: EduCloudClient = Depends(get_client),
    session: SessionStore = Depends(get_school_session),
) -> Dict[str, Any]:
    current = await client.portal.terms.fetch_current()
    user = session.user
    return {
        "page": "dashboard",
        "user": user.model_dump(by_alias=True, mode="json") if user else None,
        "currentTerm": current.to_api() if current else None,
    }


@router.get("/students")
async def students(
    class_id: Optional[str] = Query(default=None, alias="classId"),
    search: Optional[str] = Query(default=None),
    client: EduCloudClient = Depends(get_client),
) -> Dict[str, Any]:
    items = await client.portal.students.fetch_students(class_id=class_id, search=search)
    return {"students": [s.to_api() for s in items]}


@router.get("/teachers")
async def teachers(client: EduCloudClient = Depends(get_client)) -> Dict[str, Any]:
    items = await client.portal.teachers.fetch_all()
    return {"teachers": [t.to_api() for t in items]}


@router.get("/classes")
async def classes(
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    client: EduCloudClient = Depends(get_client),
) -> Dict[str, Any]:
    items = await client.portal.classes.fetch_classes(is_active=is_active)
    return {"classes": [c.to_api() for c in items]}


@router.get("/subjects")
async def subjects(client: EduCloudClient = Depends(get_client)) -> Dict[str, Any]:
    items = await client.portal.subjects.fetch_subjects()
    return {"subjects": [s.to_api() for s in items]}


@router.get("/assignments")
async def assignments(client: EduCloudClient = Depends(get_client)) -> Dict[str, Any]:
    items = await client.portal.assignments.fetch_assignments()
    return {"assignments": [a.to_api() for a in items]}


@router.get("/grade-types")
async def grade_types(client: EduCloudClient = Depends(get_client)) -> Dict[str, Any]:
    store = client.portal.grade_types
    items = await store.fetch_grade_types()
    return {
        "gradeTypes": [g.to_api() for g in items],
        "totalWeight": store.total_weight,
        "weightWarning": store.weight_warning,
    }


@router.get("/terms")
async def terms(client: EduCloudClient = Depends(get_client)) -> Dict[str, Any]:
    store = client.portal.terms
    items = await store.fetch_all()
    return {
        "terms": [t.to_api() for t in items],
        "currentTermId": store.current.id if store.current else None,
    }


@router.get("/grades")
async def grades(
    class_id: Optional[str] = Query(default=None, alias="classId"),
    subject_id: Optional[str] = Query(default=None, alias="subjectId"),
    term_id: Optional[str] = Query(default=None, alias="termId"),
    client: EduCloudClient = Depends(get_client),
) -> Dict[str, Any]:
    store = client.portal.grades
    store.set_filters(class_id=class_id, subject_id=subject_id, term_id=term_id)
    items = await store.fetch_grades()
    types = client.portal.grade_types.items or await client.portal.grade_types.fetch_grade_types()
    return {
        "grades": [g.to_api() for g in items],
        "classAverage": class_average(items),
        "breakdown": weighted_breakdown(items, types),
    }


@router.get("/grades/add")
async def bulk_entry_sheet(
    class_id: Optional[str] = Query(default=None, alias="classId"),
    subject_id: Optional[str] = Query(default=None, alias="subjectId"),
    grade_type_id: Optional[str] = Query(default=None, alias="gradeTypeId"),
    client: EduCloudClient = Depends(get_client),
) -> Dict[str, Any]:
    """Blank score sheet for the selected class, defaulting to the current term."""
    entry = client.bulk_entry()
    current = client.portal.terms.current or await client.portal.terms.fetch_current()
    entry.select(
        class_id=class_id or "",
        subject_id=subject_id or "",
        grade_type_id=grade_type_id or "",
        term_id=current.id if current else None,
    )
    if class_id:
        entry.load_roster(await client.portal.students.fetch_students(class_id=class_id))
    return entry.as_dict()
