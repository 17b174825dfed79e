from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Union

from educloud.portal.models import BulkGradeRequest, BulkGradeResult, Grade, GradeCreate, GradeUpdate
from educloud.shared.exceptions import ValidationError
from educloud.shared.resource_store import BaseResourceStore


@dataclass
class GradeFilters:
    class_id: Optional[str] = None
    subject_id: Optional[str] = None
    student_id: Optional[str] = None
    grade_type_id: Optional[str] = None
    term_id: Optional[str] = None
    is_published: Optional[bool] = None

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        for key, value in asdict(self).items():
            if value is None:
                continue
            camel = "".join(w.capitalize() if i else w for i, w in enumerate(key.split("_")))
            params[camel] = str(value).lower() if isinstance(value, bool) else value
        return params


class GradeStore(BaseResourceStore[Grade]):
    """
    Recorded grades.

    `percentage` and `letterGrade` are computed by the server; request bodies
    are built from `GradeCreate` / `GradeUpdate`, which have no such fields.
    Publishing is its own transition and never part of an edit.
    """

    model = Grade
    base_path = "/portal/grades"
    singular = "grade"
    plural = "grades"

    def __init__(self, gateway) -> None:
        super().__init__(gateway)
        self.filters = GradeFilters()

    def set_filters(self, **changes: Any) -> GradeFilters:
        for key, value in changes.items():
            if not hasattr(self.filters, key):
                raise ValidationError(f"Unknown grade filter: {key}", details={"filter": key})
            setattr(self.filters, key, value)
        return self.filters

    def clear_filters(self) -> None:
        self.filters = GradeFilters()

    async def fetch_grades(self) -> List[Grade]:
        return await self.fetch_all(self.filters.to_params())

    async def _fetch_scoped(self, scope: str, scope_id: str, params: Dict[str, Any]) -> List[Grade]:
        async def _do() -> List[Grade]:
            data = await self._gateway.get(self._path(scope, scope_id), params=params, fallback="Failed to fetch grades")
            return self._parse_list(data)

        self.items = await self._call(_do, action=f"fetch_{scope}", track_loading=True)
        return self.items

    async def fetch_by_class(
        self, class_id: str, *, subject_id: Optional[str] = None, term_id: Optional[str] = None
    ) -> List[Grade]:
        return await self._fetch_scoped("by-class", class_id, {"subjectId": subject_id, "termId": term_id})

    async def fetch_by_student(
        self, student_id: str, *, subject_id: Optional[str] = None, term_id: Optional[str] = None
    ) -> List[Grade]:
        return await self._fetch_scoped("by-student", student_id, {"subjectId": subject_id, "termId": term_id})

    async def create(self, data: Union[GradeCreate, Dict[str, Any]]) -> Grade:
        payload = self._validate(GradeCreate, data)
        return await super().create(payload)

    async def update(self, item_id: str, data: Union[GradeUpdate, Dict[str, Any]]) -> Grade:
        payload = self._validate(GradeUpdate, data)
        return await super().update(item_id, payload)

    async def bulk_create(self, request: Union[BulkGradeRequest, Dict[str, Any]]) -> BulkGradeResult:
        payload = self._validate(BulkGradeRequest, request)
        if not payload.grades:
            raise ValidationError(code="no_grades_entered")

        async def _do() -> BulkGradeResult:
            body = await self._gateway.post(
                self._path("bulk"),
                json=payload.model_dump(by_alias=True, exclude_none=True, mode="json"),
                fallback="Failed to save grades",
            )
            return BulkGradeResult.model_validate(body or {})

        return await self._call(_do, action="bulk_create")

    async def publish(self, grade_id: str, is_published: bool = True) -> Grade:
        async def _do() -> Grade:
            body = await self._gateway.patch(
                self._path(grade_id, "publish"),
                json={"isPublished": is_published},
                fallback="Failed to update grade",
            )
            return self._parse(body.get("grade", body) if isinstance(body, dict) else body)

        grade = await self._call(_do, action="publish")
        self._replace(grade)
        return grade

    async def unpublish(self, grade_id: str) -> Grade:
        return await self.publish(grade_id, False)
