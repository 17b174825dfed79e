from __future__ import annotations

from typing import List, Optional

from educloud.portal.models import ClassRoom, ClassSubject, Student
from educloud.shared.resource_store import ToggleableResourceStore


class ClassDetail(ClassRoom):
    """`GET /portal/classes/:id` also returns the roster and subject assignments."""

    students: List[Student] = []
    assignments: List[ClassSubject] = []


class ClassStore(ToggleableResourceStore[ClassRoom]):
    model = ClassRoom
    base_path = "/portal/classes"
    singular = "class"
    plural = "classes"

    async def fetch_classes(self, *, is_active: Optional[bool] = None) -> List[ClassRoom]:
        params = {"isActive": None if is_active is None else str(is_active).lower()}
        return await self.fetch_all(params)

    async def fetch_detail(self, class_id: str) -> ClassDetail:
        async def _do() -> ClassDetail:
            data = await self._gateway.get(self._path(class_id), fallback="Failed to fetch class")
            return ClassDetail.model_validate(data)

        detail = await self._call(_do, action="fetch_detail")
        self.selected = detail
        return detail

    def active(self) -> List[ClassRoom]:
        return [c for c in self.items if c.is_active]
