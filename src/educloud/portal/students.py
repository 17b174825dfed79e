from __future__ import annotations

from typing import List, Optional

from educloud.portal.models import Student
from educloud.shared.resource_store import ToggleableResourceStore


def class_roster(students: List[Student], class_id: Optional[str]) -> List[Student]:
    """Active students of one class, ordered by last name then first name."""
    if not class_id:
        return []
    roster = [s for s in students if s.class_id == class_id and s.is_active]
    return sorted(roster, key=lambda s: s.sort_key)


class StudentStore(ToggleableResourceStore[Student]):
    model = Student
    base_path = "/portal/students"
    singular = "student"
    plural = "students"

    async def fetch_students(
        self,
        *,
        class_id: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> List[Student]:
        params = {
            "classId": class_id,
            "isActive": None if is_active is None else str(is_active).lower(),
            "search": search,
        }
        return await self.fetch_all(params)

    def roster(self, class_id: Optional[str]) -> List[Student]:
        return class_roster(self.items, class_id)
