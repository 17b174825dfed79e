from __future__ import annotations

from typing import List, Optional

from educloud.grading.engine import total_weight, weight_warning
from educloud.portal.models import GradeType
from educloud.shared.resource_store import BaseResourceStore


class GradeTypeStore(BaseResourceStore[GradeType]):
    """
    Assessment categories (Exam, Quiz, Homework...) and their weights.

    The API deactivates a grade type on DELETE rather than removing it, so
    grades already recorded against it keep their reference. The local list
    only shows types that are still in use.
    """

    model = GradeType
    base_path = "/portal/grade-types"
    singular = "grade type"
    plural = "grade types"

    async def fetch_grade_types(self, *, is_active: Optional[bool] = None) -> List[GradeType]:
        params = {"isActive": None if is_active is None else str(is_active).lower()}
        return await self.fetch_all(params)

    async def deactivate(self, grade_type_id: str) -> None:
        await self.delete(grade_type_id)

    def active(self) -> List[GradeType]:
        return [g for g in self.items if g.is_active]

    @property
    def total_weight(self) -> float:
        return total_weight(self.items)

    @property
    def weight_warning(self) -> Optional[str]:
        return weight_warning(self.items)
