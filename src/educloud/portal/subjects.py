from __future__ import annotations

from typing import List, Optional

from educloud.portal.models import Subject
from educloud.shared.resource_store import ToggleableResourceStore


class SubjectStore(ToggleableResourceStore[Subject]):
    model = Subject
    base_path = "/portal/subjects"
    singular = "subject"
    plural = "subjects"

    async def fetch_subjects(self, *, is_active: Optional[bool] = None) -> List[Subject]:
        params = {"isActive": None if is_active is None else str(is_active).lower()}
        return await self.fetch_all(params)

    def active(self) -> List[Subject]:
        return [s for s in self.items if s.is_active]
