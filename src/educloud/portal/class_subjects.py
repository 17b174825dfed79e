from __future__ import annotations

from typing import List, Optional

from educloud.portal.models import ClassRoom, ClassSubject, Subject
from educloud.shared.resource_store import BaseResourceStore


class AssignmentStore(BaseResourceStore[ClassSubject]):
    """
    Class-subject assignments: which teacher teaches which subject to which class.

    The API keeps one assignment per (class, subject). Assigning a teacher to a
    pair that already exists updates that assignment instead of creating a
    second one, so the local cache never holds two rows for the same pair.
    """

    model = ClassSubject
    base_path = "/portal/class-subjects"
    singular = "assignment"
    plural = "assignments"

    def __init__(self, gateway) -> None:
        super().__init__(gateway)
        # Signed-in teacher's own assignments, kept apart from the full list.
        self.mine: List[ClassSubject] = []

    def find_pair(self, class_id: str, subject_id: str) -> Optional[ClassSubject]:
        return next((a for a in self.items if a.pair == (class_id, subject_id)), None)

    async def lookup_pair(self, class_id: str, subject_id: str) -> Optional[ClassSubject]:
        """Cached assignment for the pair, else ask the server. Does not touch the cached list."""
        cached = self.find_pair(class_id, subject_id)
        if cached is not None:
            return cached

        async def _do() -> List[ClassSubject]:
            data = await self._gateway.get(
                self.base_path,
                params={"classId": class_id, "subjectId": subject_id},
                fallback=f"Failed to fetch {self.plural}",
            )
            return self._parse_list(data)

        found = await self._call(_do, action="lookup_pair")
        return next((a for a in found if a.pair == (class_id, subject_id)), None)

    def for_class(self, class_id: str) -> List[ClassSubject]:
        return [a for a in self.items if a.class_id == class_id]

    async def fetch_assignments(
        self,
        *,
        class_id: Optional[str] = None,
        teacher_id: Optional[str] = None,
        subject_id: Optional[str] = None,
    ) -> List[ClassSubject]:
        return await self.fetch_all({"classId": class_id, "teacherId": teacher_id, "subjectId": subject_id})

    async def assign(self, class_id: str, subject_id: str, teacher_id: str) -> ClassSubject:
        existing = await self.lookup_pair(class_id, subject_id)
        if existing is not None:
            if existing.teacher_id == teacher_id:
                return existing
            updated = await self.update(existing.id, {"teacherId": teacher_id})
            if self.find(updated.id) is None:
                self._prepend(updated)
            return updated
        return await self.create({"classId": class_id, "subjectId": subject_id, "teacherId": teacher_id})

    async def unassign(self, class_id: str, subject_id: str) -> None:
        existing = await self.lookup_pair(class_id, subject_id)
        if existing is not None:
            await self.delete(existing.id)

    # Views scoped to the signed-in teacher.

    async def my_assignments(self) -> List[ClassSubject]:
        async def _do() -> List[ClassSubject]:
            data = await self._gateway.get("/portal/my/assignments", fallback="Failed to fetch assignments")
            return self._parse_list(data)

        self.mine = await self._call(_do, action="my_assignments", track_loading=True)
        return self.mine

    async def my_classes(self) -> List[ClassRoom]:
        async def _do() -> List[ClassRoom]:
            data = await self._gateway.get("/portal/my/classes", fallback="Failed to fetch classes")
            return [ClassRoom.model_validate(d) for d in (data or [])]

        return await self._call(_do, action="my_classes")

    async def my_subjects(self, class_id: Optional[str] = None) -> List[Subject]:
        async def _do() -> List[Subject]:
            data = await self._gateway.get(
                "/portal/my/subjects",
                params={"classId": class_id},
                fallback="Failed to fetch subjects",
            )
            return [Subject.model_validate(d) for d in (data or [])]

        return await self._call(_do, action="my_subjects")
