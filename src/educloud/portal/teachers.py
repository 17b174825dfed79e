from __future__ import annotations

from typing import Optional

from educloud.portal.models import Teacher
from educloud.shared.resource_store import Payload, ToggleableResourceStore, to_payload


class TeacherStore(ToggleableResourceStore[Teacher]):
    """
    Teachers of the school.

    Creating a teacher or resetting their password yields a temporary password
    that the API returns exactly once; the store holds it until it is taken.
    """

    model = Teacher
    base_path = "/portal/teachers"
    singular = "teacher"
    plural = "teachers"

    def __init__(self, gateway) -> None:
        super().__init__(gateway)
        self._temp_password: Optional[str] = None

    @property
    def has_temp_password(self) -> bool:
        return self._temp_password is not None

    def take_temp_password(self) -> Optional[str]:
        """Return the pending temporary password and forget it."""
        value, self._temp_password = self._temp_password, None
        return value

    async def create(self, data: Payload) -> Teacher:
        async def _do() -> dict:
            return await self._gateway.post(self.base_path, json=to_payload(data), fallback="Failed to create teacher")

        body = await self._call(_do, action="create")
        body = dict(body or {})
        self._temp_password = body.pop("tempPassword", None)
        teacher = self._parse(body)
        self._prepend(teacher)
        return teacher

    async def reset_password(self, teacher_id: str) -> Optional[str]:
        async def _do() -> dict:
            return await self._gateway.post(self._path(teacher_id, "reset-password"), fallback="Failed to reset password")

        body = await self._call(_do, action="reset_password")
        self._temp_password = (body or {}).get("tempPassword")
        return self._temp_password
