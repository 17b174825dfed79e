from __future__ import annotations

from typing import List

from educloud.provider.models import TenantRole, TenantUser
from educloud.shared.resource_store import BaseResourceStore


class UserStore(BaseResourceStore[TenantUser]):
    """Users of the tenant bound to the caller's token, with the roles they can hold."""

    model = TenantUser
    base_path = "/users"
    singular = "user"
    plural = "users"

    def __init__(self, gateway) -> None:
        super().__init__(gateway)
        self.roles: List[TenantRole] = []

    async def fetch_roles(self) -> List[TenantRole]:
        async def _do() -> List[TenantRole]:
            data = await self._gateway.get("/roles", fallback="Failed to fetch roles")
            return [TenantRole.model_validate(r) for r in (data or [])]

        self.roles = await self._call(_do, action="fetch_roles")
        return self.roles
