# src/educloud/provider/tenants.py
"""
Tenant (school) management for provider administrators.

Creating a tenant also creates its first admin user; the API answers with
`{tenant, adminUser, tempPassword}` and the temporary password is held until
taken, exactly like teacher onboarding in the portal.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from educloud.provider.models import (
    AdminUserData,
    Pagination,
    Tenant,
    TenantCreate,
    TenantMetrics,
    TenantRole,
    TenantStatus,
    TenantUser,
    TenantUserCreate,
)
from educloud.shared.exceptions import EduCloudError
from educloud.shared.resource_store import BaseResourceStore, Payload, ToggleableResourceStore, to_payload


class TenantStore(BaseResourceStore[Tenant]):
    model = Tenant
    base_path = "/provider/tenants"
    singular = "tenant"
    plural = "tenants"
    list_key = "tenants"

    def __init__(self, gateway) -> None:
        super().__init__(gateway)
        self.pagination: Optional[Pagination] = None
        self.admin_user: Optional[TenantUser] = None
        self._temp_password: Optional[str] = None

    def take_temp_password(self) -> Optional[str]:
        value, self._temp_password = self._temp_password, None
        return value

    async def fetch_tenants(
        self,
        *,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[TenantStatus] = None,
        search: Optional[str] = None,
    ) -> List[Tenant]:
        async def _do() -> List[Tenant]:
            data = await self._gateway.get(
                self.base_path,
                params={
                    "page": page,
                    "limit": limit,
                    "status": status.value if status else None,
                    "search": search,
                },
                fallback="Failed to fetch tenants",
            )
            if isinstance(data, dict) and data.get("pagination"):
                self.pagination = Pagination.model_validate(data["pagination"])
            return self._parse_list(data)

        self.items = await self._call(_do, action="fetch_all", track_loading=True)
        return self.items

    async def create_tenant(
        self,
        tenant: Union[TenantCreate, Mapping[str, Any]],
        admin_user: Union[AdminUserData, Mapping[str, Any]],
    ) -> Tenant:
        tenant_payload = self._validate(TenantCreate, tenant)
        admin_payload = self._validate(AdminUserData, admin_user)

        async def _do() -> Tuple[Tenant, Optional[TenantUser], Optional[str]]:
            body = await self._gateway.post(
                self.base_path,
                json={"tenant": to_payload(tenant_payload), "adminUserData": to_payload(admin_payload)},
                fallback="Failed to create tenant",
            )
            body = body or {}
            admin = body.get("adminUser")
            return (
                self._parse(body.get("tenant", body)),
                TenantUser.model_validate(admin) if admin else None,
                body.get("tempPassword"),
            )

        created, self.admin_user, self._temp_password = await self._call(_do, action="create", track_loading=True)
        self._prepend(created)
        return created

    async def set_status(self, tenant_id: str, status: Union[TenantStatus, str]) -> Tenant:
        value = TenantStatus(status)

        async def _do() -> Tenant:
            body = await self._gateway.put(
                self._path(tenant_id, "status"),
                json={"status": value.value},
                fallback="Failed to update tenant status",
            )
            return self._parse(body)

        tenant = await self._call(_do, action="set_status")
        self._replace(tenant)
        return tenant


class _TenantScopedStore:
    """Mixin for collections nested under one tenant: /provider/tenants/{id}/..."""

    collection: str

    def __init__(self, gateway, tenant_id: str) -> None:
        super().__init__(gateway)  # type: ignore[call-arg]
        self.tenant_id = tenant_id
        self.base_path = f"{TenantStore.base_path}/{tenant_id}/{self.collection}"


class TenantUserStore(_TenantScopedStore, ToggleableResourceStore[TenantUser]):
    model = TenantUser
    collection = "users"
    singular = "user"
    plural = "users"

    async def create(self, data: Payload) -> TenantUser:
        payload = self._validate(TenantUserCreate, data)
        return await super().create(payload)


class TenantRoleStore(_TenantScopedStore, BaseResourceStore[TenantRole]):
    model = TenantRole
    collection = "roles"
    singular = "role"
    plural = "roles"

    async def set_permissions(self, role_id: str, permissions: List[str]) -> TenantRole:
        return await self.update(role_id, {"permissions": list(permissions)})


class TenantMetricsStore:
    """Usage counters per tenant, cached by tenant id."""

    def __init__(self, gateway) -> None:
        self._gateway = gateway
        self.metrics: Dict[str, TenantMetrics] = {}
        self.error: Optional[str] = None

    async def fetch(self, tenant_id: str) -> TenantMetrics:
        self.error = None
        try:
            data = await self._gateway.get(
                f"{TenantStore.base_path}/{tenant_id}/metrics",
                fallback="Failed to fetch metrics",
            )
        except EduCloudError as e:
            self.error = e.message
            raise
        metrics = TenantMetrics.model_validate(data or {})
        self.metrics[tenant_id] = metrics
        return metrics
