# src/educloud/console/routes/provider.py
"""
Provider console routes.

`/login` and `/signup` are public (anonymous only); everything else is
protected by the provider session. Views return JSON snapshots of the stores.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import RedirectResponse

from educloud.client import EduCloudClient
from educloud.console.dependencies import enforce_route_guard, get_client, get_provider_session
from educloud.identity.domain import AuthDomain
from educloud.identity.session import SessionStore
from educloud.provider.models import TenantStatus

router = APIRouter(tags=["Provider Console"], dependencies=[Depends(enforce_route_guard)])

HOME = AuthDomain.PROVIDER.routes.home_route
LOGIN = AuthDomain.PROVIDER.routes.login_route


def _session_view(session: SessionStore) -> Dict[str, Any]:
    user = session.user
    return {
        "authenticated": session.is_authenticated,
        "user": user.model_dump(by_alias=True, mode="json") if user else None,
    }


@router.get("/login")
async def login_page() -> Dict[str, Any]:
    return {"page": "provider_login"}


@router.post("/login")
async def login(
    credentials: Dict[str, Any] = Body(...),
    session: SessionStore = Depends(get_provider_session),
):
    await session.login(credentials)
    return RedirectResponse(HOME, status_code=303)


@router.get("/signup")
async def signup_page() -> Dict[str, Any]:
    return {"page": "provider_signup"}


@router.post("/signup")
async def signup(
    payload: Dict[str, Any] = Body(...),
    session: SessionStore = Depends(get_provider_session),
):
    await session.signup(payload)
    return RedirectResponse(HOME, status_code=303)


@router.post("/logout")
async def logout(session: SessionStore = Depends(get_provider_session)):
    await session.logout()
    return RedirectResponse(LOGIN, status_code=303)


@router.get("/")
async def dashboard(
    client: EduCloudClient = Depends(get_client),
    session: SessionStore = Depends(get_provider_session),
) -> Dict[str, Any]:
    tenants = await client.provider.tenants.fetch_tenants()
    by_status: Dict[str, int] = {s.value: 0 for s in TenantStatus}
    for t in tenants:
        by_status[t.status.value] += 1
    return {"page": "dashboard", "session": _session_view(session), "tenants": len(tenants), "byStatus": by_status}


@router.get("/tenants")
async def list_tenants(
    status: Optional[TenantStatus] = Query(default=None),
    search: Optional[str] = Query(default=None),
    page: Optional[int] = Query(default=None),
    client: EduCloudClient = Depends(get_client),
) -> Dict[str, Any]:
    store = client.provider.tenants
    tenants = await store.fetch_tenants(page=page, status=status, search=search)
    return {
        "tenants": [t.to_api() for t in tenants],
        "pagination": store.pagination.model_dump(mode="json") if store.pagination else None,
    }


@router.get("/tenants/{tenant_id}")
async def tenant_details(tenant_id: str, client: EduCloudClient = Depends(get_client)) -> Dict[str, Any]:
    tenant = await client.provider.tenants.fetch_one(tenant_id)
    return {"tenant": tenant.to_api()}


@router.get("/tenants/{tenant_id}/users")
async def tenant_users(tenant_id: str, client: EduCloudClient = Depends(get_client)) -> Dict[str, Any]:
    users = await client.tenant_users(tenant_id).fetch_all()
    return {"tenantId": tenant_id, "users": [u.to_api() for u in users]}


@router.get("/tenants/{tenant_id}/roles")
async def tenant_roles(tenant_id: str, client: EduCloudClient = Depends(get_client)) -> Dict[str, Any]:
    roles = await client.tenant_roles(tenant_id).fetch_all()
    return {"tenantId": tenant_id, "roles": [r.to_api() for r in roles]}


@router.get("/tenants/{tenant_id}/metrics")
async def tenant_metrics(tenant_id: str, client: EduCloudClient = Depends(get_client)) -> Dict[str, Any]:
    metrics = await client.provider.metrics.fetch(tenant_id)
    return {"tenantId": tenant_id, "metrics": metrics.model_dump(by_alias=True, mode="json")}
