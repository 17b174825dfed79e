# src/educloud/client.py
"""
Composition root: settings -> storage -> sessions -> gateway -> resource stores.

    async with EduCloudClient.from_settings() as app:
        await app.sessions.school.login({"email": ..., "password": ..., "slug": ...})
        await app.portal.classes.fetch_classes(is_active=True)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from educloud.config import Settings, get_settings
from educloud.gateway.client import HttpGateway
from educloud.gateway.navigator import Navigator
from educloud.grading.bulk import BulkGradeEntry
from educloud.identity.session import SessionContext
from educloud.portal import (
    AssignmentStore,
    ClassStore,
    GradeStore,
    GradeTypeStore,
    StudentStore,
    SubjectStore,
    TeacherStore,
    TermStore,
)
from educloud.provider import TenantMetricsStore, TenantRoleStore, TenantStore, TenantUserStore, UserStore
from educloud.shared.logging import get_logger
from educloud.shared.storage import IKeyValueStorage, build_storage

logger = get_logger(__name__)


@dataclass
class PortalStores:
    students: StudentStore
    teachers: TeacherStore
    classes: ClassStore
    subjects: SubjectStore
    assignments: AssignmentStore
    grade_types: GradeTypeStore
    terms: TermStore
    grades: GradeStore

    @classmethod
    def create(cls, gateway: HttpGateway) -> "PortalStores":
        return cls(
            students=StudentStore(gateway),
            teachers=TeacherStore(gateway),
            classes=ClassStore(gateway),
            subjects=SubjectStore(gateway),
            assignments=AssignmentStore(gateway),
            grade_types=GradeTypeStore(gateway),
            terms=TermStore(gateway),
            grades=GradeStore(gateway),
        )


@dataclass
class ProviderStores:
    tenants: TenantStore
    metrics: TenantMetricsStore
    users: UserStore

    @classmethod
    def create(cls, gateway: HttpGateway) -> "ProviderStores":
        return cls(tenants=TenantStore(gateway), metrics=TenantMetricsStore(gateway), users=UserStore(gateway))


class EduCloudClient:
    """One wired-up client: two sessions sharing one gateway, plus every resource store."""

    def __init__(
        self,
        settings: Settings,
        storage: IKeyValueStorage,
        navigator: Optional[Navigator] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self.storage = storage
        self.sessions = SessionContext.from_storage(storage)
        self.gateway = HttpGateway(
            settings.api_base_url,
            self.sessions,
            navigator,
            transport=transport,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            demo_email=settings.DEMO_EMAIL if settings.DEMO_LOGIN_ENABLED else None,
        )
        self.sessions.bind(self.gateway)
        self.portal = PortalStores.create(self.gateway)
        self.provider = ProviderStores.create(self.gateway)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any) -> "EduCloudClient":
        settings = settings or get_settings()
        return cls(settings, build_storage(settings), **kwargs)

    @property
    def navigator(self) -> Navigator:
        return self.gateway.navigator

    def tenant_users(self, tenant_id: str) -> TenantUserStore:
        return TenantUserStore(self.gateway, tenant_id)

    def tenant_roles(self, tenant_id: str) -> TenantRoleStore:
        return TenantRoleStore(self.gateway, tenant_id)

    def bulk_entry(self) -> BulkGradeEntry:
        return BulkGradeEntry(self.portal.grades)

    async def start(self) -> "EduCloudClient":
        """Restore persisted sessions."""
        await self.sessions.rehydrate()
        logger.info(
            "Client ready",
            api_url=self.settings.api_base_url,
            provider_authenticated=self.sessions.provider.is_authenticated,
            school_authenticated=self.sessions.school.is_authenticated,
        )
        return self

    async def aclose(self) -> None:
        await self.gateway.aclose()

    async def __aenter__(self) -> "EduCloudClient":
        return await self.start()

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
