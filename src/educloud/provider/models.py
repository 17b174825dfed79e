# src/educloud/provider/models.py
"""
Provider console resources: tenants (schools) and the users and roles inside them.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from educloud.shared.models import ApiModel, ApiPayload, RefId


class TenantStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class SubscriptionPlan(str, Enum):
    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"


class TenantSettings(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    timezone: str = "UTC"
    currency: str = "USD"


class Tenant(ApiModel):
    name: str
    slug: str
    subscription_plan: SubscriptionPlan = SubscriptionPlan.FREE
    status: TenantStatus = TenantStatus.ACTIVE
    settings: TenantSettings = Field(default_factory=TenantSettings)

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE


class TenantUser(ApiModel):
    first_name: str
    last_name: str
    email: str
    roles: List[RefId] = []
    phone_number: Optional[str] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class TenantRole(ApiModel):
    name: str
    permissions: List[str] = []
    is_default: bool = False


class TenantMetrics(BaseModel):
    """Counts reported for one tenant. Unknown counters are kept as extras."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    users_count: int = 0
    students_count: int = 0
    classes_count: int = 0
    subjects_count: int = 0


class Pagination(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    page: int = 1
    limit: int = 0
    total: int = 0
    pages: int = 0


# ─────────────────────────────── Request bodies ───────────────────────────────


class TenantCreate(ApiPayload):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1, pattern=r"^[a-z0-9-]+$")
    subscription_plan: SubscriptionPlan = SubscriptionPlan.FREE
    status: TenantStatus = TenantStatus.ACTIVE
    settings: Optional[Dict[str, Any]] = None


class AdminUserData(ApiPayload):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    password: Optional[str] = None


class TenantUserCreate(ApiPayload):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    password: Optional[str] = None
    roles: List[str] = []
    phone_number: Optional[str] = None
