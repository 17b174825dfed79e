"""
Provider console: tenants and the users, roles and usage inside each of them.
"""
from educloud.provider.models import SubscriptionPlan, Tenant, TenantMetrics, TenantRole, TenantStatus, TenantUser
from educloud.provider.tenants import TenantMetricsStore, TenantRoleStore, TenantStore, TenantUserStore
from educloud.provider.users import UserStore

__all__ = [
    "SubscriptionPlan",
    "Tenant",
    "TenantMetrics",
    "TenantRole",
    "TenantStatus",
    "TenantUser",
    "TenantMetricsStore",
    "TenantRoleStore",
    "TenantStore",
    "TenantUserStore",
    "UserStore",
]
