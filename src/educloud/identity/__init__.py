"""
Identity: the provider and school auth domains, their sessions and route guards.
"""
from educloud.identity.domain import AuthDomain, Credentials, Profile, Session
from educloud.identity.guards import RouteGuard, RouteKind, classify_route, resolve_route
from educloud.identity.session import SessionContext, SessionStore

__all__ = [
    "AuthDomain",
    "Credentials",
    "Profile",
    "Session",
    "RouteGuard",
    "RouteKind",
    "classify_route",
    "resolve_route",
    "SessionContext",
    "SessionStore",
]
