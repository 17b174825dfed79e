# src/educloud/identity/guards.py
"""
Route guards.

Each identity domain has a protected-tree guard (unauthenticated -> that
domain's login) and a public-tree guard (authenticated -> that domain's home,
so a signed-in user never sees the login form). A guard only ever consults its
own domain's session.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from educloud.identity.domain import AuthDomain, has_path_prefix
from educloud.identity.session import SessionContext, SessionStore


class RouteKind(str, Enum):
    PROTECTED = "protected"
    PUBLIC = "public"


@dataclass(frozen=True)
class RouteGuard:
    domain: AuthDomain
    session: SessionStore

    def protect(self) -> Optional[str]:
        """Redirect target for a protected route, or None to let it through."""
        if not self.session.is_authenticated:
            return self.domain.routes.login_route
        return None

    def public(self) -> Optional[str]:
        """Redirect target for a public (login/signup) route, or None to let it through."""
        if self.session.is_authenticated:
            return self.domain.routes.home_route
        return None

    def check(self, kind: RouteKind) -> Optional[str]:
        return self.protect() if kind is RouteKind.PROTECTED else self.public()


# Public (anonymous-only) routes per domain; everything else in a tree is protected.
PUBLIC_ROUTES = {
    AuthDomain.PROVIDER: ("/login", "/signup"),
    AuthDomain.SCHOOL: ("/portal/login",),
}


def classify_route(path: str) -> tuple[AuthDomain, RouteKind]:
    """Which tree a console route belongs to, and whether it is public or protected."""
    domain = AuthDomain.SCHOOL if has_path_prefix(path, "/portal") else AuthDomain.PROVIDER
    if any(has_path_prefix(path, p) for p in PUBLIC_ROUTES[domain]):
        return domain, RouteKind.PUBLIC
    return domain, RouteKind.PROTECTED


def guards_for(sessions: SessionContext) -> dict[AuthDomain, RouteGuard]:
    return {
        AuthDomain.PROVIDER: RouteGuard(AuthDomain.PROVIDER, sessions.provider),
        AuthDomain.SCHOOL: RouteGuard(AuthDomain.SCHOOL, sessions.school),
    }


def resolve_route(path: str, sessions: SessionContext) -> Optional[str]:
    """Apply the matching guard to `path`; returns a redirect target or None."""
    domain, kind = classify_route(path)
    return guards_for(sessions)[domain].check(kind)
