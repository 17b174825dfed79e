# src/educloud/console/dependencies.py
from __future__ import annotations

from fastapi import Depends, Request

from educloud.client import EduCloudClient
from educloud.identity.domain import AuthDomain
from educloud.identity.guards import resolve_route
from educloud.identity.session import SessionStore
from educloud.shared.logging import get_logger

logger = get_logger(__name__)


class RouteRedirect(Exception):
    """Raised by a guard; rendered as a redirect response."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(location)


def get_client(request: Request) -> EduCloudClient:
    return request.app.state.client


async def enforce_route_guard(request: Request, client: EduCloudClient = Depends(get_client)) -> None:
    """
    Apply the guard of the tree the requested path belongs to.

    Also records the path as the navigator's current location so a 401 during
    this request knows whether the user is already on a login route.
    """
    path = request.url.path
    navigate = getattr(client.navigator, "go", None)
    if navigate is not None:
        navigate(path)
    target = resolve_route(path, client.sessions)
    if target is not None and target != path:
        logger.debug("Route guard redirect", path=path, target=target)
        raise RouteRedirect(target)


def get_provider_session(client: EduCloudClient = Depends(get_client)) -> SessionStore:
    return client.sessions.for_domain(AuthDomain.PROVIDER)


def get_school_session(client: EduCloudClient = Depends(get_client)) -> SessionStore:
    return client.sessions.for_domain(AuthDomain.SCHOOL)
