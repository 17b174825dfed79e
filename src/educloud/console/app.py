# src/educloud/console/app.py
"""
Console application: the provider console and school portal route trees.

Every route is guarded by the session of the tree it belongs to. Client
errors are rendered as `{code, message, details}`; a 401 from the API has
already logged the owning domain out, so it becomes a redirect to that
domain's login route.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse

from educloud.client import EduCloudClient
from educloud.config import Settings, get_settings
from educloud.console.dependencies import RouteRedirect
from educloud.console.routes.portal import router as portal_router
from educloud.console.routes.provider import router as provider_router
from educloud.identity.domain import AuthDomain, is_login_route
from educloud.identity.guards import classify_route
from educloud.shared.error_codes import http_status_for
from educloud.shared.exceptions import EduCloudError, NetworkError, UnauthorizedError
from educloud.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


def _json(status: int, payload: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status, content=jsonable_encoder(payload))


def create_app(client: Optional[EduCloudClient] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or (client.settings if client else get_settings())
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await app.state.client.start()
        try:
            yield
        finally:
            await app.state.client.aclose()

    app = FastAPI(title="EduCloud Console", version="1.0.0", lifespan=lifespan)
    app.state.client = client or EduCloudClient.from_settings(settings)

    app.include_router(portal_router)
    app.include_router(provider_router)

    @app.exception_handler(RouteRedirect)
    async def route_redirect_handler(_req: Request, exc: RouteRedirect):
        return RedirectResponse(exc.location, status_code=303)

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(req: Request, exc: UnauthorizedError):
        location = req.app.state.client.navigator.location
        if not is_login_route(location):
            domain, _ = classify_route(req.url.path)
            location = domain.routes.login_route
        logger.info("Session expired during request", path=req.url.path, redirect=location)
        return RedirectResponse(location, status_code=303)

    @app.exception_handler(EduCloudError)
    async def client_error_handler(_req: Request, exc: EduCloudError):
        return _json(
            exc.status_code or (502 if isinstance(exc, NetworkError) else http_status_for(exc.code)),
            {"code": exc.code, "message": exc.message, "details": exc.details or {}},
        )

    # Unknown paths fall back to the provider home.
    @app.get("/{unknown:path}", include_in_schema=False)
    async def fallback(unknown: str):
        return RedirectResponse(AuthDomain.PROVIDER.routes.home_route, status_code=303)

    return app
