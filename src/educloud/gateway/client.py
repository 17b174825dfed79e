"""
HTTP Gateway
Single outbound client for the EduCloud REST API.

- Picks the bearer token per request from the path prefix
- Turns a 401 into a forced logout of the domain that owns the request path
- No automatic retries; transport failures surface as NetworkError
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from educloud.gateway.demo import demo_response
from educloud.gateway.navigator import Navigator, RecordingNavigator
from educloud.identity.domain import (
    SCHOOL_API_PREFIXES,
    domain_for_api_path,
    has_path_prefix,
    is_login_route,
)
from educloud.identity.session import SessionContext
from educloud.shared.exceptions import NetworkError, StorageError, error_for_status
from educloud.shared.logging import clear_correlation_id, get_logger, set_correlation_id

logger = get_logger(__name__)


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


class HttpGateway:
    """
    Async gateway over httpx.AsyncClient.

    Attributes:
        sessions: Provider and school session stores
        navigator: Current location + redirect sink for forced logouts
    """

    def __init__(
        self,
        base_url: str,
        sessions: SessionContext,
        navigator: Optional[Navigator] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
        demo_email: Optional[str] = None,
    ) -> None:
        self.sessions = sessions
        self.navigator: Navigator = navigator or RecordingNavigator()
        self._demo_email = demo_email
        self._client = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "HttpGateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------ token choice

    def select_token(self, path: str) -> Optional[str]:
        """
        Portal and school-auth paths prefer the school token and fall back to
        the provider token; every other path uses the provider token.
        """
        provider_token = self.sessions.provider.token
        if any(has_path_prefix(path, p) for p in SCHOOL_API_PREFIXES):
            return self.sessions.school.token or provider_token
        return provider_token

    # ----------------------------------------------------------------- request

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        fallback: Optional[str] = None,
    ) -> httpx.Response:
        method = method.upper()
        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}

        if self._demo_email:
            fabricated = demo_response(
                method,
                path,
                json,
                provider_token=self.sessions.provider.token,
                demo_email=self._demo_email,
            )
            if fabricated is not None:
                logger.info("Demo request answered locally", method=method, path=path)
                return httpx.Response(200, json=fabricated, request=self._client.build_request(method, path))

        headers: Dict[str, str] = {}
        token = self.select_token(path)
        if token:
            headers["Authorization"] = f"Bearer {token}"

        set_correlation_id()
        try:
            try:
                response = await self._client.request(method, path, json=json, params=params or None, headers=headers)
            except httpx.TransportError as e:
                logger.warning("API unreachable", method=method, path=path, error=str(e))
                raise NetworkError(fallback or "Unable to reach the server.", details={"error": str(e)}) from e

            logger.debug("API response", method=method, path=path, status_code=response.status_code)

            if response.status_code == 401:
                await self._handle_unauthorized(path)

            if response.is_error:
                body = _decode_body(response)
                raise error_for_status(response.status_code, body, fallback=fallback)
            return response
        finally:
            clear_correlation_id()

    async def _handle_unauthorized(self, path: str) -> None:
        if is_login_route(self.navigator.location):
            return
        domain = domain_for_api_path(path)
        try:
            await self.sessions.for_domain(domain).force_logout("unauthorized_response")
        except StorageError as e:
            # Already recorded in the session's error slot; the 401 still wins.
            logger.error("Could not remove expired session", domain=domain.value, error=e.message)
        logger.info("Session expired; redirecting to login", domain=domain.value, path=path)
        self.navigator.redirect(domain.routes.login_route)

    # ----------------------------------------------------------------- helpers

    async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self.request(method, path, **kwargs)
        return _decode_body(response)

    async def get(self, path: str, *, params: Optional[Dict[str, Any]] = None, fallback: Optional[str] = None) -> Any:
        return await self._json("GET", path, params=params, fallback=fallback)

    async def post(self, path: str, *, json: Any = None, fallback: Optional[str] = None) -> Any:
        return await self._json("POST", path, json=json, fallback=fallback)

    async def put(self, path: str, *, json: Any = None, fallback: Optional[str] = None) -> Any:
        return await self._json("PUT", path, json=json, fallback=fallback)

    async def patch(self, path: str, *, json: Any = None, fallback: Optional[str] = None) -> Any:
        return await self._json("PATCH", path, json=json, fallback=fallback)

    async def delete(self, path: str, *, fallback: Optional[str] = None) -> Any:
        return await self._json("DELETE", path, fallback=fallback)

