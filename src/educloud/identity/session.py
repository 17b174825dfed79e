# src/educloud/identity/session.py
"""
Session stores, one per identity domain.

A store keeps the current token + profile in memory, mirrors them to durable
storage under its own domain keys, and never touches the other domain's keys:
a user may hold a provider session and a school session at the same time.
"""
from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from educloud.identity.domain import ANONYMOUS, AuthDomain, Credentials, Profile, Session
from educloud.shared.exceptions import (
    AuthenticationError,
    EduCloudError,
    RequestError,
    StorageError,
    ValidationError,
)
from educloud.shared.logging import get_logger, log_security_event
from educloud.shared.storage import IKeyValueStorage

if TYPE_CHECKING:
    from educloud.gateway.client import HttpGateway

logger = get_logger(__name__)

PROVIDER_INVALID_LOGIN = (
    "Invalid email or password. If you have not created a provider manager "
    "account yet, go to Sign up first."
)


class SessionStore:
    """
    Auth state for a single identity domain.

    Attributes:
        domain: Which identity domain this store owns
        is_loading: True while a login/signup call is in flight
        error: Last failure message (banner slot), None when clear
    """

    def __init__(
        self,
        domain: AuthDomain,
        storage: IKeyValueStorage,
        gateway: Optional["HttpGateway"] = None,
    ) -> None:
        self.domain = domain
        self._storage = storage
        self._gateway = gateway
        self._session: Session = ANONYMOUS
        self.is_loading = False
        self.error: Optional[str] = None

    # ------------------------------------------------------------------ state

    def bind(self, gateway: "HttpGateway") -> None:
        self._gateway = gateway

    @property
    def session(self) -> Session:
        return self._session

    @property
    def token(self) -> Optional[str]:
        return self._session.token

    @property
    def user(self) -> Optional[Profile]:
        return self._session.user

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    def clear_error(self) -> None:
        self.error = None

    def _require_gateway(self) -> "HttpGateway":
        if self._gateway is None:
            raise RuntimeError(f"{self.domain.value} session store is not bound to a gateway")
        return self._gateway

    # ------------------------------------------------------------ persistence

    async def rehydrate(self) -> Session:
        """
        Restore the persisted session.

        Authenticated iff a token was found; validity is discovered lazily on
        the first authenticated call.
        """
        token = await self._storage.get(self.domain.token_key)
        raw_user = await self._storage.get(self.domain.user_key)
        user: Optional[Profile] = None
        if raw_user:
            try:
                user = Profile.model_validate(json.loads(raw_user))
            except (json.JSONDecodeError, PydanticValidationError) as e:
                logger.warning("Discarding unreadable persisted profile", domain=self.domain.value, error=str(e))
        self._session = Session(token=token or None, user=user)
        logger.debug("Session rehydrated", domain=self.domain.value, authenticated=self.is_authenticated)
        return self._session

    async def _establish(self, token: str, user: Optional[Profile]) -> Session:
        # Login overwrites any current session silently.
        self._session = Session(token=token, user=user)
        await self._storage.set(self.domain.token_key, token)
        if user is not None:
            await self._storage.set(self.domain.user_key, user.model_dump_json(by_alias=True))
        else:
            await self._storage.delete(self.domain.user_key)
        return self._session

    async def _clear(self) -> None:
        # Memory first: guards read the flag synchronously.
        self._session = ANONYMOUS
        failed: Optional[StorageError] = None
        for key in (self.domain.token_key, self.domain.user_key):
            try:
                await self._storage.delete(key)
            except StorageError as e:
                failed = failed or e
        if failed is not None:
            self.error = "Signed out here, but the saved session could not be removed"
            log_security_event("logout_not_persisted", domain=self.domain.value)
            raise failed

    # ---------------------------------------------------------------- actions

    def _session_from_response(self, data: Dict[str, Any]) -> tuple[str, Optional[Profile]]:
        token = data.get("token")
        if not token:
            raise AuthenticationError("Login response did not include a token")
        raw_user = data.get("providerUser") or data.get("user")
        user = Profile.model_validate(raw_user) if raw_user else None
        return token, user

    async def login(self, credentials: Union[Credentials, Dict[str, Any]]) -> Session:
        if not isinstance(credentials, Credentials):
            try:
                credentials = Credentials.model_validate(credentials)
            except PydanticValidationError as e:
                self.error = "Please enter a valid email and password"
                raise ValidationError(self.error, details={"errors": e.errors()}) from e

        gateway = self._require_gateway()
        routes = self.domain.routes
        self.is_loading = True
        self.error = None
        try:
            data = await gateway.post(
                routes.login_endpoint,
                json=credentials.payload_for(self.domain),
                fallback="Login failed",
            )
            token, user = self._session_from_response(data)
        except RequestError as e:
            self.error = self._login_error_message(e)
            log_security_event("login_failed", domain=self.domain.value, details={"status": e.status_code})
            if e.status_code == 401:
                raise AuthenticationError(self.error, details=e.details) from e
            raise
        except AuthenticationError as e:
            self.error = e.message
            raise
        finally:
            self.is_loading = False

        session = await self._establish(token, user)
        log_security_event("login", domain=self.domain.value, user_id=user.id if user else None)
        return session

    def _login_error_message(self, error: RequestError) -> str:
        if self.domain is AuthDomain.PROVIDER and error.status_code == 401:
            return PROVIDER_INVALID_LOGIN
        return error.message

    async def signup(self, payload: Dict[str, Any]) -> Session:
        """Create a provider and its first manager account, then sign in as that manager."""
        signup_endpoint = self.domain.routes.signup_endpoint
        if signup_endpoint is None:
            raise ValidationError(f"Signup is not available for the {self.domain.value} domain")

        gateway = self._require_gateway()
        self.is_loading = True
        self.error = None
        try:
            data = await gateway.post(signup_endpoint, json=payload, fallback="Signup failed")
            token, user = self._session_from_response(data)
        except EduCloudError as e:
            self.error = e.message
            raise
        finally:
            self.is_loading = False

        session = await self._establish(token, user)
        log_security_event("signup", domain=self.domain.value, user_id=user.id if user else None)
        return session

    async def logout(self) -> None:
        user_id = self.user.id if self.user else None
        self.error = None
        await self._clear()
        log_security_event("logout", domain=self.domain.value, user_id=user_id)

    async def force_logout(self, reason: str) -> None:
        """Recovery logout (expired/invalid token). Only this domain is affected."""
        user_id = self.user.id if self.user else None
        await self._clear()
        log_security_event("forced_logout", domain=self.domain.value, user_id=user_id, reason=reason)

    async def get_profile(self) -> Profile:
        """
        Refresh the profile from the API.

        Any failure logs this domain out as a side effect before re-raising.
        """
        gateway = self._require_gateway()
        try:
            data = await gateway.get(self.domain.routes.profile_endpoint, fallback="Failed to get profile")
            profile = Profile.model_validate(data)
        except (EduCloudError, PydanticValidationError) as e:
            await self.force_logout("profile_refresh_failed")
            if isinstance(e, EduCloudError):
                raise
            raise AuthenticationError("Profile response was malformed") from e

        self._session = Session(token=self.token, user=profile)
        await self._storage.set(self.domain.user_key, profile.model_dump_json(by_alias=True))
        return profile


class SessionContext:
    """
    The two session stores, passed explicitly to the gateway and the guards.
    """

    def __init__(self, provider: SessionStore, school: SessionStore) -> None:
        if provider.domain is not AuthDomain.PROVIDER or school.domain is not AuthDomain.SCHOOL:
            raise ValueError("SessionContext needs one provider store and one school store")
        self.provider = provider
        self.school = school

    @classmethod
    def from_storage(cls, storage: IKeyValueStorage) -> "SessionContext":
        return cls(
            provider=SessionStore(AuthDomain.PROVIDER, storage),
            school=SessionStore(AuthDomain.SCHOOL, storage),
        )

    def for_domain(self, domain: AuthDomain) -> SessionStore:
        return self.provider if domain is AuthDomain.PROVIDER else self.school

    def bind(self, gateway: "HttpGateway") -> None:
        self.provider.bind(gateway)
        self.school.bind(gateway)

    async def rehydrate(self) -> None:
        await self.provider.rehydrate()
        await self.school.rehydrate()
