# src/educloud/identity/domain.py
"""
Identity domains.

The platform has two independent identity domains:
- PROVIDER: the platform operator's console (tenant management)
- SCHOOL: in-school staff using the portal of a single tenant

Each domain owns its storage keys, its auth endpoints and its login/home routes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class AuthDomain(str, Enum):
    PROVIDER = "provider"
    SCHOOL = "school"

    @property
    def token_key(self) -> str:
        return f"{self.value}_token"

    @property
    def user_key(self) -> str:
        return f"{self.value}_user"

    @property
    def routes(self) -> "DomainRoutes":
        return DOMAIN_ROUTES[self]


@dataclass(frozen=True)
class DomainRoutes:
    login_route: str
    home_route: str
    login_endpoint: str
    profile_endpoint: str
    signup_endpoint: Optional[str] = None


DOMAIN_ROUTES = {
    AuthDomain.PROVIDER: DomainRoutes(
        login_route="/login",
        home_route="/",
        login_endpoint="/provider-auth/login",
        profile_endpoint="/provider-auth/me",
        signup_endpoint="/provider-auth/signup",
    ),
    AuthDomain.SCHOOL: DomainRoutes(
        login_route="/portal/login",
        home_route="/portal",
        login_endpoint="/auth/login",
        profile_endpoint="/auth/me",
    ),
}

# API path prefixes whose requests belong to the school domain.
SCHOOL_API_PREFIXES = ("/portal", "/auth")


def has_path_prefix(path: str, prefix: str) -> bool:
    """Prefix match on path-segment boundaries (`/auth` matches `/auth/me`, not `/authors`)."""
    # Stricter than a plain startswith: `/portalx` belongs to the provider domain.
    path = path.split("?", 1)[0]
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def domain_for_api_path(path: str) -> AuthDomain:
    if any(has_path_prefix(path, p) for p in SCHOOL_API_PREFIXES):
        return AuthDomain.SCHOOL
    return AuthDomain.PROVIDER


def is_login_route(location: str) -> bool:
    return any(has_path_prefix(location, r.login_route) for r in DOMAIN_ROUTES.values())


class Profile(BaseModel):
    """Authenticated user as returned by `/provider-auth/me` or `/auth/me`."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    email: str
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None
    tenant_id: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        full = " ".join(p for p in (self.first_name, self.last_name) if p)
        return full or self.email


class Credentials(BaseModel):
    """Login payload. `slug` selects the tenant and is only sent for the school domain."""

    model_config = {"str_strip_whitespace": True}

    email: EmailStr
    password: str = Field(..., min_length=1)
    slug: Optional[str] = None

    def payload_for(self, domain: AuthDomain) -> dict:
        body = {"email": str(self.email), "password": self.password}
        if domain is AuthDomain.SCHOOL and self.slug is not None:
            body["slug"] = self.slug
        return body


@dataclass(frozen=True)
class Session:
    token: Optional[str]
    user: Optional[Profile]

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


ANONYMOUS = Session(token=None, user=None)
