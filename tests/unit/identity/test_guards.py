import pytest

from educloud.identity.domain import AuthDomain, domain_for_api_path, has_path_prefix
from educloud.identity.guards import RouteKind, classify_route, guards_for, resolve_route
from educloud.identity.session import SessionContext
from educloud.shared.storage import MemoryStorage


async def _sessions(**tokens):
    ctx = SessionContext.from_storage(MemoryStorage(tokens))
    await ctx.rehydrate()
    return ctx


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/", (AuthDomain.PROVIDER, RouteKind.PROTECTED)),
        ("/login", (AuthDomain.PROVIDER, RouteKind.PUBLIC)),
        ("/signup", (AuthDomain.PROVIDER, RouteKind.PUBLIC)),
        ("/tenants/42/users", (AuthDomain.PROVIDER, RouteKind.PROTECTED)),
        ("/portal", (AuthDomain.SCHOOL, RouteKind.PROTECTED)),
        ("/portal/grades/add", (AuthDomain.SCHOOL, RouteKind.PROTECTED)),
        ("/portal/login", (AuthDomain.SCHOOL, RouteKind.PUBLIC)),
        ("/portals", (AuthDomain.PROVIDER, RouteKind.PROTECTED)),
    ],
)
def test_classify_route(path, expected):
    assert classify_route(path) == expected


def test_prefix_matching_respects_segments():
    assert has_path_prefix("/auth/me", "/auth")
    assert has_path_prefix("/portal?x=1", "/portal")
    assert not has_path_prefix("/authors", "/auth")
    assert domain_for_api_path("/portal/grades") is AuthDomain.SCHOOL
    assert domain_for_api_path("/auth/login") is AuthDomain.SCHOOL
    assert domain_for_api_path("/provider/tenants") is AuthDomain.PROVIDER
    assert domain_for_api_path("/users") is AuthDomain.PROVIDER
    assert domain_for_api_path("/portalx/grades") is AuthDomain.PROVIDER


async def test_anonymous_is_sent_to_each_domain_login():
    ctx = await _sessions()
    assert resolve_route("/", ctx) == "/login"
    assert resolve_route("/portal/students", ctx) == "/portal/login"
    assert resolve_route("/login", ctx) is None
    assert resolve_route("/portal/login", ctx) is None


async def test_provider_session_does_not_open_the_portal():
    ctx = await _sessions(provider_token="p-token")
    assert resolve_route("/tenants", ctx) is None
    assert resolve_route("/login", ctx) == "/"
    assert resolve_route("/portal", ctx) == "/portal/login"
    assert resolve_route("/portal/login", ctx) is None


async def test_school_session_does_not_open_the_console():
    ctx = await _sessions(school_token="s-token")
    assert resolve_route("/portal/grades", ctx) is None
    assert resolve_route("/portal/login", ctx) == "/portal"
    assert resolve_route("/", ctx) == "/login"


async def test_each_guard_reads_only_its_own_session():
    ctx = await _sessions(provider_token="p", school_token="s")
    guards = guards_for(ctx)
    await ctx.school.logout()
    assert guards[AuthDomain.PROVIDER].protect() is None
    assert guards[AuthDomain.SCHOOL].protect() == "/portal/login"
