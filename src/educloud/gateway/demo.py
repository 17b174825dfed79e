"""
Demo login short-circuit.

A provider login with the demo email never reaches the network: the gateway
answers it locally with a fabricated provider-admin session, and answers
`/provider-auth/me` for that session's token the same way.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

DEMO_TOKEN = "demo-mock-token-12345"

DEMO_USER: Dict[str, Any] = {
    "id": "1",
    "name": "Demo Provider Admin",
    "email": "admin@educloud.com",
    "role": "provider_admin",
}

DEMO_LOGIN_PATH = "/provider-auth/login"
DEMO_PROFILE_PATH = "/provider-auth/me"


def demo_response(
    method: str,
    path: str,
    body: Any,
    *,
    provider_token: Optional[str],
    demo_email: str,
) -> Optional[Dict[str, Any]]:
    """Fabricated response body for a demo request, or None for a real request."""
    method = method.upper()
    if method == "POST" and path == DEMO_LOGIN_PATH:
        if isinstance(body, dict) and str(body.get("email", "")).lower() == demo_email.lower():
            # Any password is accepted for the demo account.
            return {"token": DEMO_TOKEN, "user": {**DEMO_USER, "email": demo_email}}
    if method == "GET" and path == DEMO_PROFILE_PATH and provider_token == DEMO_TOKEN:
        return {**DEMO_USER, "email": demo_email}
    return None
