from typing import Any, Dict, Optional

from educloud.shared.error_codes import code_for_status, message_for


# ───────────────────────── Base & Client Exceptions ─────────────────────────
class EduCloudError(Exception):
    """Base class for client-side errors. Stores and the gateway raise these, never raw httpx errors."""
    code: str = "internal_error"
    status_code: Optional[int] = None
    message: str
    details: Optional[Dict[str, Any]]

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.message = message or message_for(self.code)
        self.details = details
        super().__init__(self.message)


class ValidationError(EduCloudError):
    """Detected before any network call; never sent to the server."""
    code = "validation_error"


class AuthenticationError(EduCloudError):
    """A login or profile call was rejected."""
    code = "invalid_credentials"
    status_code = 401


class RequestError(EduCloudError):
    """Any non-2xx response, or a request that never got one."""
    code = "request_failed"


class UnauthorizedError(RequestError):
    code = "unauthorized"
    status_code = 401


class ForbiddenError(RequestError):
    code = "forbidden"
    status_code = 403


class NotFoundError(RequestError):
    code = "not_found"
    status_code = 404


class ConflictError(RequestError):
    code = "conflict"
    status_code = 409


class NetworkError(RequestError):
    """Server unreachable. Surfaced like any other request error."""
    code = "network_error"


class MalformedResponseError(RequestError):
    """A 2xx body that does not have the expected shape."""
    code = "malformed_response"


class StorageError(EduCloudError):
    """The durable session storage could not be written."""
    code = "storage_error"


_BY_STATUS = {
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


# ───────────────────────────── Helpers ──────────────────────────────────────

def error_message_from_body(body: Any) -> Optional[str]:
    """Pull the API's `message` (or `error`) out of a decoded response body."""
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return None


def error_for_status(
    status_code: int,
    body: Any = None,
    *,
    fallback: Optional[str] = None,
) -> RequestError:
    cls = _BY_STATUS.get(status_code, RequestError)
    message = error_message_from_body(body) or fallback or message_for(code_for_status(status_code))
    details = body if isinstance(body, dict) else None
    return cls(
        message,
        code=code_for_status(status_code),
        status_code=status_code,
        details=details,
    )
