# src/educloud/shared/error_codes.py
# Central mapping of client error codes to HTTP statuses and fallback messages.
# Keep keys stable; UI banners key off these.
ERROR_CODES = {
    # ─── Validation ──────────────────────────────────────────────────────────
    "validation_error": {
        "http": 400,
        "message": "Validation failed for one or more fields."
    },
    "missing_selection": {
        "http": 400,
        "message": "Please select Class, Subject, Grade Type, and Assessment Date"
    },
    "no_grades_entered": {
        "http": 400,
        "message": "Please enter at least one grade"
    },

    # ─── Authentication & Authorization ────────────────────────────────────
    "unauthorized": {
        "http": 401,
        "message": "Unauthorized. Please log in again."
    },
    "invalid_credentials": {
        "http": 401,
        "message": "Invalid email or password."
    },
    "forbidden": {
        "http": 403,
        "message": "You are not allowed to perform this action."
    },

    # ─── Resources ─────────────────────────────────────────────────────────
    "not_found": {
        "http": 404,
        "message": "Resource not found."
    },
    "conflict": {
        "http": 409,
        "message": "Resource already exists."
    },

    # ─── Transport ─────────────────────────────────────────────────────────
    "request_failed": {
        "http": 400,
        "message": "Request failed."
    },
    "network_error": {
        "http": 503,
        "message": "Unable to reach the server."
    },
    "malformed_response": {
        "http": 502,
        "message": "Unexpected response from the server."
    },

    # ─── Local session storage ─────────────────────────────────────────────
    "storage_error": {
        "http": 500,
        "message": "Could not update the saved session."
    },
    "internal_error": {
        "http": 500,
        "message": "Internal server error."
    },
}


def message_for(code: str) -> str:
    return str(ERROR_CODES.get(code, {}).get("message", code))


def code_for_status(status_code: int) -> str:
    if status_code == 401:
        return "unauthorized"
    if status_code == 403:
        return "forbidden"
    if status_code == 404:
        return "not_found"
    if status_code == 409:
        return "conflict"
    if status_code >= 500:
        return "internal_error"
    return "request_failed"


def http_status_for(code: str) -> int:
    return int(ERROR_CODES.get(code, {}).get("http", 400))
