from educloud.shared.exceptions import (
    ConflictError,
    NotFoundError,
    RequestError,
    UnauthorizedError,
    ValidationError,
    error_for_status,
)


def test_body_message_wins_over_fallback():
    err = error_for_status(400, {"message": "Slug already taken"}, fallback="Failed to create tenant")
    assert type(err) is RequestError
    assert err.message == "Slug already taken"
    assert err.status_code == 400


def test_fallback_used_when_body_has_no_message():
    err = error_for_status(500, None, fallback="Failed to fetch grades")
    assert err.message == "Failed to fetch grades"
    assert err.code == "internal_error"


def test_status_specific_classes():
    assert isinstance(error_for_status(401), UnauthorizedError)
    assert isinstance(error_for_status(404, {"error": "gone"}), NotFoundError)
    assert isinstance(error_for_status(409), ConflictError)
    assert error_for_status(404, {"error": "gone"}).message == "gone"


def test_validation_error_default_message():
    err = ValidationError(code="no_grades_entered")
    assert err.message == "Please enter at least one grade"
    assert err.status_code is None
