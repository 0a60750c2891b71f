"""Error Hierarchy tests — status codes, categories and the JSON envelope.

Tests:
    - MalformedRequestError is a 400 validation error carrying the field
    - StoreUnavailableError is a 503 database error carrying the operation
    - TemplateError is a 500 template error carrying the template name
    - to_response() has the same shape for every error
"""

from minipost.core.errors import (
    ErrorCategory, ErrorSeverity, MalformedRequestError, PostServerError,
    StoreUnavailableError, TemplateError,
)


def test_malformed_request_is_client_error():
    err = MalformedRequestError("bad id", "id")
    assert isinstance(err, PostServerError)
    assert err.http_status == 400
    assert err.code == "MALFORMED_REQUEST"
    assert err.category is ErrorCategory.VALIDATION
    assert err.context.field == "id"


def test_store_unavailable_is_server_error():
    err = StoreUnavailableError("connection refused", "create")
    assert 500 <= err.http_status < 600
    assert err.code == "STORE_UNAVAILABLE"
    assert err.severity is ErrorSeverity.CRITICAL
    assert err.message == "Post store create failed: connection refused"


def test_template_error_is_server_error():
    err = TemplateError("Unknown template 'x'", "x")
    assert err.http_status == 500
    assert err.category is ErrorCategory.TEMPLATE
    assert err.template == "x"


def test_to_response_envelope_shape():
    payload = MalformedRequestError("Missing field", "title").to_response()
    error = payload["error"]
    assert error["code"] == "MALFORMED_REQUEST"
    assert error["message"] == "Missing field"
    assert error["category"] == "validation"
    assert error["severity"] == "warning"
    assert error["context"] == {"field": "title", "operation": None, "template": None}
    assert "timestamp" in error
