"""
Unit tests for core error types.
"""

import pytest
from opentelemetry.sdk.trace import TracerProvider

from core.errors import (
    CoreException,
    ErrorResponse,
    InvalidArgument,
    SerializationError,
    StoreUnavailable,
)


class TestCoreErrors:
    """Test cases for the error taxonomy."""

    @pytest.mark.parametrize("error, code, status", [
        (StoreUnavailable(), "STORE_UNAVAILABLE", 503),
        (SerializationError(), "SERIALIZATION_ERROR", 500),
        (InvalidArgument("key"), "INVALID_ARGUMENT", 400),
    ])
    def test_codes_and_statuses(self, error, code, status):
        assert isinstance(error, CoreException)
        assert error.code == code
        assert error.status == status

    def test_invalid_argument_message(self):
        error = InvalidArgument("key")

        assert error.message == "key cannot be null or empty"
        assert error.details == {"argument": "key"}

    def test_to_response_without_span(self):
        """Outside a span the response carries no trace id."""
        response = SerializationError("Cannot decode payload", {"type": "Status"}).to_response("abc-123")

        assert isinstance(response, ErrorResponse)
        assert response.trace_id is None
        assert response.correlation_id == "abc-123"
        assert response.code == "SERIALIZATION_ERROR"
        assert response.details == {"type": "Status"}

    def test_to_response_inside_span(self):
        """Inside a recording span the response carries its trace id."""
        tracer = TracerProvider().get_tracer(__name__)

        with tracer.start_as_current_span("cache-call") as span:
            response = StoreUnavailable().to_response()
            expected = f"{span.get_span_context().trace_id:032x}"

        assert response.trace_id == expected
