"""
Shared error handling for the reservation platform core.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field
from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    correlation_id: Optional[str] = None
    status: int = 400
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class CoreException(Exception):
    """Base exception for platform core components."""

    status = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, correlation_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            correlation_id=correlation_id,
            status=self.status,
            code=self.code,
            message=self.message,
            details=self.details
        )


class StoreUnavailable(CoreException):
    """The distributed cache backend could not be reached or timed out."""

    status = 503

    def __init__(self, message: str = "Cache store unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_UNAVAILABLE", message, details)


class SerializationError(CoreException):
    """A value could not be encoded, or a payload decoded as the requested type."""

    status = 500

    def __init__(self, message: str = "Serialization failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("SERIALIZATION_ERROR", message, details)


class InvalidArgument(CoreException):
    """A required argument was missing, empty or malformed."""

    def __init__(self, argument: str, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.argument = argument
        super().__init__(
            "INVALID_ARGUMENT",
            message or f"{argument} cannot be null or empty",
            {"argument": argument, **(details or {})}
        )
