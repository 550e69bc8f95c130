"""
Shared logging configuration for the reservation platform core.
"""

import sys
import structlog
import logging
import time
from typing import Any, Dict, Optional, TYPE_CHECKING

from opentelemetry import trace

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .correlation import CorrelationContextAccessor


def configure_logging(
    service_name: str,
    log_level: str = "info",
    accessor: Optional["CorrelationContextAccessor"] = None,
) -> None:
    """Configure structured logging for a service."""

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        ServiceContextProcessor(service_name),
        add_trace_context,
    ]
    if accessor is not None:
        processors.append(CorrelationContextProcessor(accessor))
    processors.extend([
        add_timestamp,
        structlog.processors.JSONRenderer(),
    ])

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


class ServiceContextProcessor:
    """Stamp the owning service on every log event."""

    def __init__(self, service_name: str):
        self.service_name = service_name

    def __call__(self, logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", self.service_name)
        return event_dict


class CorrelationContextProcessor:
    """Add the current request's correlation id to log events."""

    def __init__(self, accessor: "CorrelationContextAccessor"):
        self.accessor = accessor

    def __call__(self, logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        context = self.accessor.context
        if context is not None:
            event_dict["correlation_id"] = context.correlation_id
        return event_dict


def add_trace_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add trace context to log events."""
    current_span = trace.get_current_span()
    if current_span and current_span.is_recording():
        span_context = current_span.get_span_context()
        if span_context.trace_id != 0:
            event_dict["trace_id"] = f"{span_context.trace_id:032x}"
        if span_context.span_id != 0:
            event_dict["span_id"] = f"{span_context.span_id:016x}"

    return event_dict


def add_timestamp(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add high-precision timestamp to log events."""
    event_dict["timestamp"] = time.time()
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
