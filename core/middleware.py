"""
FastAPI middleware that opens a correlation scope and logs every request.
"""

from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from opentelemetry import trace

from .config import CoreConfig
from .constants import CORRELATION_ID_HEADER, FORWARDED_HOST_HEADER, USER_AGENT_HEADER
from .correlation import CorrelationContextAccessor, CorrelationIdContextFactory, new_correlation_id
from .errors import CoreException
from .logging import get_logger


@dataclass
class RequestLoggingOptions:
    """Options for the request logging middleware."""

    header_key: str = CORRELATION_ID_HEADER
    excluded_routes: List[str] = field(default_factory=list)

    @classmethod
    def from_config(cls, config: CoreConfig) -> "RequestLoggingOptions":
        return cls(
            header_key=config.correlation_header,
            excluded_routes=list(config.log_excluded_routes)
        )


def install_request_logging(
    app: FastAPI,
    factory: CorrelationIdContextFactory,
    options: Optional[RequestLoggingOptions] = None,
) -> None:
    """Register the correlation and request logging middleware on ``app``."""
    options = options or RequestLoggingOptions()
    logger = get_logger("core.middleware")

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        if request.url.path in options.excluded_routes:
            return await call_next(request)

        correlation_id = request.headers.get(options.header_key) or new_correlation_id()

        with factory.accessor.scope(None):
            factory.create(correlation_id, options.header_key)

            current_span = trace.get_current_span()
            if current_span.is_recording():
                current_span.set_attribute("correlation_id", correlation_id)

            entry = _request_log_entry(request, correlation_id)
            logger.info("Incoming request", **entry)

            start_time = perf_counter()
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.error(
                    "Request failed",
                    error=str(exc),
                    duration_ms=round((perf_counter() - start_time) * 1000, 2),
                    **entry
                )
                raise

            response.headers[options.header_key] = correlation_id
            _log_completed_request(
                logger,
                entry,
                response.status_code,
                round((perf_counter() - start_time) * 1000, 2)
            )
            return response


def install_error_handlers(app: FastAPI, accessor: CorrelationContextAccessor) -> None:
    """Render ``CoreException`` as an ``ErrorResponse`` tagged with the correlation id."""
    logger = get_logger("core.errors")

    @app.exception_handler(CoreException)
    async def core_exception_handler(request: Request, exc: CoreException):
        logger.error(
            "Core error",
            code=exc.code,
            message=exc.message,
            details=exc.details
        )
        response = exc.to_response(correlation_id=accessor.correlation_id)
        return JSONResponse(status_code=exc.status, content=response.model_dump())


def _request_log_entry(request: Request, correlation_id: str) -> Dict[str, Any]:
    headers = request.headers
    return {
        "correlation_id": correlation_id,
        "method": request.method,
        "path": request.url.path,
        "query": dict(request.query_params),
        "scheme": request.url.scheme,
        "content_type": headers.get("content-type", ""),
        "protocol": f"HTTP/{request.scope.get('http_version', '1.1')}",
        "ip": request.client.host if request.client else "unknown",
        "hostname": _strip_port(headers.get("host")) or "unknown",
        "forwarded_hostname": headers.get(FORWARDED_HOST_HEADER, ""),
        "user_agent": headers.get(USER_AGENT_HEADER, ""),
    }


def _log_completed_request(logger, entry: Dict[str, Any], status_code: int, duration_ms: float) -> None:
    if status_code < 400:
        log = logger.info
    elif status_code == 400:
        log = logger.warning
    else:
        log = logger.error
    log("Completed request", status_code=status_code, duration_ms=duration_ms, **entry)


def _strip_port(host: Optional[str]) -> Optional[str]:
    if not host:
        return None
    return host.split(":")[0]
