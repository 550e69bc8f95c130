"""
Shared infrastructure core for the reservation platform.

This package aggregates the building blocks consumed by every service
(auth, organization, payment, notification, reservation, ...):

- cache: Typed cache-aside service over Redis with graceful degradation
- codec: Text passthrough and JSON codecs used by the cache
- correlation: Request-scoped correlation id holder
- middleware: Request logging and correlation id extraction for FastAPI
- pagination: Pagination defaults passed to query builders
- config: Core configuration via pydantic-settings
- logging: Structured logging with correlation and trace ids
- metrics: Prometheus cache metrics
- errors: Canonical error types and responses

Domain services depend on this package; nothing here imports from them.
"""

__version__ = "1.0.0"
