"""
Platform-wide constants: cache TTL presets, service key prefixes and header names.
"""

from enum import Enum, IntEnum


class CacheTTL(IntEnum):
    """Cache time-to-live presets, in minutes."""

    DEFAULT = 1440
    HALF_DAY = 720
    ONE_HOUR = 60


class ServiceName(str, Enum):
    """Platform services; used as cache key prefixes."""

    ANALYTIC = "Analytic"
    API_GATEWAY = "ApiGateway"
    AUTH = "Auth"
    CONFIG = "Config"
    EMAIL = "Email"
    GEOLOCATION = "Geolocation"
    LOG = "Log"
    MEDIA = "Media"
    NOTIFICATION = "Notification"
    ORGANIZATION = "Organization"
    PAYMENT = "Payment"
    RESERVATION = "Reservation"
    RESOURCE = "Resource"
    REVIEW = "Review"
    SMS = "Sms"


USER_AGENT_HEADER = "User-Agent"
FORWARDED_HOST_HEADER = "x-forwarded-host"
CORRELATION_ID_HEADER = "X-Correlation-ID"


def make_cache_key(service: ServiceName, *parts) -> str:
    """Build a domain-prefixed cache key, e.g. ``reservation:status:42``."""
    key_parts = [service.value.lower()] + [str(part) for part in parts]
    return ":".join(key_parts)
