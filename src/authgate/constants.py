"""Shared constants for authgate."""

from __future__ import annotations

# apcore Registry event names
REGISTRY_EVENTS = {
    "REGISTER": "register",
    "UNREGISTER": "unregister",
}

ERROR_CODES = {
    "AUTHENTICATOR_UNAVAILABLE": "AUTHENTICATOR_UNAVAILABLE",
    "BACKEND_ERROR": "BACKEND_ERROR",
}

DEFAULT_BACKEND_ID = "auth.backend"

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
