"""Exception hierarchy for authgate."""

from __future__ import annotations

from typing import Any

from authgate.constants import ERROR_CODES


class AuthGatewayError(Exception):
    """Base class for gateway errors.

    Carries the same ``code`` / ``message`` / ``details`` attributes as
    apcore errors so callers can map both uniformly.
    """

    code = "AUTH_GATEWAY_ERROR"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AuthenticatorUnavailableError(AuthGatewayError):
    """No backend authenticator is currently bound.

    Recoverable: deny the login now, a later attempt may succeed once a
    backend is bound again.
    """

    code = ERROR_CODES["AUTHENTICATOR_UNAVAILABLE"]

    def __init__(self, message: str = "Authenticator is not available", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class BackendError(AuthGatewayError):
    """Raised by a backend to report a failure that is not a rejection."""

    code = ERROR_CODES["BACKEND_ERROR"]
