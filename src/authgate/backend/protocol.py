"""Backend authenticator protocol and result codes."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


class AuthResult(str, Enum):
    """Result codes a backend authenticator may report."""

    ACCEPT = "AUTH_ACCEPT"
    ACCEPT_LOCAL = "AUTH_ACCEPT_LOC"
    REJECT = "AUTH_REJECT"
    REJECT_LOCAL = "AUTH_REJECT_LOC"
    NOT_RUN = "AUTH_NOT_RUN"
    TIMEOUT = "AUTH_TIMEOUT"
    USER_UNKNOWN = "AUTH_USER_UNKNOWN"
    ERROR = "AUTH_ERROR"

    @property
    def is_accepted(self) -> bool:
        return self in (AuthResult.ACCEPT, AuthResult.ACCEPT_LOCAL)

    @classmethod
    def coerce(cls, value: object) -> AuthResult | None:
        """Return the member for ``value`` (member or its string code), else None."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@runtime_checkable
class BackendAuthenticator(Protocol):
    """Protocol for backend authenticators.

    Implementations hold the real credential store and policy; the
    gateway only forwards credentials and interprets the result code.
    """

    def verify(self, username: str, secret: str) -> AuthResult:
        """Verify a username/secret pair.

        Args:
            username: Login name, forwarded unmodified (may be empty).
            secret: Password or token, forwarded unmodified (may be empty).

        Returns:
            An ``AuthResult``. Raise ``BackendError`` to report an error
            that must not be mistaken for a rejection.
        """
        ...
