"""AuthGateway: authenticate against whichever backend is currently bound."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import TYPE_CHECKING

from authgate.backend.protocol import AuthResult, BackendAuthenticator
from authgate.errors import AuthenticatorUnavailableError, BackendError

if TYPE_CHECKING:
    from authgate.discovery.protocol import Discovery

logger = logging.getLogger(__name__)

IdentityArtifactInput = bytes | bytearray | memoryview | str


class AuthDecision(str, Enum):
    """Outcome of a single authentication attempt."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    UNAVAILABLE = "unavailable"


def _to_artifact(identity_artifact: IdentityArtifactInput | None) -> bytes:
    if identity_artifact is None:
        raise ValueError("identity_artifact must not be None")
    if isinstance(identity_artifact, str):
        return identity_artifact.encode("utf-8")
    if isinstance(identity_artifact, (bytes, bytearray, memoryview)):
        return bytes(identity_artifact)
    raise TypeError(f"identity_artifact must be bytes or str, got {type(identity_artifact).__name__}")


class AuthGateway:
    """Delegates authentication to the currently bound backend authenticator.

    The gateway starts unbound. A discovery mechanism calls ``bound``,
    ``rebound`` and ``unbound`` as backends come and go; while unbound,
    ``authenticate`` raises ``AuthenticatorUnavailableError`` instead of
    returning ``False``.

    Only the read and write of the backend reference are guarded by the
    lock. ``verify`` runs outside it on the captured reference, so a slow
    backend never blocks rebinding or other logins.
    """

    def __init__(
        self,
        identity_artifact: IdentityArtifactInput,
        discovery: Discovery | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            identity_artifact: Server identity payload (e.g. PEM key material).
            discovery: Optional discovery mechanism; the gateway subscribes
                to it for binding notifications. It does not wait for an
                initial binding.
        """
        self._identity_artifact = _to_artifact(identity_artifact)
        self._backend: BackendAuthenticator | None = None
        self._lock = threading.Lock()
        if discovery is not None:
            discovery.subscribe(self)

    @property
    def identity_artifact(self) -> bytes:
        return self._identity_artifact

    def get_identity_artifact(self) -> bytes:
        """Return the identity artifact given at construction."""
        return self._identity_artifact

    @property
    def is_bound(self) -> bool:
        with self._lock:
            return self._backend is not None

    # -- lifecycle notifications ------------------------------------------

    def bound(self, backend: BackendAuthenticator) -> None:
        """Bind ``backend``, replacing any current binding."""
        if backend is None:
            raise ValueError("backend must not be None; use unbound() to clear the binding")
        with self._lock:
            previous = self._backend
            self._backend = backend
        if previous is None:
            logger.debug("Backend authenticator bound: %r", backend)
        else:
            logger.debug("Backend authenticator replaced: %r -> %r", previous, backend)

    def rebound(self, backend: BackendAuthenticator) -> None:
        """Replace the current backend. Same semantics as ``bound``."""
        self.bound(backend)

    def unbound(self) -> None:
        """Clear the binding. Calls already holding the old backend may finish."""
        with self._lock:
            previous = self._backend
            self._backend = None
        if previous is not None:
            logger.warning(
                "Backend authenticator %r removed; logins will be refused until a backend is bound",
                previous,
            )

    # -- authentication ---------------------------------------------------

    def decide(self, username: str, secret: str) -> AuthDecision:
        """Authenticate and return the tri-state decision without raising.

        ``BackendError`` raised by the backend still propagates.
        """
        with self._lock:
            backend = self._backend
        if backend is None:
            logger.warning("Cannot authenticate user '%s', no backend authenticator is bound", username)
            return AuthDecision.UNAVAILABLE

        try:
            raw = backend.verify(username, secret)
        except BackendError:
            raise
        except Exception as e:
            logger.warning("Backend authenticator failed for user '%s': %s", username, e)
            logger.debug("Backend failure details", exc_info=True)
            return AuthDecision.REJECTED

        result = AuthResult.coerce(raw)
        logger.debug("Authentication result for user '%s': %s", username, result or raw)
        if result is not None and result.is_accepted:
            return AuthDecision.ACCEPTED
        return AuthDecision.REJECTED

    def authenticate(self, username: str, secret: str) -> bool:
        """Return True iff the bound backend accepts the credentials.

        Raises:
            AuthenticatorUnavailableError: No backend is bound.
            BackendError: The backend reported an error distinct from rejection.
        """
        decision = self.decide(username, secret)
        if decision is AuthDecision.UNAVAILABLE:
            raise AuthenticatorUnavailableError(
                "Backend authenticator is not available",
                details={"username": username},
            )
        return decision is AuthDecision.ACCEPTED
