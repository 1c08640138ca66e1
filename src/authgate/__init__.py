"""authgate: authentication gatekeeper over a dynamically bound backend authenticator."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from authgate.backend import AuthResult, BackendAuthenticator, TokenVerifier
from authgate.constants import DEFAULT_BACKEND_ID, ERROR_CODES, LOG_LEVELS, REGISTRY_EVENTS
from authgate.discovery import BindingListener, Discovery, RegistryDiscovery, StaticDiscovery
from authgate.errors import AuthenticatorUnavailableError, AuthGatewayError, BackendError
from authgate.gateway import AuthDecision, AuthGateway

__all__ = [
    # Public API
    "create_gateway",
    "AuthGateway",
    "AuthDecision",
    # Backend contract
    "AuthResult",
    "BackendAuthenticator",
    "TokenVerifier",
    # Discovery
    "BindingListener",
    "Discovery",
    "RegistryDiscovery",
    "StaticDiscovery",
    # Errors
    "AuthGatewayError",
    "AuthenticatorUnavailableError",
    "BackendError",
    # Constants
    "DEFAULT_BACKEND_ID",
    "ERROR_CODES",
    "REGISTRY_EVENTS",
]

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def create_gateway(
    *,
    identity_artifact: bytes | str | None = None,
    identity_file: str | Path | None = None,
    registry: Any = None,
    backend_id: str = DEFAULT_BACKEND_ID,
    backend: BackendAuthenticator | None = None,
    log_level: str | None = None,
) -> AuthGateway:
    """Build an AuthGateway from keyword configuration.

    Args:
        identity_artifact: Server identity payload (e.g. PEM text).
        identity_file: Path to a file holding the identity payload.
            Exactly one of ``identity_artifact`` and ``identity_file`` is required.
        registry: apcore Registry to watch for the backend authenticator.
        backend_id: Module id of the backend authenticator in ``registry``.
        backend: A fixed backend authenticator (static configuration).
            Mutually exclusive with ``registry``. With neither, the gateway
            starts unbound and must be driven through ``bound``/``unbound``.
        log_level: Set the log level for the authgate logger (e.g. "DEBUG").
    """
    if (identity_artifact is None) == (identity_file is None):
        raise ValueError("Exactly one of identity_artifact or identity_file is required")
    if registry is not None and backend is not None:
        raise ValueError("registry and backend are mutually exclusive")
    if registry is not None and not backend_id:
        raise ValueError("backend_id must not be empty")
    if log_level is not None:
        if log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {log_level!r}. Valid: {sorted(LOG_LEVELS)}")
        logging.getLogger("authgate").setLevel(getattr(logging, log_level.upper()))

    if identity_file is not None:
        path = Path(identity_file)
        if not path.is_file():
            raise ValueError(f"identity_file does not exist: {path}")
        identity_artifact = path.read_bytes()

    discovery: Discovery | None = None
    if registry is not None:
        discovery = RegistryDiscovery(registry, backend_id)
    elif backend is not None:
        discovery = StaticDiscovery(backend)

    gateway = AuthGateway(identity_artifact, discovery)
    logger.debug(
        "Created auth gateway (discovery=%s, bound=%s)",
        type(discovery).__name__ if discovery is not None else None,
        gateway.is_bound,
    )
    return gateway
