"""Transport adapters that call into the gateway."""

from authgate.transport.middleware import GatewayAuthMiddleware, auth_identity_var, extract_headers

__all__ = [
    "GatewayAuthMiddleware",
    "auth_identity_var",
    "extract_headers",
]
