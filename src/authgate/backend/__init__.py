"""Backend authenticator contract and reference implementations."""

from authgate.backend.jwt import TokenVerifier
from authgate.backend.protocol import AuthResult, BackendAuthenticator

__all__ = [
    "AuthResult",
    "BackendAuthenticator",
    "TokenVerifier",
]
