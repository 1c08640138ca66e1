"""JWT-based backend authenticator."""

from __future__ import annotations

import logging
from typing import Any

import jwt as pyjwt

from authgate.backend.protocol import AuthResult, BackendAuthenticator

logger = logging.getLogger(__name__)


class TokenVerifier:
    """Accepts a login when the secret is a valid JWT issued for the username.

    Args:
        key: Secret key or public key for verification.
        algorithms: Allowed JWT algorithms.
        audience: Expected ``aud`` claim (optional).
        issuer: Expected ``iss`` claim (optional).
        username_claim: Claim that must equal the login username.
        require_claims: Claims that must be present in the token.
        local: Report ``ACCEPT_LOCAL`` instead of ``ACCEPT`` on success.
    """

    def __init__(
        self,
        key: str,
        *,
        algorithms: list[str] | None = None,
        audience: str | None = None,
        issuer: str | None = None,
        username_claim: str = "sub",
        require_claims: list[str] | None = None,
        local: bool = False,
    ) -> None:
        self._key = key
        self._algorithms = algorithms or ["HS256"]
        self._audience = audience
        self._issuer = issuer
        self._username_claim = username_claim
        self._require_claims: list[str] = require_claims if require_claims is not None else []
        self._accept = AuthResult.ACCEPT_LOCAL if local else AuthResult.ACCEPT

    def verify(self, username: str, secret: str) -> AuthResult:
        """Decode ``secret`` as a JWT and match its username claim."""
        token = secret.strip()
        if not token:
            return AuthResult.REJECT

        try:
            payload = self._decode_token(token)
        except pyjwt.ExpiredSignatureError:
            logger.debug("Token for user '%s' has expired", username)
            return AuthResult.TIMEOUT
        except pyjwt.InvalidTokenError:
            logger.debug("JWT validation failed for user '%s'", username, exc_info=True)
            return AuthResult.REJECT

        subject = payload.get(self._username_claim)
        if subject is None:
            return AuthResult.USER_UNKNOWN
        if str(subject) != username:
            return AuthResult.REJECT
        return self._accept

    def _decode_token(self, token: str) -> dict[str, Any]:
        options: dict[str, Any] = {}
        if self._require_claims:
            options["require"] = self._require_claims

        kwargs: dict[str, Any] = {
            "jwt": token,
            "key": self._key,
            "algorithms": self._algorithms,
            "options": options,
        }
        if self._audience is not None:
            kwargs["audience"] = self._audience
        if self._issuer is not None:
            kwargs["issuer"] = self._issuer

        return pyjwt.decode(**kwargs)


# Verify protocol compliance at import time
assert isinstance(TokenVerifier.__new__(TokenVerifier), BackendAuthenticator)
