"""ASGI middleware that authenticates HTTP Basic credentials through an AuthGateway."""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
from contextvars import ContextVar
from typing import Any

from apcore import Identity

from authgate.errors import AuthenticatorUnavailableError, BackendError
from authgate.gateway import AuthGateway

logger = logging.getLogger(__name__)

# Bridge between the middleware and downstream handlers
auth_identity_var: ContextVar[Identity | None] = ContextVar("auth_identity", default=None)


def extract_headers(scope: dict[str, Any]) -> dict[str, str]:
    """Extract headers from ASGI scope as a lowercase-key dict."""
    result: dict[str, str] = {}
    for key_bytes, value_bytes in scope.get("headers", []):
        result[key_bytes.decode("latin-1").lower()] = value_bytes.decode("latin-1")
    return result


def parse_basic_credentials(header: str) -> tuple[str, str] | None:
    """Parse an ``Authorization: Basic`` value into (username, secret)."""
    if not header.lower().startswith("basic "):
        return None
    encoded = header[6:].strip()
    if not encoded:
        return None
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, secret = decoded.partition(":")
    if not sep:
        return None
    return username, secret


class GatewayAuthMiddleware:
    """ASGI middleware that authenticates requests and sets ``auth_identity_var``.

    Rejected or missing credentials receive 401. When no backend
    authenticator is bound the response is 503, so clients and logs can
    tell an outage from a bad password. A ``BackendError`` becomes 502.
    The gateway call runs in a worker thread so a slow backend does not
    stall the event loop.

    Args:
        app: The ASGI application to wrap.
        gateway: The ``AuthGateway`` that makes the decision.
        realm: Realm advertised in ``WWW-Authenticate``.
        exempt_paths: Exact paths that bypass authentication.
    """

    def __init__(
        self,
        app: Any,
        gateway: AuthGateway,
        *,
        realm: str = "authgate",
        exempt_paths: set[str] | None = None,
    ) -> None:
        self._app = app
        self._gateway = gateway
        self._realm = realm
        self._exempt_paths = exempt_paths if exempt_paths is not None else {"/health"}

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self._exempt_paths:
            await self._app(scope, receive, send)
            return

        credentials = parse_basic_credentials(extract_headers(scope).get("authorization", ""))
        if credentials is None:
            await self._send_401(send)
            return

        username, secret = credentials
        try:
            # verify() may block; keep it off the event loop.
            accepted = await asyncio.to_thread(self._gateway.authenticate, username, secret)
        except AuthenticatorUnavailableError:
            await self._send_503(send)
            return
        except BackendError as e:
            logger.warning("Backend authenticator error for user '%s': %s", username, e.message)
            await self._send_502(send)
            return

        if not accepted:
            logger.info("Rejected credentials for user '%s'", username)
            await self._send_401(send)
            return

        token = auth_identity_var.set(Identity(id=username, type="user", roles=(), attrs={}))
        try:
            await self._app(scope, receive, send)
        finally:
            auth_identity_var.reset(token)

    async def _send_401(self, send: Any) -> None:
        await _send_json(
            send,
            401,
            {"error": "Unauthorized", "detail": "Missing or invalid credentials"},
            extra_headers=[[b"www-authenticate", f'Basic realm="{self._realm}"'.encode("latin-1")]],
        )

    @staticmethod
    async def _send_503(send: Any) -> None:
        await _send_json(send, 503, {"error": "Service Unavailable", "detail": "Authenticator unavailable"})

    @staticmethod
    async def _send_502(send: Any) -> None:
        await _send_json(send, 502, {"error": "Bad Gateway", "detail": "Authenticator error"})


async def _send_json(
    send: Any,
    status: int,
    payload: dict[str, str],
    extra_headers: list[list[bytes]] | None = None,
) -> None:
    body = json.dumps(payload).encode()
    headers = [
        [b"content-type", b"application/json"],
        [b"content-length", str(len(body)).encode()],
    ]
    headers.extend(extra_headers or [])
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body})
