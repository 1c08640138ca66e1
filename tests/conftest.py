"""Shared test fixtures for authgate tests."""

from __future__ import annotations

import threading
from typing import Any

import pytest

from authgate.backend.protocol import AuthResult
from authgate.gateway import AuthGateway

PEM = "PEM-DATA"

# ---------------------------------------------------------------------------
# Stub backends and registry
# ---------------------------------------------------------------------------


class RecordingBackend:
    """Backend stub that returns a fixed result and records every call."""

    def __init__(self, result: Any = AuthResult.ACCEPT, name: str = "backend") -> None:
        self.result = result
        self.name = name
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def verify(self, username: str, secret: str) -> Any:
        with self._lock:
            self.calls.append((username, secret))
        return self.result

    def __repr__(self) -> str:
        return f"RecordingBackend({self.name})"


class RaisingBackend:
    """Backend stub whose verify() raises the given exception."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    def verify(self, username: str, secret: str) -> AuthResult:
        raise self.error


class StubRegistry:
    """Stub for apcore Registry with event callback support."""

    def __init__(self) -> None:
        self._callbacks: dict[str, list[Any]] = {}
        self._modules: dict[str, Any] = {}

    def on(self, event: str, callback: Any) -> None:
        self._callbacks.setdefault(event, []).append(callback)

    def get(self, module_id: str) -> Any:
        return self._modules.get(module_id)

    def register(self, module_id: str, module: Any) -> None:
        self._modules[module_id] = module
        self.trigger("register", module_id, module)

    def unregister(self, module_id: str) -> None:
        module = self._modules.pop(module_id, None)
        self.trigger("unregister", module_id, module)

    def trigger(self, event: str, module_id: str, module: Any = None) -> None:
        for cb in self._callbacks.get(event, []):
            cb(module_id, module)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def accepting_backend() -> RecordingBackend:
    return RecordingBackend(AuthResult.ACCEPT, name="accepting")


@pytest.fixture
def rejecting_backend() -> RecordingBackend:
    return RecordingBackend(AuthResult.REJECT, name="rejecting")


@pytest.fixture
def gateway() -> AuthGateway:
    """An unbound gateway with no discovery mechanism."""
    return AuthGateway(PEM)


@pytest.fixture
def registry() -> StubRegistry:
    return StubRegistry()
