"""StaticDiscovery: a fixed, manually replaceable backend."""

from __future__ import annotations

import threading
from typing import Any

from authgate.discovery.protocol import BindingListener


class StaticDiscovery:
    """Binds a configured backend and lets callers replace or remove it.

    Suited to static configuration, where a reload calls ``replace`` and
    decommissioning calls ``remove``.
    """

    def __init__(self, backend: Any = None) -> None:
        self._backend = backend
        self._listeners: list[BindingListener] = []
        self._lock = threading.Lock()

    @property
    def backend(self) -> Any:
        return self._backend

    def subscribe(self, listener: BindingListener) -> None:
        with self._lock:
            if any(existing is listener for existing in self._listeners):
                return
            self._listeners.append(listener)
            if self._backend is not None:
                listener.bound(self._backend)

    def replace(self, backend: Any) -> None:
        """Bind ``backend`` in place of the current one."""
        if backend is None:
            raise ValueError("backend must not be None; use remove() to clear it")
        with self._lock:
            previous = self._backend
            self._backend = backend
            for listener in self._listeners:
                if previous is None:
                    listener.bound(backend)
                else:
                    listener.rebound(backend)

    def remove(self) -> None:
        """Remove the backend. No-op when none is configured."""
        with self._lock:
            if self._backend is None:
                return
            self._backend = None
            for listener in self._listeners:
                listener.unbound()
