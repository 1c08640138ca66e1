"""RegistryDiscovery: track a backend authenticator module in an apcore Registry."""

from __future__ import annotations

import logging
import threading
from typing import Any

from authgate.constants import REGISTRY_EVENTS
from authgate.discovery.protocol import BindingListener

logger = logging.getLogger(__name__)


class RegistryDiscovery:
    """Forwards Registry register/unregister events for one module id to listeners."""

    def __init__(self, registry: Any, backend_id: str) -> None:
        """Initialize the discovery.

        Args:
            registry: apcore Registry to listen to.
            backend_id: Module id under which the backend authenticator is registered.
        """
        if not backend_id:
            raise ValueError("backend_id must not be empty")
        self._registry = registry
        self._backend_id = backend_id
        self._listeners: list[BindingListener] = []
        self._backend: Any = None
        self._lock = threading.Lock()
        self._active = False
        self._registered = False

    @property
    def backend_id(self) -> str:
        return self._backend_id

    @property
    def active(self) -> bool:
        return self._active

    def subscribe(self, listener: BindingListener) -> None:
        """Add ``listener`` and start listening on the registry.

        If the backend is already registered, ``listener`` is bound to it
        immediately. Subscribing the same listener twice is a no-op.
        """
        with self._lock:
            if any(existing is listener for existing in self._listeners):
                return
            self._activate()
            self._listeners.append(listener)
            if self._backend is not None:
                listener.bound(self._backend)

    def start(self) -> None:
        """Start forwarding Registry events.

        Safe to call multiple times (idempotent). Restarting after ``stop``
        re-reads the backend from the registry and binds listeners to it.
        """
        with self._lock:
            self._activate()

    def stop(self) -> None:
        """Stop forwarding events and unbind listeners from the tracked backend.

        Sets internal flag that causes callbacks to no-op.
        (apcore Registry does not support callback removal)
        """
        with self._lock:
            if not self._active:
                return
            self._active = False
            previous = self._backend
            self._backend = None
            if previous is not None:
                for listener in self._listeners:
                    listener.unbound()

    def _activate(self) -> None:
        # Caller holds self._lock.
        if self._active:
            return
        self._active = True
        if not self._registered:
            self._registry.on(REGISTRY_EVENTS["REGISTER"], self._on_register)
            self._registry.on(REGISTRY_EVENTS["UNREGISTER"], self._on_unregister)
            self._registered = True
        logger.info("Watching registry for backend authenticator '%s'", self._backend_id)
        self._backend = self._lookup(self._backend_id)
        if self._backend is not None:
            for listener in self._listeners:
                listener.bound(self._backend)

    def _lookup(self, module_id: str) -> Any:
        getter = getattr(self._registry, "get", None)
        if getter is None:
            return None
        return getter(module_id)

    def _on_register(self, module_id: str, module: Any = None) -> None:
        """Callback for Registry 'register' event.

        The first registration binds listeners; a registration while a
        backend is already tracked is forwarded as a replacement.
        """
        if not self._active or module_id != self._backend_id:
            return
        if module is None:
            module = self._lookup(module_id)
        if module is None:
            logger.warning("Backend authenticator not found for registered module: %s", module_id)
            return
        with self._lock:
            if not self._active:
                return
            previous = self._backend
            self._backend = module
            for listener in self._listeners:
                if previous is None:
                    listener.bound(module)
                else:
                    listener.rebound(module)

    def _on_unregister(self, module_id: str, module: Any = None) -> None:
        """Callback for Registry 'unregister' event. Unknown modules are ignored."""
        if not self._active or module_id != self._backend_id:
            return
        with self._lock:
            if not self._active or self._backend is None:
                return
            self._backend = None
            for listener in self._listeners:
                listener.unbound()
