"""Protocols linking discovery mechanisms to the gateway."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class BindingListener(Protocol):
    """Receives backend lifecycle notifications.

    Discovery mechanisms call these exactly once per event, in the order
    the events occurred.
    """

    def bound(self, backend: Any) -> None: ...

    def rebound(self, backend: Any) -> None: ...

    def unbound(self) -> None: ...


@runtime_checkable
class Discovery(Protocol):
    """A source of backend lifecycle events."""

    def subscribe(self, listener: BindingListener) -> None:
        """Deliver future lifecycle events to ``listener``."""
        ...
