"""Discovery mechanisms that drive gateway bindings."""

from authgate.discovery.protocol import BindingListener, Discovery
from authgate.discovery.registry import RegistryDiscovery
from authgate.discovery.static import StaticDiscovery

__all__ = [
    "BindingListener",
    "Discovery",
    "RegistryDiscovery",
    "StaticDiscovery",
]
