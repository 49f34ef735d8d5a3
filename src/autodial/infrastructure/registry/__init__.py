"""
Registry module.

Provides the default runtime registry auto-registration writes into.
"""

from .service_collection import ServiceCollection, ServiceDescriptor

__all__ = [
    "ServiceCollection",
    "ServiceDescriptor",
]
