"""
Infrastructure layer - External integrations.

This layer contains package discovery, the default registry and testing helpers.
It depends on both Application and Domain layers.
"""

from . import discovery, registry, testing

__all__ = [
    "discovery",
    "registry",
    "testing",
]
