"""
Testing utilities module.

Provides helpers for testing applications that use autodial.
"""

from .utilities import InMemoryDiscovery, RecordingRegistry, make_unit

__all__ = [
    "make_unit",
    "InMemoryDiscovery",
    "RecordingRegistry",
]
