"""
Discovery module.

Finds implementation classes in Python packages and describes them as units.
"""

from .cache import DiscoveryCache
from .introspection import constructor_requirements, declared_capabilities, describe_class, is_instantiable
from .scanner import ModuleScanner

__all__ = [
    "ModuleScanner",
    "DiscoveryCache",
    "describe_class",
    "declared_capabilities",
    "constructor_requirements",
    "is_instantiable",
]
