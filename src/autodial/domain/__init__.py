"""
Domain layer - Core models of a resolution pass.

This layer contains the value objects, markers and errors of auto-registration.
It has no dependencies on other layers.
"""

from .capabilities import display_name, matches_namespace, namespace_of
from .enums import Lifetime, ResolutionOutcome
from .exceptions import (
    AutoDialError,
    CircularDependencyError,
    ConfigurationError,
    DiscoveryError,
    LifetimeError,
    UnresolvedDependencyError,
)
from .interfaces import IDiscovery, IExemptionPolicy, IServiceRegistry
from .markers import exclude_from_di, get_lifetime_marker, has_exclude_marker, service_lifetime
from .models import (
    AutoDialOptions,
    ConventionRule,
    DependencyGraph,
    ExemptionRules,
    ResolutionResult,
    ServiceCandidate,
    Unit,
)

__all__ = [
    # Enums
    "Lifetime",
    "ResolutionOutcome",
    # Exceptions
    "AutoDialError",
    "ConfigurationError",
    "DiscoveryError",
    "UnresolvedDependencyError",
    "CircularDependencyError",
    "LifetimeError",
    # Interfaces
    "IDiscovery",
    "IServiceRegistry",
    "IExemptionPolicy",
    # Markers
    "service_lifetime",
    "exclude_from_di",
    "get_lifetime_marker",
    "has_exclude_marker",
    # Models
    "Unit",
    "ServiceCandidate",
    "DependencyGraph",
    "ExemptionRules",
    "ConventionRule",
    "AutoDialOptions",
    "ResolutionResult",
    # Capability helpers
    "namespace_of",
    "display_name",
    "matches_namespace",
]
