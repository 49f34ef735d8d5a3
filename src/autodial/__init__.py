"""
autodial: Convention-based service auto-registration with dependency ordering.

Public API exports for the autodial package.
"""

# Application exports
from autodial.application import AutoDialRegistrationBuilder, ResolutionEngine

# Domain exports
from autodial.domain.enums import Lifetime, ResolutionOutcome
from autodial.domain.exceptions import (
    AutoDialError,
    CircularDependencyError,
    ConfigurationError,
    DiscoveryError,
    LifetimeError,
    UnresolvedDependencyError,
)
from autodial.domain.markers import exclude_from_di, service_lifetime
from autodial.domain.models import ResolutionResult, ServiceCandidate

# Infrastructure exports
from autodial.extensions import add_autodial, prime_services_for_auto_registration
from autodial.infrastructure.discovery import ModuleScanner
from autodial.infrastructure.registry import ServiceCollection, ServiceDescriptor

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "add_autodial",
    "prime_services_for_auto_registration",
    "AutoDialRegistrationBuilder",
    "ResolutionEngine",
    "ModuleScanner",
    "ServiceCollection",
    "ServiceDescriptor",
    # Markers
    "service_lifetime",
    "exclude_from_di",
    # Enums
    "Lifetime",
    "ResolutionOutcome",
    # Results
    "ResolutionResult",
    "ServiceCandidate",
    # Exceptions
    "AutoDialError",
    "ConfigurationError",
    "DiscoveryError",
    "UnresolvedDependencyError",
    "CircularDependencyError",
    "LifetimeError",
]
