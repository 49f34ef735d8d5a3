"""Entry points wiring the builder to the default scanner and registry."""

from typing import Callable, Optional, TypeVar

from autodial.application import AutoDialRegistrationBuilder
from autodial.domain import IDiscovery, IServiceRegistry
from autodial.infrastructure.discovery import DiscoveryCache, ModuleScanner

R = TypeVar("R", bound=IServiceRegistry)

# Shared by every pass that does not bring its own discovery
_default_cache = DiscoveryCache()


def default_discovery() -> IDiscovery:
    """Return a module scanner backed by the process-wide discovery cache."""
    return ModuleScanner(cache=_default_cache)


def prime_services_for_auto_registration(
    registry: IServiceRegistry,
    discovery: Optional[IDiscovery] = None,
) -> AutoDialRegistrationBuilder:
    """Start configuring auto-registration into registry.

    Example:
        >>> services = ServiceCollection()
        >>> (
        ...     prime_services_for_auto_registration(services)
        ...     .from_package("myapp")
        ...     .in_namespace_starting_with("myapp.services")
        ...     .complete_auto_registration()
        ... )
    """
    return AutoDialRegistrationBuilder(registry, discovery if discovery is not None else default_discovery())


def add_autodial(
    registry: R,
    configure: Callable[[AutoDialRegistrationBuilder], None],
    discovery: Optional[IDiscovery] = None,
) -> R:
    """Configure and run auto-registration in one call.

    Args:
        registry: The registry to register into.
        configure: Receives the builder to set the source package, filters and rules.
        discovery: Overrides the default module scanner.

    Returns:
        The registry, after the ordered candidates have been registered.

    Example:
        >>> services = add_autodial(
        ...     ServiceCollection(),
        ...     lambda options: options.from_package("myapp").in_namespace_starting_with("myapp.services"),
        ... )
    """
    builder = prime_services_for_auto_registration(registry, discovery)
    configure(builder)
    builder.complete_auto_registration()
    return registry
