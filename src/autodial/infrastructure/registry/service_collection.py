import inspect
import logging
from typing import Any, Dict, Iterator, List, Set, Type

from pydantic import BaseModel, ConfigDict, Field

from autodial.domain import IServiceRegistry, Lifetime, display_name

logger = logging.getLogger(__name__)


class ServiceDescriptor(BaseModel):
    """Value object representing one registration.

    Attributes:
        capability: The capability the implementation is resolved under.
        implementation: The concrete class.
        lifetime: How long instances live.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    capability: Any = Field(..., description="The capability being registered.")
    implementation: Type = Field(..., description="The concrete implementation class.")
    lifetime: Lifetime = Field(..., description="The lifetime of the registration.")


class ServiceCollection(IServiceRegistry):
    """Ordered list of service registrations.

    Records registrations in the order they are made and allows several
    implementations per capability. It never creates instances; a container
    built from it decides how to honour the lifetimes.

    Attributes:
        _descriptors: Registrations in insertion order.
    """

    def __init__(self) -> None:
        """Initialize an empty collection."""
        self._descriptors: List[ServiceDescriptor] = []

    def register(self, capability: Any, implementation: Type, lifetime: Lifetime) -> None:
        """Record one registration.

        Registering the exact same capability, implementation and lifetime twice is a no-op.

        Args:
            capability: The capability to register under.
            implementation: The concrete class.
            lifetime: How long instances live.

        Raises:
            TypeError: If implementation is not a class.
        """
        if not inspect.isclass(implementation):
            raise TypeError(f"Implementation must be a class, got {implementation!r}")

        descriptor = ServiceDescriptor(capability=capability, implementation=implementation, lifetime=lifetime)
        if descriptor in self._descriptors:
            return  # Skip if already registered

        self._descriptors.append(descriptor)
        logger.debug(
            "Registered %s : %s (%s)",
            display_name(implementation),
            display_name(capability),
            lifetime,
        )

    def register_singletons(self, registrations: Dict[Any, Type]) -> None:
        """Register multiple singleton services at once.

        Args:
            registrations: Dictionary mapping capabilities to implementation classes.

        Example:
            >>> services.register_singletons({
            ...     IClock: SystemClock,
            ...     DatabaseSettings: DatabaseSettings,
            ... })
        """
        for capability, implementation in registrations.items():
            self.register(capability, implementation, Lifetime.SINGLETON)

    def register_scoped(self, registrations: Dict[Any, Type]) -> None:
        """Register multiple scoped services at once.

        Args:
            registrations: Dictionary mapping capabilities to implementation classes.
        """
        for capability, implementation in registrations.items():
            self.register(capability, implementation, Lifetime.SCOPED)

    def register_transients(self, registrations: Dict[Any, Type]) -> None:
        """Register multiple transient services at once.

        Args:
            registrations: Dictionary mapping capabilities to implementation classes.
        """
        for capability, implementation in registrations.items():
            self.register(capability, implementation, Lifetime.TRANSIENT)

    def registered_capabilities(self) -> Set[Any]:
        return {descriptor.capability for descriptor in self._descriptors}

    def get_descriptors(self, capability: Any) -> List[ServiceDescriptor]:
        """Return every registration made for capability, oldest first."""
        return [descriptor for descriptor in self._descriptors if descriptor.capability == capability]

    @property
    def descriptors(self) -> List[ServiceDescriptor]:
        return list(self._descriptors)

    def clear(self) -> None:
        """Remove all registrations."""
        self._descriptors.clear()

    def __contains__(self, capability: Any) -> bool:
        return any(descriptor.capability == capability for descriptor in self._descriptors)

    def __iter__(self) -> Iterator[ServiceDescriptor]:
        return iter(list(self._descriptors))

    def __len__(self) -> int:
        return len(self._descriptors)
