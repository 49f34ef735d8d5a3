from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Set, Type

from autodial.domain.enums import Lifetime
from autodial.domain.models import Unit


class IDiscovery(ABC):
    """Abstract interface for enumerating implementation units."""

    @abstractmethod
    def discover(self, source: str, namespace_filters: Iterable[str]) -> List[Unit]:
        """Return the units found in a source package.

        Must be deterministic for a fixed input.

        Args:
            source: Importable package or module name.
            namespace_filters: Module prefixes to keep. Empty keeps everything.

        Raises:
            ConfigurationError: If the source cannot be imported.
            DiscoveryError: If a class cannot be described as a unit.
        """


class IServiceRegistry(ABC):
    """Abstract interface for the runtime registry auto-registration writes into."""

    @abstractmethod
    def registered_capabilities(self) -> Set[Any]:
        """Return the capabilities registered so far."""

    @abstractmethod
    def register(self, capability: Any, implementation: Type, lifetime: Lifetime) -> None:
        """Record one registration.

        Args:
            capability: The capability the implementation is resolved under.
            implementation: The concrete class.
            lifetime: How long instances live.
        """


class IExemptionPolicy(ABC):
    """Abstract interface deciding whether a requirement may stay unresolved."""

    @abstractmethod
    def is_exempt(self, capability: Any, known_external: Set[Any]) -> bool:
        """Return True if the capability is satisfied outside the batch.

        Args:
            capability: The required capability.
            known_external: Capabilities already registered before the pass began.
        """
