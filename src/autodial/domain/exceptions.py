from typing import Any, List, Optional, Sequence

from autodial.domain.capabilities import display_name


class AutoDialError(Exception):
    """Base exception for auto-registration errors."""


class ConfigurationError(AutoDialError):
    """Raised when a resolution pass cannot start.

    This occurs when:
    - No source package was configured.
    - The configured source package cannot be imported.
    """


class DiscoveryError(AutoDialError):
    """Raised when a discovered class cannot be described as a unit.

    Attributes:
        cls: The class that could not be introspected.
        reason: Optional reason for the failure.
    """

    def __init__(self, cls: Any, reason: Optional[str] = None) -> None:
        self.cls = cls
        self.reason = reason
        message = f"Cannot inspect constructor of class: {display_name(cls)}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class UnresolvedDependencyError(AutoDialError):
    """Raised when a required capability has no provider.

    The requirement is neither provided by another candidate of the batch,
    exempt, nor already present in the registry.

    Attributes:
        requirement: The capability that could not be resolved.
        dependent: The implementation whose constructor requires it.
    """

    def __init__(self, requirement: Any, dependent: Any) -> None:
        self.requirement = requirement
        self.dependent = dependent
        message = (
            f"Cannot resolve dependency '{display_name(requirement)}' for the constructor of class "
            f"'{display_name(dependent)}'. Please ensure that the implementation for this service is "
            "decorated with @service_lifetime and is included in the package/namespace scan, or that it "
            "has been registered manually before auto-registration runs."
        )
        super().__init__(message)


class CircularDependencyError(AutoDialError):
    """Raised when no registration order exists.

    Attributes:
        dependency_chain: The reconstructed cycle, closed by repeating its first
            element. Falls back to the unordered residual set when no clean path
            could be extracted.
        residual: Every implementation left with unresolved in-batch dependencies.
    """

    def __init__(self, dependency_chain: Sequence[Any], residual: Optional[Sequence[Any]] = None) -> None:
        self.dependency_chain: List[Any] = list(dependency_chain)
        self.residual: List[Any] = list(residual) if residual is not None else list(dependency_chain)
        message = (
            "A circular dependency was detected. The registration order cannot be determined. "
            f"Dependency chain: {' -> '.join(display_name(cls) for cls in self.dependency_chain)}"
        )
        if any(node not in self.dependency_chain for node in self.residual):
            message += f". Unresolved: {', '.join(display_name(cls) for cls in self.residual)}"
        super().__init__(message)


class LifetimeError(AutoDialError):
    """Raised for invalid lifetime configurations.

    This occurs when:
    - A lifetime marker is given something that is not a Lifetime.
    - A convention rule declares an invalid default lifetime.
    """
