from enum import Enum


class Lifetime(str, Enum):
    """Activation scope a service is registered with.

    Attributes:
        SINGLETON: One instance shared across the entire process.
        SCOPED: One instance per logical unit of work (e.g., per HTTP request).
        TRANSIENT: New instance created on each request.
    """

    SINGLETON = "singleton"
    SCOPED = "scoped"
    TRANSIENT = "transient"

    def __str__(self) -> str:
        return self.value


class ResolutionOutcome(str, Enum):
    """Tag of a resolution pass result.

    Attributes:
        SUCCESS: Every candidate was ordered.
        CONFIGURATION_ERROR: No source scope could be resolved.
        DISCOVERY_ERROR: A discovered class could not be introspected.
        UNRESOLVED_DEPENDENCY: A requirement is neither in-batch, exempt nor external.
        CIRCULAR_DEPENDENCY: The candidates cannot be ordered because of a cycle.
    """

    SUCCESS = "success"
    CONFIGURATION_ERROR = "configuration_error"
    DISCOVERY_ERROR = "discovery_error"
    UNRESOLVED_DEPENDENCY = "unresolved_dependency"
    CIRCULAR_DEPENDENCY = "circular_dependency"

    def __str__(self) -> str:
        return self.value
