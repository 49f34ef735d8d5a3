from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

from autodial.domain.enums import Lifetime, ResolutionOutcome
from autodial.domain.exceptions import (
    AutoDialError,
    CircularDependencyError,
    ConfigurationError,
    DiscoveryError,
    UnresolvedDependencyError,
)


class Unit(BaseModel):
    """Value object describing one discovered implementation class.

    Produced by a discovery collaborator and immutable for one resolution pass.

    Attributes:
        implementation: The concrete class.
        module: Module path the class is defined in.
        capabilities: Base classes the implementation can be exposed as, in declaration order.
        requirements: Capabilities required by the constructor, in parameter order.
        lifetime: Lifetime declared with an explicit marker, if any.
        excluded: Whether the class carries the exclusion marker.
        is_concrete: Whether the class can be instantiated.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    implementation: Type = Field(..., description="The concrete implementation class.")
    module: str = Field(..., description="Module path of the implementation.")
    capabilities: Tuple[Type, ...] = Field(default=(), description="Declared capabilities, in declaration order.")
    requirements: Tuple[Any, ...] = Field(default=(), description="Constructor requirements, in parameter order.")
    lifetime: Optional[Lifetime] = Field(default=None, description="Explicit lifetime marker.")
    excluded: bool = Field(default=False, description="Whether the exclusion marker is present.")
    is_concrete: bool = Field(default=True, description="Whether the class is instantiable.")

    @property
    def name(self) -> str:
        return self.implementation.__name__


class ServiceCandidate(BaseModel):
    """Value object representing an implementation selected for registration.

    Attributes:
        implementation: The concrete class to register.
        exposed_capability: The capability it is registered under. Equals
            implementation when the candidate registers itself.
        lifetime: How long the registered instance lives.
        requirements: Constructor requirements carried over from the unit.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    implementation: Type = Field(..., description="The concrete implementation class.")
    exposed_capability: Type = Field(..., description="Capability the implementation is registered under.")
    lifetime: Lifetime = Field(..., description="The lifetime of the registration.")
    requirements: Tuple[Any, ...] = Field(default=(), description="Constructor requirements, in parameter order.")

    @property
    def is_self_registered(self) -> bool:
        return self.exposed_capability is self.implementation


class DependencyGraph(BaseModel):
    """Directed graph of in-batch dependencies between candidates.

    Edges point from a provider to its dependents: the provider has to be
    registered first. Nodes keep the insertion order of the candidates.

    Attributes:
        edges: Adjacency list mapping a provider to the candidates depending on it.
        in_degree: Number of in-batch requirements still unresolved per candidate.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    edges: Dict[Type, List[Type]] = Field(default_factory=dict, description="Provider to dependents adjacency.")
    in_degree: Dict[Type, int] = Field(default_factory=dict, description="Unresolved in-batch requirements per node.")

    def add_node(self, node: Type) -> None:
        """Add a node with no dependencies, if not present yet."""
        self.in_degree.setdefault(node, 0)

    def add_edge(self, provider: Type, dependent: Type) -> None:
        """Record that dependent requires provider.

        Args:
            provider: The implementation satisfying the requirement.
            dependent: The implementation declaring the requirement.
        """
        self.add_node(provider)
        self.add_node(dependent)
        self.edges.setdefault(provider, []).append(dependent)
        self.in_degree[dependent] += 1

    def dependents_of(self, node: Type) -> List[Type]:
        return self.edges.get(node, [])

    @property
    def nodes(self) -> List[Type]:
        return list(self.in_degree)

    @property
    def edge_count(self) -> int:
        return sum(len(dependents) for dependents in self.edges.values())


class ExemptionRules(BaseModel):
    """User-declared rules for requirements that may stay unresolved.

    Attributes:
        types: Exact capabilities to ignore.
        namespaces: Namespace prefixes whose capabilities are ignored.
        predicates: Arbitrary checks over a capability.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    types: Set[Any] = Field(default_factory=set, description="Exact capabilities to ignore.")
    namespaces: List[str] = Field(default_factory=list, description="Ignored namespace prefixes.")
    predicates: List[Callable[[Any], bool]] = Field(default_factory=list, description="Ignore predicates.")


class ConventionRule(BaseModel):
    """Registers unmarked classes that match a predicate.

    Attributes:
        predicate: Check applied to each implementation class.
        lifetime: Lifetime used for matching classes.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    predicate: Callable[[Type], bool] = Field(..., description="Selects implementations by convention.")
    lifetime: Lifetime = Field(default=Lifetime.SCOPED, description="Default lifetime for matches.")

    def matches(self, cls: Type) -> bool:
        return bool(self.predicate(cls))


class AutoDialOptions(BaseModel):
    """Configuration of one auto-registration pass.

    Attributes:
        source: Importable package or module to scan.
        namespace_filters: Module prefixes candidates and capabilities must start with.
        excluded_capabilities: Capabilities never used as the exposed capability.
        exemptions: User exemption rules for unresolved requirements.
        convention: Optional rule registering unmarked classes.
        skip_registered_capabilities: Whether candidates whose capability is already
            registered are left out of the commit.
        on_error: Callback observing a failure before it propagates.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source: Optional[str] = Field(default=None, description="Package or module to scan.")
    namespace_filters: List[str] = Field(default_factory=list, description="Accepted module prefixes.")
    excluded_capabilities: Set[Any] = Field(default_factory=set, description="Capabilities never exposed.")
    exemptions: ExemptionRules = Field(default_factory=ExemptionRules, description="User exemption rules.")
    convention: Optional[ConventionRule] = Field(default=None, description="Registration convention.")
    skip_registered_capabilities: bool = Field(
        default=True,
        description="Leave out candidates whose capability is already registered.",
    )
    on_error: Optional[Callable[[Exception], None]] = Field(default=None, description="Failure callback.")


_OUTCOMES = (
    (ConfigurationError, ResolutionOutcome.CONFIGURATION_ERROR),
    (DiscoveryError, ResolutionOutcome.DISCOVERY_ERROR),
    (UnresolvedDependencyError, ResolutionOutcome.UNRESOLVED_DEPENDENCY),
    (CircularDependencyError, ResolutionOutcome.CIRCULAR_DEPENDENCY),
)


class ResolutionResult(BaseModel):
    """Tagged result of a resolution pass.

    Attributes:
        outcome: Whether the pass succeeded and, if not, which kind of failure occurred.
        ordered: Candidates in registration order. Empty on failure.
        error: The diagnostic on failure.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    outcome: ResolutionOutcome = Field(..., description="Result tag.")
    ordered: List[ServiceCandidate] = Field(default_factory=list, description="Candidates in registration order.")
    error: Optional[AutoDialError] = Field(default=None, description="Diagnostic on failure.")

    @classmethod
    def success(cls, ordered: List[ServiceCandidate]) -> "ResolutionResult":
        return cls(outcome=ResolutionOutcome.SUCCESS, ordered=ordered)

    @classmethod
    def failure(cls, error: AutoDialError) -> "ResolutionResult":
        """Build a failed result tagged after the error type.

        Raises:
            TypeError: If error is not one of the pass-level diagnostics.
        """
        for error_type, outcome in _OUTCOMES:
            if isinstance(error, error_type):
                return cls(outcome=outcome, error=error)
        raise TypeError(f"Unsupported resolution error: {type(error).__name__}")

    @property
    def is_success(self) -> bool:
        return self.outcome == ResolutionOutcome.SUCCESS

    def unwrap(self) -> List[ServiceCandidate]:
        """Return the ordered candidates or raise the carried error."""
        if self.error is not None:
            raise self.error
        return list(self.ordered)
