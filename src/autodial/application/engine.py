"""Application layer - Resolution pass orchestration."""

import logging
from typing import Any, Iterable, List, Optional, Set

from autodial.application.classifier import CandidateClassifier
from autodial.application.exemption_policy import ExemptionPolicy
from autodial.application.graph_builder import DependencyGraphBuilder
from autodial.application.topological_orderer import TopologicalOrderer
from autodial.domain import (
    AutoDialOptions,
    CircularDependencyError,
    ConfigurationError,
    DiscoveryError,
    IExemptionPolicy,
    ResolutionResult,
    ServiceCandidate,
    Unit,
    UnresolvedDependencyError,
)

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """Runs one resolution pass: classify, build the graph, order.

    Each pass owns its graph and in-degree table; the engine keeps no state
    between passes and can be reused.

    Attributes:
        _classifier: Turns units into candidates.
        _orderer: Sorts candidates and diagnoses cycles.
    """

    def __init__(
        self,
        classifier: Optional[CandidateClassifier] = None,
        orderer: Optional[TopologicalOrderer] = None,
    ) -> None:
        self._classifier = classifier if classifier is not None else CandidateClassifier()
        self._orderer = orderer if orderer is not None else TopologicalOrderer()

    def resolve(
        self,
        units: Iterable[Unit],
        options: AutoDialOptions,
        known_external: Optional[Set[Any]] = None,
        exemption_policy: Optional[IExemptionPolicy] = None,
    ) -> List[ServiceCandidate]:
        """Order the candidates found among units.

        Args:
            units: Discovered units.
            options: Filters, exclusions, exemptions and convention of the pass.
            known_external: Capabilities registered before the pass began.
            exemption_policy: Overrides the policy built from options.exemptions.

        Returns:
            Candidates in registration order.

        Raises:
            UnresolvedDependencyError: If a requirement has no provider.
            CircularDependencyError: If no order exists.
        """
        external = known_external if known_external is not None else set()
        policy = exemption_policy if exemption_policy is not None else ExemptionPolicy(options.exemptions)

        candidates = self._classifier.classify(
            units,
            namespace_filters=options.namespace_filters,
            excluded_capabilities=options.excluded_capabilities,
            convention=options.convention,
        )
        graph = DependencyGraphBuilder(policy).build(candidates, external)
        return self._orderer.order(candidates, graph)

    def run(
        self,
        units: Iterable[Unit],
        options: AutoDialOptions,
        known_external: Optional[Set[Any]] = None,
        exemption_policy: Optional[IExemptionPolicy] = None,
    ) -> ResolutionResult:
        """Same as resolve, but reports failures as a tagged result instead of raising.

        Example:
            >>> result = ResolutionEngine().run(units, AutoDialOptions(namespace_filters=["app"]))
            >>> if not result.is_success:
            ...     print(result.outcome, result.error)
        """
        try:
            ordered = self.resolve(units, options, known_external, exemption_policy)
        except (ConfigurationError, DiscoveryError, UnresolvedDependencyError, CircularDependencyError) as e:
            logger.debug("Resolution pass failed: %s", e)
            return ResolutionResult.failure(e)
        return ResolutionResult.success(ordered)
