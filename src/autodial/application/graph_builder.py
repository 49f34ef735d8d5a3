"""Application layer - Dependency graph construction."""

import logging
from typing import Any, Dict, Iterable, Optional, Sequence, Set, Type

from autodial.domain import (
    DependencyGraph,
    IExemptionPolicy,
    ServiceCandidate,
    UnresolvedDependencyError,
    display_name,
)

logger = logging.getLogger(__name__)


class DependencyGraphBuilder:
    """Links each candidate to the candidates providing its requirements.

    A requirement may name either the exposed capability or the implementation
    class of another candidate. Requirements that match no candidate must be
    exempt, otherwise the build fails on the first one found.

    Attributes:
        _exemption_policy: Decides which unmatched requirements are tolerated.
    """

    def __init__(self, exemption_policy: IExemptionPolicy) -> None:
        self._exemption_policy = exemption_policy

    def build(
        self,
        candidates: Sequence[ServiceCandidate],
        known_external: Optional[Set[Any]] = None,
    ) -> DependencyGraph:
        """Build the provider -> dependent graph for a batch of candidates.

        Args:
            candidates: Classified candidates, in classification order.
            known_external: Capabilities registered before the pass began.

        Returns:
            Graph holding one node per candidate and one edge per in-batch requirement.

        Raises:
            UnresolvedDependencyError: If a requirement is neither in-batch nor exempt.
        """
        external = known_external if known_external is not None else set()
        providers = self._index_providers(candidates)

        graph = DependencyGraph()
        for candidate in candidates:
            graph.add_node(candidate.implementation)

        for candidate in candidates:
            for requirement in candidate.requirements:
                provider = _lookup(providers, requirement)
                if provider is not None:
                    logger.debug(
                        "Edge %s -> %s via %s",
                        display_name(provider),
                        display_name(candidate.implementation),
                        display_name(requirement),
                    )
                    graph.add_edge(provider, candidate.implementation)
                    continue

                if self._exemption_policy.is_exempt(requirement, external):
                    continue

                raise UnresolvedDependencyError(requirement, candidate.implementation)

        logger.debug("Built dependency graph: %d node(s), %d edge(s)", len(graph.in_degree), graph.edge_count)
        return graph

    @staticmethod
    def _index_providers(candidates: Iterable[ServiceCandidate]) -> Dict[Any, Type]:
        """Map exposed capabilities and implementation classes to their provider.

        When several candidates expose the same capability, the first one wins.
        """
        providers: Dict[Any, Type] = {}
        for candidate in candidates:
            providers.setdefault(candidate.exposed_capability, candidate.implementation)
        for candidate in candidates:
            providers.setdefault(candidate.implementation, candidate.implementation)
        return providers


def _lookup(providers: Dict[Any, Type], requirement: Any) -> Optional[Type]:
    try:
        return providers.get(requirement)
    except TypeError:
        return None
