"""Application layer - Registration ordering."""

import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Sequence, Type

from autodial.application.cycle_diagnoser import CycleDiagnoser
from autodial.domain import CircularDependencyError, DependencyGraph, ServiceCandidate

logger = logging.getLogger(__name__)


class TopologicalOrderer:
    """Computes a registration order with Kahn's algorithm.

    Providers always come before their dependents. Ties are broken by
    candidate order, so the same batch always yields the same order.

    Attributes:
        _cycle_diagnoser: Builds the cycle path reported on failure.
    """

    def __init__(self, cycle_diagnoser: Optional[CycleDiagnoser] = None) -> None:
        self._cycle_diagnoser = cycle_diagnoser if cycle_diagnoser is not None else CycleDiagnoser()

    def order(self, candidates: Sequence[ServiceCandidate], graph: DependencyGraph) -> List[ServiceCandidate]:
        """Sort candidates so every provider precedes its dependents.

        The graph is left untouched; in-degrees are decremented on a copy.

        Args:
            candidates: The classified candidates.
            graph: Their dependency graph.

        Returns:
            The candidates in registration order.

        Raises:
            CircularDependencyError: If the candidates cannot be fully ordered.
        """
        by_implementation: Dict[Type, ServiceCandidate] = {c.implementation: c for c in candidates}
        in_degree: Dict[Type, int] = {c.implementation: graph.in_degree.get(c.implementation, 0) for c in candidates}

        queue: Deque[Type] = deque(node for node, degree in in_degree.items() if degree == 0)
        ordered: List[ServiceCandidate] = []

        while queue:
            current = queue.popleft()
            ordered.append(by_implementation[current])

            for dependent in graph.dependents_of(current):
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)

        if len(ordered) != len(by_implementation):
            residual = [node for node, degree in in_degree.items() if degree > 0]
            cycle = self._cycle_diagnoser.find_cycle(graph, residual)
            raise CircularDependencyError(cycle if cycle is not None else residual, residual)

        logger.debug("Ordered %d candidate(s)", len(ordered))
        return ordered
