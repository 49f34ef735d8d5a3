"""Application layer - Cycle path reconstruction."""

from typing import Iterator, List, Optional, Sequence, Set, Tuple, Type

from autodial.domain import DependencyGraph


class CycleDiagnoser:
    """Reconstructs a readable cycle from the nodes left over by a failed sort.

    Walks the residual graph depth-first while tracking the current path and
    the set of nodes on it. The first edge reaching a node already on the path
    closes a cycle: the path suffix starting at that node, with the node
    appended once more.
    """

    def find_cycle(self, graph: DependencyGraph, residual: Sequence[Type]) -> Optional[List[Type]]:
        """Return a closed cycle path through the residual nodes.

        Args:
            graph: The dependency graph the sort failed on.
            residual: Nodes whose in-degree never reached zero, in candidate order.

        Returns:
            The cycle, e.g. ``[A, B, A]``, or None if no clean path was found.

        Example:
            >>> diagnoser = CycleDiagnoser()
            >>> diagnoser.find_cycle(graph, [ServiceA, ServiceB])
            [ServiceA, ServiceB, ServiceA]
        """
        remaining = set(residual)
        visited: Set[Type] = set()

        for start in residual:
            if start in visited:
                continue
            cycle = self._walk(graph, start, remaining, visited)
            if cycle is not None:
                return cycle

        return None

    @staticmethod
    def _walk(graph: DependencyGraph, start: Type, remaining: Set[Type], visited: Set[Type]) -> Optional[List[Type]]:
        path: List[Type] = [start]
        on_path: Set[Type] = {start}
        stack: List[Tuple[Type, Iterator[Type]]] = [(start, iter(graph.dependents_of(start)))]
        visited.add(start)

        while stack:
            node, neighbors = stack[-1]
            advanced = False

            for neighbor in neighbors:
                if neighbor not in remaining:
                    continue
                if neighbor in on_path:
                    # Build cycle path from first occurrence to current
                    cycle_start_index = path.index(neighbor)
                    return path[cycle_start_index:] + [neighbor]
                if neighbor in visited:
                    continue

                visited.add(neighbor)
                path.append(neighbor)
                on_path.add(neighbor)
                stack.append((neighbor, iter(graph.dependents_of(neighbor))))
                advanced = True
                break

            if not advanced:
                stack.pop()
                on_path.discard(node)
                path.pop()

        return None
