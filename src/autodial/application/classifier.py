"""Application layer - Classification of discovered units into service candidates."""

import logging
from typing import Any, Iterable, List, Optional, Sequence, Set, Type

from autodial.domain import ConventionRule, Lifetime, ServiceCandidate, Unit, matches_namespace, namespace_of

logger = logging.getLogger(__name__)


class CandidateClassifier:
    """Turns discovered units into service candidates.

    Registration is opt-in: a unit becomes a candidate only when it carries an
    explicit lifetime marker or matches the configured convention rule. All
    filtering is a silent skip; nothing is raised at this stage.
    """

    def classify(
        self,
        units: Iterable[Unit],
        namespace_filters: Sequence[str] = (),
        excluded_capabilities: Optional[Set[Any]] = None,
        convention: Optional[ConventionRule] = None,
    ) -> List[ServiceCandidate]:
        """Classify units, preserving their order.

        Args:
            units: Discovered units.
            namespace_filters: Module prefixes units and capabilities must start with.
                Empty accepts every unit and restricts capabilities to the top-level
                package of each unit.
            excluded_capabilities: Capabilities never used as the exposed capability.
            convention: Optional rule registering unmarked units.

        Returns:
            At most one candidate per unit, in input order.

        Example:
            >>> classifier = CandidateClassifier()
            >>> candidates = classifier.classify(units, namespace_filters=["app.services"])
        """
        excluded = excluded_capabilities or set()
        candidates: List[ServiceCandidate] = []
        seen: Set[Type] = set()

        for unit in units:
            if unit.implementation in seen:
                continue

            candidate = self._classify_unit(unit, namespace_filters, excluded, convention)
            if candidate is None:
                continue

            seen.add(unit.implementation)
            candidates.append(candidate)

        logger.debug("Classified %d service candidate(s)", len(candidates))
        return candidates

    def _classify_unit(
        self,
        unit: Unit,
        namespace_filters: Sequence[str],
        excluded: Set[Any],
        convention: Optional[ConventionRule],
    ) -> Optional[ServiceCandidate]:
        if unit.excluded or not unit.is_concrete:
            logger.debug("Skipping %s: excluded or not instantiable", unit.name)
            return None

        if namespace_filters and not matches_namespace(unit.module, namespace_filters):
            logger.debug("Skipping %s: module %s is outside the namespace filter", unit.name, unit.module)
            return None

        lifetime = self._select_lifetime(unit, convention)
        if lifetime is None:
            logger.debug("Skipping %s: no lifetime marker and no matching convention", unit.name)
            return None

        return ServiceCandidate(
            implementation=unit.implementation,
            exposed_capability=self._select_capability(unit, namespace_filters, excluded),
            lifetime=lifetime,
            requirements=unit.requirements,
        )

    @staticmethod
    def _select_lifetime(unit: Unit, convention: Optional[ConventionRule]) -> Optional[Lifetime]:
        # Explicit marker wins over the convention
        if unit.lifetime is not None:
            return unit.lifetime
        if convention is not None and convention.matches(unit.implementation):
            return convention.lifetime
        return None

    @staticmethod
    def _select_capability(unit: Unit, namespace_filters: Sequence[str], excluded: Set[Any]) -> Type:
        # Without filters, only bases from the unit's own top-level package qualify
        allowed = namespace_filters or [unit.module.split(".")[0]]
        for capability in unit.capabilities:
            if not matches_namespace(namespace_of(capability), allowed):
                continue
            if capability in excluded:
                continue
            return capability
        return unit.implementation
