"""Unit tests for DependencyGraphBuilder."""

import logging
from typing import List

import pytest

from autodial.application.exemption_policy import ExemptionPolicy
from autodial.application.graph_builder import DependencyGraphBuilder
from autodial.domain import ExemptionRules, Lifetime, ServiceCandidate, UnresolvedDependencyError


class IServiceA:
    pass


class IServiceB:
    pass


class ServiceA(IServiceA):
    pass


class ServiceB(IServiceB):
    pass


class ServiceC:
    pass


class IExternal:
    pass


def candidate(implementation, exposed=None, requirements=()):
    return ServiceCandidate(
        implementation=implementation,
        exposed_capability=exposed if exposed is not None else implementation,
        lifetime=Lifetime.SCOPED,
        requirements=tuple(requirements),
    )


@pytest.fixture
def builder():
    return DependencyGraphBuilder(ExemptionPolicy())


class TestEdges:
    """Test cases for in-batch edges."""

    def test_requirement_on_exposed_capability_creates_edge(self, builder):
        """Test that requiring an interface links to its implementation."""
        candidates = [
            candidate(ServiceA, IServiceA),
            candidate(ServiceB, IServiceB, requirements=[IServiceA]),
        ]

        graph = builder.build(candidates)

        assert graph.dependents_of(ServiceA) == [ServiceB]
        assert graph.in_degree == {ServiceA: 0, ServiceB: 1}

    def test_requirement_on_implementation_creates_edge(self, builder):
        """Test that requiring the concrete class also links to it."""
        candidates = [
            candidate(ServiceA, IServiceA),
            candidate(ServiceC, requirements=[ServiceA]),
        ]

        graph = builder.build(candidates)

        assert graph.dependents_of(ServiceA) == [ServiceC]
        assert graph.in_degree[ServiceC] == 1

    def test_every_candidate_is_a_node(self, builder):
        """Test that candidates without edges are still nodes."""
        graph = builder.build([candidate(ServiceA), candidate(ServiceC)])

        assert graph.nodes == [ServiceA, ServiceC]
        assert graph.edge_count == 0

    def test_edge_count_matches_resolved_requirements(self, builder):
        """Test that one edge is created per in-batch requirement."""
        candidates = [
            candidate(ServiceA, IServiceA),
            candidate(ServiceB, IServiceB, requirements=[IServiceA, str]),
            candidate(ServiceC, requirements=[IServiceA, IServiceB, logging.Logger]),
        ]

        graph = builder.build(candidates)

        assert graph.edge_count == 3
        assert graph.in_degree == {ServiceA: 0, ServiceB: 1, ServiceC: 2}

    def test_self_requirement_creates_self_edge(self, builder):
        """Test that requiring one's own capability is a one-node cycle."""
        graph = builder.build([candidate(ServiceA, IServiceA, requirements=[IServiceA])])

        assert graph.dependents_of(ServiceA) == [ServiceA]
        assert graph.in_degree[ServiceA] == 1

    def test_first_provider_wins_for_shared_capability(self, builder):
        """Test that the first candidate exposing a capability provides it."""

        class OtherA(IServiceA):
            pass

        candidates = [
            candidate(ServiceA, IServiceA),
            candidate(OtherA, IServiceA),
            candidate(ServiceC, requirements=[IServiceA]),
        ]

        graph = builder.build(candidates)

        assert graph.dependents_of(ServiceA) == [ServiceC]
        assert graph.dependents_of(OtherA) == []

    def test_in_batch_provider_takes_precedence_over_exemption(self):
        """Test that an ignored capability still orders against an in-batch provider."""
        builder = DependencyGraphBuilder(ExemptionPolicy(ExemptionRules(types={IServiceA})))
        candidates = [
            candidate(ServiceA, IServiceA),
            candidate(ServiceB, IServiceB, requirements=[IServiceA]),
        ]

        graph = builder.build(candidates)

        assert graph.in_degree[ServiceB] == 1


class TestExemptRequirements:
    """Test cases for requirements satisfied outside the batch."""

    def test_known_external_requirement_adds_no_edge(self, builder):
        """Test that already registered capabilities are accepted without an edge."""
        graph = builder.build([candidate(ServiceC, requirements=[IExternal])], known_external={IExternal})

        assert graph.edge_count == 0
        assert graph.in_degree[ServiceC] == 0

    def test_builtin_exempt_requirement_adds_no_edge(self, builder):
        """Test that primitives, loggers and collections are accepted."""
        graph = builder.build([candidate(ServiceC, requirements=[int, logging.Logger, List[IExternal]])])

        assert graph.edge_count == 0

    def test_exempt_subclass_in_batch_does_not_capture_requirement(self, builder):
        """Test that an exempt capability is not matched to an in-batch subclass."""

        class CustomLogger(logging.Logger):
            pass

        candidates = [
            candidate(CustomLogger),
            candidate(ServiceC, requirements=[logging.Logger]),
        ]

        graph = builder.build(candidates)

        assert graph.edge_count == 0
        assert graph.in_degree[ServiceC] == 0

    def test_user_exempt_requirement_adds_no_edge(self):
        """Test that user exemptions are honoured."""
        builder = DependencyGraphBuilder(ExemptionPolicy(ExemptionRules(types={IExternal})))

        graph = builder.build([candidate(ServiceC, requirements=[IExternal])])

        assert graph.edge_count == 0


class TestUnresolved:
    """Test cases for requirements without a provider."""

    def test_unresolved_requirement_raises(self, builder):
        """Test that a missing provider fails the build."""
        with pytest.raises(UnresolvedDependencyError) as exc_info:
            builder.build([candidate(ServiceC, requirements=[IExternal])])

        error = exc_info.value
        assert error.requirement is IExternal
        assert error.dependent is ServiceC
        assert "'IExternal'" in str(error)
        assert "'ServiceC'" in str(error)

    def test_first_unresolved_requirement_is_reported(self, builder):
        """Test that the build stops at the first unresolved requirement."""

        class IMissingOne:
            pass

        class IMissingTwo:
            pass

        candidates = [
            candidate(ServiceA, requirements=[IMissingOne]),
            candidate(ServiceB, requirements=[IMissingTwo]),
        ]

        with pytest.raises(UnresolvedDependencyError) as exc_info:
            builder.build(candidates)

        assert exc_info.value.requirement is IMissingOne
        assert exc_info.value.dependent is ServiceA

    def test_unhashable_requirement_is_unresolved(self, builder):
        """Test that odd annotations are reported rather than crashing."""
        with pytest.raises(UnresolvedDependencyError):
            builder.build([candidate(ServiceC, requirements=[["not", "a", "type"]])])
