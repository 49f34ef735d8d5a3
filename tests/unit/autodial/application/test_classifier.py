"""Unit tests for CandidateClassifier."""

from collections import OrderedDict

from autodial.application.classifier import CandidateClassifier
from autodial.domain import ConventionRule, Lifetime
from autodial.infrastructure.testing import make_unit


class IUserRepository:
    pass


class IAuditable:
    pass


class UserRepository(IAuditable, IUserRepository):
    pass


class Clock:
    pass


class Mailer:
    pass


class LruCache(OrderedDict):
    pass


class TestLifetimeSelection:
    """Test cases for lifetime selection."""

    def test_explicit_marker_is_used(self):
        """Test that the declared lifetime is kept."""
        candidates = CandidateClassifier().classify([make_unit(Clock, lifetime=Lifetime.SINGLETON)])

        assert len(candidates) == 1
        assert candidates[0].lifetime is Lifetime.SINGLETON

    def test_unmarked_unit_without_convention_is_skipped(self):
        """Test the opt-in model: no marker and no convention means no candidate."""
        candidates = CandidateClassifier().classify([make_unit(Clock, lifetime=None)])

        assert candidates == []

    def test_convention_applies_to_unmarked_unit(self):
        """Test that a matching convention supplies the lifetime."""
        convention = ConventionRule(predicate=lambda cls: cls is Clock, lifetime=Lifetime.TRANSIENT)

        candidates = CandidateClassifier().classify([make_unit(Clock, lifetime=None)], convention=convention)

        assert [c.lifetime for c in candidates] == [Lifetime.TRANSIENT]

    def test_non_matching_convention_skips_unit(self):
        """Test that a convention not matching the unit does not register it."""
        convention = ConventionRule(predicate=lambda cls: cls is Mailer, lifetime=Lifetime.TRANSIENT)

        candidates = CandidateClassifier().classify([make_unit(Clock, lifetime=None)], convention=convention)

        assert candidates == []

    def test_explicit_marker_wins_over_convention(self):
        """Test that the marker has precedence over a matching convention."""
        convention = ConventionRule(predicate=lambda cls: True, lifetime=Lifetime.TRANSIENT)

        candidates = CandidateClassifier().classify(
            [make_unit(Clock, lifetime=Lifetime.SINGLETON)],
            convention=convention,
        )

        assert candidates[0].lifetime is Lifetime.SINGLETON


class TestSkipRules:
    """Test cases for units that never become candidates."""

    def test_excluded_unit_is_skipped(self):
        """Test that the exclusion marker removes the unit."""
        candidates = CandidateClassifier().classify([make_unit(Clock, excluded=True)])

        assert candidates == []

    def test_excluded_unit_is_skipped_even_with_convention(self):
        """Test that exclusion also wins over a convention."""
        convention = ConventionRule(predicate=lambda cls: True)

        units = [make_unit(Clock, lifetime=None, excluded=True)]
        candidates = CandidateClassifier().classify(units, convention=convention)

        assert candidates == []

    def test_abstract_unit_is_skipped(self):
        """Test that non-instantiable units are skipped."""
        candidates = CandidateClassifier().classify([make_unit(IUserRepository, is_concrete=False)])

        assert candidates == []

    def test_unit_outside_namespace_filter_is_skipped(self):
        """Test that the unit module must start with a configured prefix."""
        units = [
            make_unit(Clock, module="app.services.clock"),
            make_unit(Mailer, module="vendor.mail"),
        ]

        candidates = CandidateClassifier().classify(units, namespace_filters=["app.services"])

        assert [c.implementation for c in candidates] == [Clock]

    def test_any_of_several_filters_matches(self):
        """Test that several namespace prefixes are accepted."""
        units = [
            make_unit(Clock, module="app.services.clock"),
            make_unit(Mailer, module="app.mail"),
        ]

        candidates = CandidateClassifier().classify(units, namespace_filters=["app.services", "app.mail"])

        assert [c.implementation for c in candidates] == [Clock, Mailer]

    def test_filter_matching_nothing_is_not_an_error(self):
        """Test that a useless filter silently yields no candidates."""
        candidates = CandidateClassifier().classify([make_unit(Clock)], namespace_filters=["nowhere"])

        assert candidates == []

    def test_duplicate_unit_yields_one_candidate(self):
        """Test that a unit listed twice is classified once."""
        candidates = CandidateClassifier().classify([make_unit(Clock), make_unit(Clock, lifetime=Lifetime.SINGLETON)])

        assert len(candidates) == 1
        assert candidates[0].lifetime is Lifetime.SCOPED


class TestCapabilitySelection:
    """Test cases for exposed capability selection."""

    def test_first_declared_capability_wins(self):
        """Test that the first eligible capability in declaration order is exposed."""
        unit = make_unit(UserRepository, capabilities=[IAuditable, IUserRepository])

        candidates = CandidateClassifier().classify([unit])

        assert candidates[0].exposed_capability is IAuditable

    def test_excluded_capability_is_passed_over(self):
        """Test that excluded capabilities are not exposed."""
        unit = make_unit(UserRepository, capabilities=[IAuditable, IUserRepository])

        candidates = CandidateClassifier().classify([unit], excluded_capabilities={IAuditable})

        assert candidates[0].exposed_capability is IUserRepository

    def test_filtered_and_excluded_capabilities_combine(self):
        """Test that the exposed capability passes the filter and is not excluded."""
        unit = make_unit(
            UserRepository,
            capabilities=[IAuditable, IUserRepository],
            module=UserRepository.__module__,
        )

        candidates = CandidateClassifier().classify(
            [unit],
            namespace_filters=[UserRepository.__module__],
            excluded_capabilities={IAuditable},
        )

        assert candidates[0].exposed_capability is IUserRepository

    def test_self_registration_when_no_capability_qualifies(self):
        """Test that the implementation is exposed as itself when nothing qualifies."""
        unit = make_unit(UserRepository, capabilities=[IAuditable, IUserRepository])

        candidates = CandidateClassifier().classify([unit], excluded_capabilities={IAuditable, IUserRepository})

        assert candidates[0].exposed_capability is UserRepository
        assert candidates[0].is_self_registered

    def test_self_registration_without_bases(self):
        """Test a plain class without declared capabilities."""
        candidates = CandidateClassifier().classify([make_unit(Clock)])

        assert candidates[0].exposed_capability is Clock

    def test_foreign_capability_skipped_by_filter(self):
        """Test that a base class from another namespace is not exposed."""
        unit = make_unit(Clock, capabilities=[Mailer], module="app.clock")

        candidates = CandidateClassifier().classify([unit], namespace_filters=["app"])

        assert candidates[0].exposed_capability is Clock

    def test_foreign_base_not_exposed_without_filter(self):
        """Test that a base from another top-level package is never exposed when no filter is set."""
        candidates = CandidateClassifier().classify([make_unit(LruCache)])

        assert candidates[0].exposed_capability is LruCache

    def test_base_from_same_top_level_package_exposed_without_filter(self):
        """Test that bases declared in another module of the same package still qualify."""
        contract = type("IClock", (), {"__module__": "app.contracts"})
        unit = make_unit(Clock, capabilities=[contract], module="app.services.clock")

        candidates = CandidateClassifier().classify([unit])

        assert candidates[0].exposed_capability is contract


class TestOutput:
    """Test cases for the classifier output."""

    def test_output_preserves_input_order(self):
        """Test that candidates come out in the order units went in."""
        units = [make_unit(Mailer), make_unit(Clock), make_unit(UserRepository)]

        candidates = CandidateClassifier().classify(units)

        assert [c.implementation for c in candidates] == [Mailer, Clock, UserRepository]

    def test_requirements_are_carried_over(self):
        """Test that the candidate keeps the unit requirements."""
        candidates = CandidateClassifier().classify([make_unit(Mailer, requirements=[Clock, str])])

        assert candidates[0].requirements == (Clock, str)

    def test_empty_input(self):
        """Test that no units means no candidates."""
        assert CandidateClassifier().classify([]) == []
