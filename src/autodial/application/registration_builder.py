"""Application layer - Fluent configuration and commit of an auto-registration pass."""

import inspect
import logging
from typing import Any, Callable, List, NoReturn, Optional, Set, Type

from autodial.application.engine import ResolutionEngine
from autodial.domain import (
    AutoDialOptions,
    ConfigurationError,
    ConventionRule,
    DiscoveryError,
    IDiscovery,
    IServiceRegistry,
    Lifetime,
    ResolutionResult,
    ServiceCandidate,
    display_name,
)

logger = logging.getLogger(__name__)


class AutoDialRegistrationBuilder:
    """Configures and runs auto-registration into a service registry.

    Collects the configuration through chained calls, then discovers units,
    orders the candidates and registers them. Registrations are committed only
    once the whole batch has been ordered, so a failed pass registers nothing.

    Attributes:
        _registry: Registry the candidates are committed to.
        _discovery: Finds units in the configured source package.
        _engine: Classifies and orders the units.
        _options: Configuration collected so far.

    Example:
        >>> services = ServiceCollection()
        >>> (
        ...     AutoDialRegistrationBuilder(services, ModuleScanner())
        ...     .from_package("myapp")
        ...     .in_namespace_starting_with("myapp.services")
        ...     .exclude_capability(IDisposable)
        ...     .complete_auto_registration()
        ... )
    """

    def __init__(
        self,
        registry: IServiceRegistry,
        discovery: IDiscovery,
        engine: Optional[ResolutionEngine] = None,
    ) -> None:
        self._registry = registry
        self._discovery = discovery
        self._engine = engine if engine is not None else ResolutionEngine()
        self._options = AutoDialOptions()

    @property
    def options(self) -> AutoDialOptions:
        return self._options

    def from_package(self, source: str) -> "AutoDialRegistrationBuilder":
        """Scan the given package or module."""
        self._options.source = source
        return self

    def from_package_of(self, cls: Type) -> "AutoDialRegistrationBuilder":
        """Scan the top-level package that defines cls.

        Raises:
            ConfigurationError: If cls is not a class.
        """
        if not inspect.isclass(cls):
            raise ConfigurationError(f"Could not resolve package for {cls!r}")
        self._options.source = cls.__module__.split(".")[0]
        return self

    def in_namespace_starting_with(self, *prefixes: str) -> "AutoDialRegistrationBuilder":
        """Only keep classes and capabilities whose module starts with one of the prefixes.

        Can be called several times; prefixes accumulate.
        """
        for prefix in prefixes:
            if prefix not in self._options.namespace_filters:
                self._options.namespace_filters.append(prefix)
        return self

    def exclude_capability(self, capability: Any) -> "AutoDialRegistrationBuilder":
        """Never register candidates under this capability."""
        self._options.excluded_capabilities.add(capability)
        return self

    def exclude_capabilities(self, *capabilities: Any) -> "AutoDialRegistrationBuilder":
        for capability in capabilities:
            self.exclude_capability(capability)
        return self

    def ignore_dependency(self, capability: Any) -> "AutoDialRegistrationBuilder":
        """Treat a required capability as provided elsewhere."""
        self._options.exemptions.types.add(capability)
        return self

    def ignore_dependencies(self, *capabilities: Any) -> "AutoDialRegistrationBuilder":
        for capability in capabilities:
            self.ignore_dependency(capability)
        return self

    def ignore_dependencies_in_namespace(self, namespace_prefix: str) -> "AutoDialRegistrationBuilder":
        """Treat every required capability declared under namespace_prefix as provided elsewhere."""
        self._options.exemptions.namespaces.append(namespace_prefix)
        return self

    def ignore_dependency_where(self, predicate: Callable[[Any], bool]) -> "AutoDialRegistrationBuilder":
        """Treat required capabilities matching predicate as provided elsewhere."""
        self._options.exemptions.predicates.append(predicate)
        return self

    def register_by_convention(
        self,
        predicate: Callable[[Type], bool],
        lifetime: Lifetime = Lifetime.SCOPED,
    ) -> "AutoDialRegistrationBuilder":
        """Register unmarked classes matching predicate with a default lifetime.

        An explicit @service_lifetime marker still takes precedence.

        Example:
            >>> builder.register_by_convention(name_ends_with("Repository"), Lifetime.SINGLETON)
        """
        self._options.convention = ConventionRule(predicate=predicate, lifetime=lifetime)
        return self

    def skip_registered_capabilities(self, skip: bool = True) -> "AutoDialRegistrationBuilder":
        """Choose whether candidates whose capability is already registered are left out."""
        self._options.skip_registered_capabilities = skip
        return self

    def if_exception_occurs(self, callback: Callable[[Exception], None]) -> "AutoDialRegistrationBuilder":
        """Observe any exception raised by complete_auto_registration before it propagates."""
        self._options.on_error = callback
        return self

    def resolve(self) -> ResolutionResult:
        """Discover and order candidates without registering anything.

        Returns:
            The tagged result of the pass.
        """
        return self._resolve(self._registry.registered_capabilities())

    def _resolve(self, known_external: Set[Any]) -> ResolutionResult:
        try:
            if not self._options.source:
                raise ConfigurationError(
                    "No source package configured. Use from_package() or from_package_of() before registering."
                )
            units = self._discovery.discover(self._options.source, self._options.namespace_filters)
        except (ConfigurationError, DiscoveryError) as e:
            return ResolutionResult.failure(e)

        return self._engine.run(units, self._options, known_external)

    def complete_auto_registration(self) -> IServiceRegistry:
        """Run the pass and register the ordered candidates.

        Returns:
            The registry, for chaining.

        Raises:
            ConfigurationError: If no source package is configured or it cannot be imported.
            DiscoveryError: If a marked class cannot be introspected.
            UnresolvedDependencyError: If a requirement has no provider.
            CircularDependencyError: If no registration order exists.

        Any exception raised during the pass, including ones from user predicates,
        is passed to the if_exception_occurs callback before it propagates.
        """
        try:
            known_external = self._registry.registered_capabilities()
            ordered = self._resolve(known_external).unwrap()
            self._commit(ordered, known_external)
        except Exception as e:
            self._fail(e)
        return self._registry

    def _commit(self, ordered: List[ServiceCandidate], known_external: Set[Any]) -> None:
        registered = 0
        for candidate in ordered:
            if self._options.skip_registered_capabilities and candidate.exposed_capability in known_external:
                logger.info(
                    "Skipping %s: %s is already registered",
                    display_name(candidate.implementation),
                    display_name(candidate.exposed_capability),
                )
                continue

            logger.info(
                "Registering %s : %s",
                display_name(candidate.implementation),
                display_name(candidate.exposed_capability),
            )
            self._registry.register(candidate.exposed_capability, candidate.implementation, candidate.lifetime)
            registered += 1

        logger.info("Auto-registration complete: %d service(s) registered", registered)

    def _fail(self, error: Exception) -> NoReturn:
        logger.error("Error during auto-registration: %s", error)
        callback = self._options.on_error
        if callback is not None:
            try:
                callback(error)
            except Exception:
                logger.exception("Failure callback raised while handling %s", type(error).__name__)
        raise error
