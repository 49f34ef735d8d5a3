import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Iterable, List, Optional, Set, Tuple, Type

from autodial.domain import (
    ConfigurationError,
    DiscoveryError,
    IDiscovery,
    Unit,
    get_lifetime_marker,
    matches_namespace,
)
from autodial.infrastructure.discovery.cache import DiscoveryCache
from autodial.infrastructure.discovery.introspection import describe_class

logger = logging.getLogger(__name__)


class ModuleScanner(IDiscovery):
    """Discovers units by importing a package and inspecting its classes.

    Scans the source module and, when it is a package, all of its subpackages.
    Only classes defined in the scanned modules are reported, not the names
    they import. Modules are visited in pkgutil order and classes in
    definition order, so a fixed package always yields the same units.

    Attributes:
        _cache: Memo of previous scans, shared by every pass using this scanner.
        _recursive: Whether subpackages are scanned.
    """

    def __init__(self, cache: Optional[DiscoveryCache] = None, recursive: bool = True) -> None:
        self._cache = cache if cache is not None else DiscoveryCache()
        self._recursive = recursive

    @property
    def cache(self) -> DiscoveryCache:
        return self._cache

    def discover(self, source: str, namespace_filters: Iterable[str] = ()) -> List[Unit]:
        """Return the units defined under source.

        Args:
            source: Dotted module path, e.g. ``"myapp.services"``.
            namespace_filters: Module prefixes to keep. Empty keeps everything.

        Raises:
            ConfigurationError: If source is empty or cannot be imported.
            DiscoveryError: If a marked class has an unreadable constructor.

        Example:
            >>> scanner = ModuleScanner()
            >>> units = scanner.discover("myapp", ["myapp.services"])
        """
        if not source:
            raise ConfigurationError("No source package configured. Use from_package() or from_package_of().")

        filters = tuple(namespace_filters)
        return self._cache.get_or_compute(source, filters, lambda: self._scan(source, filters), self._recursive)

    def _scan(self, source: str, namespace_filters: Tuple[str, ...]) -> List[Unit]:
        units: List[Unit] = []
        seen: Set[Type] = set()

        for module in self._iter_modules(self._import(source)):
            for obj in list(vars(module).values()):
                if not inspect.isclass(obj) or obj.__module__ != module.__name__ or obj in seen:
                    continue
                if namespace_filters and not matches_namespace(obj.__module__, namespace_filters):
                    continue
                seen.add(obj)

                unit = self._describe(obj)
                if unit is not None:
                    units.append(unit)

        logger.debug("Discovered %d unit(s) in %s", len(units), source)
        return units

    @staticmethod
    def _import(source: str) -> ModuleType:
        try:
            return importlib.import_module(source)
        except ImportError as e:
            raise ConfigurationError(f"Could not import source package '{source}': {e}") from e

    def _iter_modules(self, root: ModuleType) -> List[ModuleType]:
        modules = [root]
        if not self._recursive or not hasattr(root, "__path__"):
            return modules

        for _, name, _ in pkgutil.walk_packages(root.__path__, root.__name__ + ".", onerror=_log_walk_error):
            try:
                modules.append(importlib.import_module(name))
            except ImportError as e:
                logger.warning("Failed to import %s during discovery: %s", name, e)
        return modules

    @staticmethod
    def _describe(cls: Type) -> Optional[Unit]:
        try:
            return describe_class(cls)
        except DiscoveryError:
            # Unmarked helper classes are allowed to have untyped constructors
            if get_lifetime_marker(cls) is not None:
                raise
            logger.debug("Skipping %s: constructor cannot be introspected", cls.__qualname__)
            return None


def _log_walk_error(name: str) -> None:
    logger.warning("Failed to import package %s during discovery", name)
