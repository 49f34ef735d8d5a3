"""Application layer - Exemption of requirements satisfied outside the batch."""

import collections.abc
import inspect
import types
from typing import Any, FrozenSet, Optional, Set, Tuple, Union, get_args, get_origin

from autodial.domain import ExemptionRules, IExemptionPolicy, IServiceRegistry, matches_namespace, namespace_of

PRIMITIVE_TYPES: FrozenSet[type] = frozenset({bool, int, float, complex, str, bytes, bytearray})

INFRASTRUCTURE_NAMESPACES: Tuple[str, ...] = (
    "logging",
    "pydantic_settings",
    "configparser",
    "starlette",
    "fastapi",
    "uvicorn",
    "httpx",
    "aiohttp",
    "urllib3",
)

ENUMERATION_ORIGINS: FrozenSet[Any] = frozenset(
    {
        collections.abc.Iterable,
        collections.abc.Iterator,
        collections.abc.Collection,
        collections.abc.Sequence,
        collections.abc.MutableSequence,
        collections.abc.Set,
        collections.abc.MutableSet,
        list,
        tuple,
        set,
        frozenset,
    }
)

_UNION_ORIGINS = tuple(origin for origin in (Union, getattr(types, "UnionType", None)) if origin is not None)


class ExemptionPolicy(IExemptionPolicy):
    """Decides whether a required capability may stay unresolved in the batch.

    Rules are evaluated in order and the first match wins:

    1. User exact-type exemptions.
    2. User namespace-prefix exemptions.
    3. User predicate exemptions.
    4. Capabilities already present in the registry before the pass.
    5. Built-ins: primitive and text scalars, infrastructural namespaces
       (logging, settings, configuration, hosting, http clients), the registry
       itself, and collection or optional wrappers.

    Attributes:
        _rules: User-declared exemption rules.
    """

    def __init__(self, rules: Optional[ExemptionRules] = None) -> None:
        self._rules = rules if rules is not None else ExemptionRules()

    @property
    def rules(self) -> ExemptionRules:
        return self._rules

    def is_exempt(self, capability: Any, known_external: Set[Any]) -> bool:
        """Return True if the capability need not resolve to an in-batch candidate.

        Args:
            capability: The required capability.
            known_external: Capabilities registered before the pass began.

        Example:
            >>> policy = ExemptionPolicy(ExemptionRules(namespaces=["vendor.sdk"]))
            >>> policy.is_exempt(int, set())
            True
        """
        if self._is_user_exempt(capability):
            return True
        if _safe_contains(known_external, capability):
            return True
        return is_builtin_exempt(capability)

    def _is_user_exempt(self, capability: Any) -> bool:
        if _safe_contains(self._rules.types, capability):
            return True
        if self._rules.namespaces and matches_namespace(namespace_of(capability), self._rules.namespaces):
            return True
        return any(predicate(capability) for predicate in self._rules.predicates)


def is_builtin_exempt(capability: Any) -> bool:
    """Return True for capabilities the hosting application always provides."""
    if _safe_contains(PRIMITIVE_TYPES, capability):
        return True

    if matches_namespace(namespace_of(capability), INFRASTRUCTURE_NAMESPACES):
        return True

    if inspect.isclass(capability) and issubclass(capability, IServiceRegistry):
        return True

    origin = get_origin(capability)
    if origin is None:
        return False
    if origin in ENUMERATION_ORIGINS:
        return True
    # Optional[T]
    return origin in _UNION_ORIGINS and type(None) in get_args(capability)


def _safe_contains(container: Union[Set[Any], FrozenSet[Any]], capability: Any) -> bool:
    try:
        return capability in container
    except TypeError:
        # unhashable annotation
        return False
