"""Ready-made predicates over classes.

The returned callables can be used as convention rules or as dependency
exemption predicates. They return False for anything that is not a class.
Parameterized aliases such as ``Repository[User]`` are matched through their
origin by inherits_or_implements and implements only.
"""

import inspect
from typing import Any, Callable, Type, get_origin

from autodial.domain import matches_namespace, namespace_of

TypePredicate = Callable[[Any], bool]


def inherits_or_implements(base_type: Type) -> TypePredicate:
    """Match classes deriving from base_type, including base_type itself.

    Generic bases are matched through their origin, so
    ``inherits_or_implements(Repository)`` also matches ``class UserRepo(Repository[User])``
    and the alias ``Repository[User]`` itself.

    Raises:
        TypeError: If base_type is not a class.
    """
    if not inspect.isclass(base_type):
        raise TypeError(f"base_type must be a class, got {base_type!r}")

    def predicate(cls: Any) -> bool:
        origin = get_origin(cls)
        if origin is not None:
            cls = origin
        if not inspect.isclass(cls):
            return False
        try:
            return issubclass(cls, base_type)
        except TypeError:
            return base_type in inspect.getmro(cls)

    return predicate


def implements(interface_type: Type) -> TypePredicate:
    """Match concrete classes implementing an abstract interface.

    Unlike inherits_or_implements, the interface itself never matches.

    Raises:
        TypeError: If interface_type is not an abstract class or a Protocol.
    """
    if not inspect.isclass(interface_type) or not _is_interface(interface_type):
        raise TypeError(f"interface_type must be an abstract class or a Protocol, got {interface_type!r}")

    base_predicate = inherits_or_implements(interface_type)

    def predicate(cls: Any) -> bool:
        return (get_origin(cls) or cls) is not interface_type and base_predicate(cls)

    return predicate


def has_marker(attribute_name: str) -> TypePredicate:
    """Match classes defining the given attribute directly (not inherited)."""
    if not attribute_name:
        raise ValueError("attribute_name must not be empty")

    def predicate(cls: Any) -> bool:
        return inspect.isclass(cls) and attribute_name in vars(cls)

    return predicate


def name_ends_with(suffix: str, case_sensitive: bool = True) -> TypePredicate:
    """Match classes whose name ends with suffix, e.g. ``"Service"``."""
    expected = suffix if case_sensitive else suffix.lower()

    def predicate(cls: Any) -> bool:
        if not inspect.isclass(cls):
            return False
        name = cls.__name__ if case_sensitive else cls.__name__.lower()
        return name.endswith(expected)

    return predicate


def name_starts_with(prefix: str, case_sensitive: bool = True) -> TypePredicate:
    """Match classes whose name starts with prefix."""
    expected = prefix if case_sensitive else prefix.lower()

    def predicate(cls: Any) -> bool:
        if not inspect.isclass(cls):
            return False
        name = cls.__name__ if case_sensitive else cls.__name__.lower()
        return name.startswith(expected)

    return predicate


def is_in_namespace(namespace_prefix: str) -> TypePredicate:
    """Match classes whose module starts with namespace_prefix."""

    def predicate(cls: Any) -> bool:
        return inspect.isclass(cls) and matches_namespace(namespace_of(cls), [namespace_prefix])

    return predicate


def _is_interface(cls: Type) -> bool:
    return inspect.isabstract(cls) or bool(getattr(cls, "_is_protocol", False))
