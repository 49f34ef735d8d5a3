"""Helpers for reading identity information off capability types.

A capability is either a class or a typing alias such as ``List[Repository]``.
Aliases are described through their origin.
"""

from typing import Any, Iterable, Optional, get_origin


def namespace_of(capability: Any) -> Optional[str]:
    """Return the module path a capability is declared in.

    Args:
        capability: A class or typing alias.

    Returns:
        The ``__module__`` of the class (or of the alias origin), or None when unknown.
    """
    origin = get_origin(capability)
    target = origin if origin is not None else capability
    module = getattr(target, "__module__", None)
    return module if isinstance(module, str) else None


def display_name(capability: Any) -> str:
    """Return a short human-readable name used in diagnostics."""
    if get_origin(capability) is None:
        name = getattr(capability, "__name__", None)
        if isinstance(name, str):
            return name
    return repr(capability).replace("typing.", "")


def matches_namespace(namespace: Optional[str], prefixes: Iterable[str]) -> bool:
    """Check whether a namespace starts with any of the given prefixes.

    Trailing dots on prefixes are ignored, so ``"app.services."`` and
    ``"app.services"`` behave the same.
    """
    if namespace is None:
        return False
    return any(namespace.startswith(prefix.rstrip(".")) for prefix in prefixes)
