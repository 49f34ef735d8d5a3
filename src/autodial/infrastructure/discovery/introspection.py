import inspect
from abc import ABC
from enum import Enum
from typing import Any, Generic, List, Protocol, Tuple, Type, get_type_hints

from autodial.domain import DiscoveryError, Unit, get_lifetime_marker, has_exclude_marker

_IGNORED_BASES = (object, Generic, Protocol, ABC)


def describe_class(cls: Type) -> Unit:
    """Describe a class as a unit using constructor introspection.

    Args:
        cls: The class to describe.

    Returns:
        Unit with the class capabilities, constructor requirements and markers.

    Raises:
        DiscoveryError: If a constructor parameter lacks a type hint and has no
            default value, or if its type hint cannot be resolved.

    Example:
        >>> @service_lifetime(Lifetime.SCOPED)
        ... class UserService(IUserService):
        ...     def __init__(self, repository: IUserRepository, logger: logging.Logger):
        ...         self.repository = repository
        ...         self.logger = logger
        >>>
        >>> describe_class(UserService).requirements
        (IUserRepository, logging.Logger)
    """
    return Unit(
        implementation=cls,
        module=cls.__module__,
        capabilities=declared_capabilities(cls),
        requirements=constructor_requirements(cls),
        lifetime=get_lifetime_marker(cls),
        excluded=has_exclude_marker(cls),
        is_concrete=is_instantiable(cls),
    )


def declared_capabilities(cls: Type) -> Tuple[Type, ...]:
    """Return the base classes cls can be exposed as, nearest first."""
    return tuple(base for base in inspect.getmro(cls)[1:] if base not in _IGNORED_BASES)


def is_instantiable(cls: Type) -> bool:
    """Return False for abstract classes, protocols and enumerations."""
    if inspect.isabstract(cls):
        return False
    if getattr(cls, "_is_protocol", False):
        return False
    return not issubclass(cls, Enum)


def constructor_requirements(cls: Type) -> Tuple[Any, ...]:
    """Return the annotated types of the required constructor parameters.

    Parameters with defaults and variadic parameters are not requirements.
    """
    init = cls.__init__
    if init is object.__init__:
        return ()

    try:
        # Get constructor signature
        signature = inspect.signature(init)

        # Get type hints for constructor parameters
        type_hints = get_type_hints(init)
    except Exception as e:
        raise DiscoveryError(cls, f"Failed to read constructor signature: {e}") from e

    requirements: List[Any] = []
    for param_name, param in signature.parameters.items():
        # Skip 'self' parameter
        if param_name == "self":
            continue

        # Skip *args and **kwargs parameters (VAR_POSITIONAL and VAR_KEYWORD)
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        # Skip parameters with defaults (let them use default values)
        if param.default is not inspect.Parameter.empty:
            continue

        if param_name not in type_hints:
            raise DiscoveryError(cls, f"Parameter '{param_name}' lacks type hint and has no default value.")

        requirements.append(type_hints[param_name])

    return tuple(requirements)
