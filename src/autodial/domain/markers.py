"""Class decorators that mark implementations for auto-registration.

Markers are stored on the decorated class itself and are not inherited:
a subclass of a marked service has to be marked again to become a candidate.
"""

from typing import Callable, Optional, Type, TypeVar

from autodial.domain.enums import Lifetime
from autodial.domain.exceptions import LifetimeError

T = TypeVar("T", bound=type)

LIFETIME_MARKER = "__autodial_lifetime__"
EXCLUDE_MARKER = "__autodial_exclude__"


def service_lifetime(lifetime: Lifetime) -> Callable[[T], T]:
    """Mark a class as a service registered with the given lifetime.

    Args:
        lifetime: The lifetime to register the class with.

    Raises:
        LifetimeError: If lifetime is not a Lifetime member.

    Example:
        >>> @service_lifetime(Lifetime.SINGLETON)
        ... class SmtpEmailSender(EmailSender):
        ...     def __init__(self, settings: SmtpSettings) -> None:
        ...         self.settings = settings
    """
    if not isinstance(lifetime, Lifetime):
        raise LifetimeError(f"Invalid lifetime marker: {lifetime!r}. Expected one of {[str(x) for x in Lifetime]}")

    def decorator(cls: T) -> T:
        setattr(cls, LIFETIME_MARKER, lifetime)
        return cls

    return decorator


def exclude_from_di(cls: T) -> T:
    """Mark a class so it is never auto-registered, even when a convention matches it."""
    setattr(cls, EXCLUDE_MARKER, True)
    return cls


def get_lifetime_marker(cls: Type) -> Optional[Lifetime]:
    """Return the lifetime declared directly on cls, ignoring base classes."""
    return vars(cls).get(LIFETIME_MARKER)


def has_exclude_marker(cls: Type) -> bool:
    """Return True if cls itself carries the exclusion marker."""
    return bool(vars(cls).get(EXCLUDE_MARKER, False))
