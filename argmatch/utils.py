"""
Shared helpers for the declaration layers.

- Unset: "not provided" marker. None is a meaningful value for aliases and
  value names (it means "no alias"), so omitted parameters need their own
  marker; coalesce() turns it into a concrete fallback.
- rename(): gives generated callables readable names in tracebacks.
- mirror(): read-only property over a private "_<name>" field.

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import functools
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is one instance per process. It is falsy, prints as "Unset", is
    returned unchanged by copy/deepcopy/pickle (declarations holding it are
    deep-copied by Command.subcommand()) and can take part in PEP 604 unions
    such as `str | Unset`.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    __ror__ = __or__

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, `object` otherwise.

    Only the marker is replaced: None, 0, "" and empty containers pass through.
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator that sets __name__ and __qualname__ of a generated callable.

        @rename("__repr__")
        def __repr__(self): ...
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("rename() must decorate a callable")
        try:
            function.__name__ = function.__qualname__ = name
        except (AttributeError, TypeError):
            raise TypeError(f"rename() cannot rename {function!r}") from None
        return function

    return decorator


def _detached(value):
    # Containers are rebuilt (recursively) so callers never hold the stored objects.
    match value:
        case str():
            return value
        case Mapping():
            return {key: _detached(item) for key, item in value.items()}
        case Set():
            return {_detached(item) for item in value}
        case Sequence():
            return [_detached(item) for item in value]
    return value


def mirror(name, /):
    """
    Read-only property returning `self._<name>` (containers as fresh copies).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detached(getattr(self, "_" + name))

    return property(getter)


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
)
