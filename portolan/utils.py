"""
Portolan utilities.

- Unset: "not provided" sentinel for optional parameters, distinct from None,
  which the parsing engine reserves for "no raw value on the token".
- coalesce(value, default=None): materialize Unset into a default.
- rename("name"): decorator giving generated continuation closures a
  readable name while keeping their enclosing scope in __qualname__.
- mirror("attr"): read-only property over the private field self._attr.
"""
import operator
from typing import final


@final
class UnsetType:
    """
    type of the Unset sentinel.

    there is a single instance; it is falsy, prints as "Unset" and survives
    copy, deepcopy and pickle as itself.
    """
    __slots__ = ()

    _instance = None

    def __new__(cls):
        if UnsetType._instance is None:
            UnsetType._instance = super().__new__(cls)
        return UnsetType._instance

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        # resolved by name in this module: copies and unpickled objects stay the singleton
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    return `object`, or `default` when it is Unset.

    None, 0 and "" are real values and are returned unchanged.
    """
    return default if object is Unset else object


def rename(name, /):
    """
    decorator setting the last component of a function's __name__ and __qualname__.

        >>> @rename("resolve")
        ... def first(value): ...
    """
    if not isinstance(name, str) or not name:
        raise TypeError("rename() argument must be a non-empty string")

    def decorator(function):
        if not callable(function):
            raise TypeError("@rename() must be applied to a function")
        scope, _, _ = function.__qualname__.rpartition(".")
        function.__name__ = name
        function.__qualname__ = "%s.%s" % (scope, name) if scope else name
        return function

    return decorator


def mirror(name, /):
    """read-only property exposing the private attribute "_{name}"."""
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    return property(operator.attrgetter("_" + name), doc="read-only view of self._%s" % name)


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
