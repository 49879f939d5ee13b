r"""
Portolan action specifications.

Overview
- A closed set of action kinds, one class per kind:
  • Help: print the composed help text, then exit.
  • Version: print the configured version string, then exit.
  • Value: store one or more positional values under `dest`.
  • Flag: store True under `dest`.
  • Count: count occurrences under `dest`.
  • Constant: store a fixed value under `dest`.
  • Custom: hand the raw value and the live result to a callback.

- Dest-bearing kinds (Value, Flag, Count, Constant) may omit `dest`; the parser
  binds a copy whose dest is the declared argument name (see bind()).

Arity (Value only)
- Unset: exactly one value.
- int n (>= 1): exactly n values, collected into a list.
- "+": one or more values, collected into a list.
- "*": zero or more values, collected into a list.

Validation
- dest must be a non-empty string when provided.
- arity must be one of the forms above (bool is rejected as an int).
- Constant values are str, int, float or bool.
- Custom callbacks must be callable.

Quick example:
    >>> from portolan.actions import Value, Count
    >>> Value(arity="+")
    Value(dest=Unset, arity='+')
    >>> Count(dest="verbosity")
    Count(dest='verbosity')
"""
import copy
from enum import StrEnum

from .utils import *


class ActionKind(StrEnum):
    HELP = "help"
    VERSION = "version"
    VALUE = "value"
    FLAG = "flag"
    COUNT = "count"
    CONSTANT = "constant"
    CUSTOM = "custom"


def _sanitize_dest(dest):
    if dest is Unset:
        return dest
    if not isinstance(dest, str):
        raise TypeError("dest must be a string")
    if not (dest := dest.strip()):
        raise ValueError("dest must be a non-empty string")
    return dest


def _sanitize_arity(arity):
    if arity is Unset:
        return arity
    if isinstance(arity, bool) or not isinstance(arity, int | str):
        raise TypeError("arity must be a positive integer, '+' or '*'")
    if isinstance(arity, int) and arity < 1:
        raise ValueError("arity must be a positive integer, '+' or '*'")
    if isinstance(arity, str) and arity not in ("+", "*"):
        raise ValueError("arity must be a positive integer, '+' or '*'")
    return arity


class Action:
    """
    base of the closed action hierarchy.

    subclasses declare `kind` and the names of their fields in `__slots__`;
    __repr__, __eq__ and __replace__ are derived from those.
    """
    __slots__ = ()
    kind = None

    def __init_subclass__(cls, **options):
        if cls.__module__ != __name__:
            raise TypeError("action kinds are closed; use Custom for caller-defined behavior")
        super().__init_subclass__(**options)

    @property
    def destined(self):
        """whether this kind writes under a dest key."""
        return "dest" in type(self).__slots__

    def __replace__(self, **overrides):
        return type(self)(**{name: getattr(self, name) for name in type(self).__slots__} | overrides)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in type(self).__slots__)

    def __hash__(self):
        return hash((type(self),) + tuple(getattr(self, name) for name in type(self).__slots__))

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__name__,
            ", ".join("%s=%r" % (name, getattr(self, name)) for name in type(self).__slots__),
        )


class Help(Action):
    __slots__ = ()
    kind = ActionKind.HELP


class Version(Action):
    __slots__ = ()
    kind = ActionKind.VERSION


class Value(Action):
    __slots__ = ("dest", "arity")
    __match_args__ = ("dest", "arity")
    kind = ActionKind.VALUE

    def __init__(self, dest=Unset, arity=Unset):
        self.dest = _sanitize_dest(dest)
        self.arity = _sanitize_arity(arity)

    @property
    def variadic(self):
        """whether the arity is open-ended ('+' or '*')."""
        return isinstance(self.arity, str)

    @property
    def metavar(self):
        """placeholder used by the help output (DEST, DEST... or [DEST...])."""
        label = coalesce(self.dest, "value").upper()
        match self.arity:
            case "+":
                return "%s..." % label
            case "*":
                return "[%s...]" % label
            case _:
                return label


class Flag(Action):
    __slots__ = ("dest",)
    __match_args__ = ("dest",)
    kind = ActionKind.FLAG

    def __init__(self, dest=Unset):
        self.dest = _sanitize_dest(dest)


class Count(Action):
    __slots__ = ("dest",)
    __match_args__ = ("dest",)
    kind = ActionKind.COUNT

    def __init__(self, dest=Unset):
        self.dest = _sanitize_dest(dest)


class Constant(Action):
    __slots__ = ("value", "dest")
    __match_args__ = ("value", "dest")
    kind = ActionKind.CONSTANT

    def __init__(self, value, dest=Unset):
        if not isinstance(value, str | int | float | bool):
            raise TypeError("constant value must be a string, number or boolean")
        self.value = value
        self.dest = _sanitize_dest(dest)


class Custom(Action):
    __slots__ = ("callback",)
    __match_args__ = ("callback",)
    kind = ActionKind.CUSTOM

    def __init__(self, callback):
        if not callable(callback):
            raise TypeError("custom action callback must be callable")
        self.callback = callback


def bind(action, name, /):
    """
    return the action with its dest defaulted to `name`.

    the given action is never mutated: a copy is returned when a default has
    to be applied, the same object otherwise.
    """
    if not isinstance(action, Action):
        raise TypeError("action must be an Action instance")
    if action.destined and action.dest is Unset:
        return copy.replace(action, dest=name)
    return action


__all__ = (
    "ActionKind",
    "Action",
    "Help",
    "Version",
    "Value",
    "Flag",
    "Count",
    "Constant",
    "Custom",
    "bind",
)
