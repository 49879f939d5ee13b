"""
Handler registry.

Maps registration keys to handlers:
- keyword keys are stored in their dashed form ('--foo', '-f') so they never
  collide with positional slots;
- positional keys are integer slots starting at 0.

A short/long pair aliases one Handler instance. A variadic ('+'/'*')
positional must be the last positional: once registered, the next slot
becomes unreachable (math.inf) and later positional registrations are stored
but never reached while parsing.
"""
import math
from typing import NamedTuple

from .actions import Action, Value
from .tokens import TokenKind, keyname


class Handler(NamedTuple):
    action: Action
    positional: bool


class Entry(NamedTuple):
    """help entry for one registration; positional entries only carry a name."""
    short: str | None
    long: str | None
    descr: str
    action: Action
    name: str | None = None


class Registry:
    __slots__ = ("_handlers", "_slot", "_entries", "_positionals")

    def __init__(self):
        self._handlers = {}
        self._slot = 0
        self._entries = []
        self._positionals = []

    @property
    def slot(self):
        """next positional slot to be assigned (math.inf after a variadic positional)."""
        return self._slot

    @property
    def entries(self):
        """keyword help entries in registration order."""
        return tuple(self._entries)

    @property
    def positionals(self):
        """positional help entries in registration order."""
        return tuple(self._positionals)

    def lookup(self, key, /):
        """return the handler bound to key, or None when nothing is registered."""
        return self._handlers.get(key)

    def __contains__(self, key):
        return key in self._handlers

    def __len__(self):
        return len(self._handlers)

    def register(self, keys, handler, /, *, descr=""):
        """
        bind handler to keys.

        keys
        - str: '--long', '-s' or a bare positional name.
        - tuple[str, str]: a ('-s', '--long') pair aliasing the same handler.

        returns the list of keys that were already bound (and are now overwritten).
        """
        if not isinstance(handler, Handler):
            raise TypeError("register() handler must be a Handler")
        if not isinstance(descr, str):
            raise TypeError("register() descr must be a string")

        if handler.positional:
            if not isinstance(handler.action, Value):
                raise TypeError("positional arguments only accept value actions")
            slot = self._slot
            overwritten = [slot] if slot in self._handlers else []
            self._handlers[slot] = handler
            self._positionals.append(Entry(None, None, descr, handler.action, keys))
            # the variadic positional swallows every later positional token
            self._slot = slot + 1 if not handler.action.variadic else math.inf
            return overwritten

        short, long = self.split(keys)
        overwritten = [key for key in (short, long) if key is not None and key in self._handlers]
        for key in (short, long):
            if key is not None:
                self._handlers[key] = handler
        if overwritten:
            # drop help entries whose every key now belongs to the new handler
            self._entries = [
                entry for entry in self._entries
                if not all(key is None or key in (short, long) for key in (entry.short, entry.long))
            ]
        self._entries.append(Entry(short, long, descr, handler.action))
        return overwritten

    @staticmethod
    def split(keys, /):
        """
        validate keyword keys and return them as (short, long).

        a single short key yields (short, None) and a single long key (None, long).
        """
        if isinstance(keys, str):
            match keyname(keys):
                case (name, TokenKind.SHORT):
                    Registry._check_short(keys, name)
                    return keys, None
                case (name, TokenKind.LONG):
                    if not name:
                        raise ValueError("long keys need a name after '--'")
                    return None, keys
                case _:
                    raise ValueError("%r is not a keyword key" % keys)

        if not isinstance(keys, tuple) or len(keys) != 2 or not all(isinstance(key, str) for key in keys):
            raise TypeError("keys must be a string or a (short, long) pair of strings")

        short, long = keys
        if keyname(short)[1] is not TokenKind.SHORT or keyname(long)[1] is not TokenKind.LONG:
            raise ValueError("key pairs must be given as ('-s', '--long')")
        Registry._check_short(short, keyname(short)[0])
        if not keyname(long)[0]:
            raise ValueError("long keys need a name after '--'")
        return short, long

    @staticmethod
    def _check_short(key, name):
        if len(name) != 1:
            raise ValueError("short keys are a single dash and a single character: %r" % key)


__all__ = (
    "Handler",
    "Entry",
    "Registry",
)

