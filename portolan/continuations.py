"""
Continuation queue.

A continuation is a promise made earlier in the token stream: "the next
positional token is my value". They are honored in the order they were made,
so the queue is strictly FIFO.
"""
from collections import deque
from collections.abc import Callable, Iterable
from typing import NamedTuple


class Continuation(NamedTuple):
    """
    a pending request for the next positional value.

    - resolve(value): called with the token text, or with None when an
      optional continuation is drained.
    - reject(reason): called when a required continuation cannot be satisfied.
    - required: whether draining must reject instead of resolving to None.
    """
    resolve: Callable[[str | None], None]
    reject: Callable[[str], None]
    required: bool


class ContinuationQueue:
    __slots__ = ("_values",)

    def __init__(self, values=(), /):
        if not isinstance(values, Iterable):
            raise TypeError("ContinuationQueue() argument must be an iterable")
        self._values = deque(values)

    def push(self, continuation, /):
        self._values.append(continuation)

    def pop(self):
        """
        dequeue the front continuation; callers check emptiness first.
        """
        try:
            return self._values.popleft()
        except IndexError:
            raise IndexError("pop from an empty continuation queue") from None

    def popall(self):
        """
        remove and return every queued continuation in original order.
        """
        values = list(self._values)
        self._values.clear()
        return values

    @property
    def empty(self):
        return not self._values

    def __len__(self):
        return len(self._values)

    def __bool__(self):
        return bool(self._values)

    def __repr__(self):
        return "%s(%d pending)" % (type(self).__name__, len(self._values))


__all__ = (
    "Continuation",
    "ContinuationQueue",
)
