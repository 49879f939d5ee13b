"""
Action dispatcher.

One shared dispatcher executes every action kind against the result
accumulator and the continuation queue. Handlers in the registry only store
the (bound) action spec; dispatching goes through Dispatcher.dispatch().

Value arity
- exactly one: a value already carried by the token is stored immediately;
  otherwise a required continuation stores the next positional token.
- exactly n: values are appended to a list; a required continuation is
  re-enqueued one at a time until n values were collected.
- '+': the first value is required, then an optional continuation re-enqueues
  itself after every value until input ends or a keyword token drains it.
- '*': like '+' but the first continuation is optional as well.

The positional cursor advances by one when a positional handler with a fixed
arity (one or n) is dispatched; variadic positionals never advance it and
set `collecting` instead.
"""
from .actions import *
from .continuations import Continuation
from .faults import FaultCode, MissingValueError
from .utils import Unset, rename


class Dispatcher:
    __slots__ = ("_continuations", "_onhelp", "_onversion", "_onerror", "cursor", "collecting")

    def __init__(self, continuations, /, *, onhelp, onversion, onerror):
        if not all(map(callable, (onhelp, onversion, onerror))):
            raise TypeError("onhelp, onversion and onerror must be callable")
        self._continuations = continuations
        self._onhelp = onhelp
        self._onversion = onversion
        self._onerror = onerror
        self.cursor = 0
        self.collecting = False

    def reset(self):
        self.cursor = 0
        self.collecting = False

    def dispatch(self, action, positional, value, result, /):
        """
        execute `action` for one occurrence.

        parameters
        - action: a bound Action (dest already defaulted).
        - positional: whether the handler occupies a positional slot.
        - value: the raw value carried by the token, or None.
        - result: the live result accumulator (mutated in place).
        """
        if action.destined and action.dest is Unset:
            raise ValueError("%r has no dest bound" % action)

        match action:
            case Help():
                self._onhelp()
            case Version():
                self._onversion()
            case Flag(dest):
                result[dest] = True
            case Count(dest):
                result[dest] = result.get(dest, 0) + 1
            case Constant(constant, dest):
                result[dest] = constant
            case Custom(callback):
                callback(value, result)
            case Value(dest, int(count)):
                self._fixed(dest, count, value, result)
                if positional:
                    self.cursor += 1
            case Value(dest, "+" | "*" as arity):
                self._variadic(dest, value, result, required=arity == "+")
                if positional:
                    self.collecting = True
            case Value(dest):
                self._single(dest, value, result)
                if positional:
                    self.cursor += 1
            case _:
                raise RuntimeError("unexpected action %r" % action)

    def _single(self, dest, value, result):
        if value is not None:
            result[dest] = value
            return

        @rename("resolve")
        def resolve(value):
            result[dest] = value

        self._continuations.push(Continuation(resolve, self._rejecter(dest), True))

    def _fixed(self, dest, count, value, result):
        remaining = count

        if value is not None:
            result.setdefault(dest, []).append(value)
            remaining -= 1

        @rename("resolve")
        def resolve(value):
            nonlocal remaining
            result.setdefault(dest, []).append(value)
            remaining -= 1
            if remaining > 0:
                self._continuations.push(continuation)

        continuation = Continuation(resolve, self._rejecter(dest), True)

        if remaining > 0:
            self._continuations.push(continuation)

    def _variadic(self, dest, value, result, *, required):
        @rename("collect")
        def collect(value):
            if value is not None:
                result.setdefault(dest, []).append(value)
                self._continuations.push(follow)

        follow = Continuation(collect, self._rejecter(dest), False)

        if value is not None:
            result.setdefault(dest, []).append(value)
            self._continuations.push(follow)
        elif required:
            @rename("resolve")
            def first(value):
                result.setdefault(dest, []).append(value)
                self._continuations.push(follow)

            self._continuations.push(Continuation(first, self._rejecter(dest), True))
        else:
            self._continuations.push(follow)

    def _rejecter(self, dest):
        @rename("reject")
        def reject(reason, /, **context):
            self._onerror(MissingValueError(
                reason,
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint="pass the value of %r right after its flag or positional slot" % dest,
                dest=dest,
                **context
            ))

        return reject


__all__ = (
    "Dispatcher",
)
