r"""
Portolan parser.

Overview
- Parser: declarative registration of keyword/positional handlers and a single
  left-to-right pass over an argument vector, producing a plain dict.

Registration
- handle("--foo", descr=..., action=Value())           long keyword
- handle("-v", descr=..., action=Count())              short keyword
- handle(("-v", "--verbose"), descr=..., action=...)    short/long aliases
- handle("src", descr=..., action=Value())              positional (value actions only)

  dest defaults to the declared name (the long name for pairs). Registering a
  key twice overwrites the earlier handler and emits RedefinedHandlerWarning.

Parsing (per token)
- positional: the oldest pending continuation takes it; otherwise the
  positional handler at the cursor does. An absent handler is a fault
  (MissingHandlerError at cursor 0, UnexpectedPositionalError after).
- short: pending continuations are drained first, then every letter of the
  cluster is dispatched ('-vvv' is three '-v'); only the last letter receives
  the inline value.
- long: pending continuations are drained first, then the handler is
  dispatched with the inline value (if any).
- end of input: the queue is drained one final time, and a '+' positional
  whose slot no token reached fails with MissingValueError.

A keyword token that triggers a drain is still dispatched once the drain
succeeds; historically the drain swallowed it, so '--maybe --strict' with a
'*' arity '--maybe' lost '--strict'. It is no longer dropped.

Draining resolves optional continuations with None and rejects required ones
(MissingValueError).

Quick example:
    >>> from portolan import Parser, Value, Count
    >>> parser = Parser(version="0.1.0")
    >>> parser.handle("--foo", descr="store a string value", action=Value())
    >>> parser.handle(("-b", "--bar"), descr="count occurrences", action=Count())
    >>> parser.parse(["--foo=value", "-bb"])
    {'foo': 'value', 'bar': 2}
"""
import os
import sys

from .actions import *
from .continuations import ContinuationQueue
from .dispatch import Dispatcher
from .faults import *
from .registry import Handler, Registry
from .terminal import Terminal
from .tokens import TokenKind, classify, keyname
from .utils import *


class Parser:
    """
    command-line parser built from registered handlers.

    options (keyword-only)
    - prog: program name for the synthesized usage line and fault headers
      (defaults to the basename of sys.argv[0]).
    - usage: explicit usage line; synthesized from handlers when omitted.
    - descr: description paragraph of the help output.
    - padding: column where help descriptions start (default 24).
    - version: version string; registers '--version' when given.
    - help: register '-h/--help' (default True).
    - strategy: "throw" (raise faults) or "exit" (print and exit with 1).
    - colorful: style faults rendered under the "exit" strategy.
    - terminal: output/exit collaborator (see portolan.terminal).

    a parser instance is not re-entrant: parse() resets and reuses its cursor
    and continuation queue.
    """
    prog = mirror("prog")
    descr = mirror("descr")
    padding = mirror("padding")
    version = mirror("version")
    help = mirror("help")
    strategy = mirror("strategy")
    colorful = mirror("colorful")
    terminal = mirror("terminal")

    def __init__(
            self,
            *,
            prog=Unset,
            usage=Unset,
            descr=Unset,
            padding=24,
            version=Unset,
            help=True,
            strategy=Strategy.THROW,
            colorful=True,
            terminal=Unset,
    ):
        for name, value in (("prog", prog), ("usage", usage), ("descr", descr), ("version", version)):
            if value is not Unset and not isinstance(value, str):
                raise TypeError("%s must be a string" % name)
        if isinstance(padding, bool) or not isinstance(padding, int):
            raise TypeError("padding must be an integer")
        if padding < 0:
            raise ValueError("padding must be a non-negative integer")
        if not isinstance(help, bool):
            raise TypeError("help must be a boolean")
        if not isinstance(colorful, bool):
            raise TypeError("colorful must be a boolean")
        if terminal is not Unset and not isinstance(terminal, Terminal):
            raise TypeError("terminal must be a Terminal")
        try:
            strategy = Strategy(strategy)
        except ValueError:
            raise ValueError("strategy must be one of %s" % ", ".join(map(repr, map(str, Strategy)))) from None

        self._prog = coalesce(prog, os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "portolan")
        self._usage = usage
        self._descr = coalesce(descr)
        self._padding = padding
        self._version = coalesce(version)
        self._help = help
        self._strategy = strategy
        self._colorful = colorful
        self._terminal = coalesce(terminal, Terminal())

        self._registry = Registry()
        self._continuations = ContinuationQueue()
        self._dispatcher = Dispatcher(
            self._continuations,
            onhelp=self._helper,
            onversion=self._versioner,
            onerror=self.trigger,
        )

        if self._help:
            self.handle(("-h", "--help"), descr="display this help message, then exit", action=Help())

        if self._version is not None:
            self.handle("--version", descr="display this app's version, then exit", action=Version())

    @property
    def usage(self):
        """explicit usage line, or one synthesized from the registered handlers."""
        if self._usage is not Unset:
            return self._usage
        segments = [self._prog]
        if self._registry.entries:
            segments.append("[options]")
        for entry in self._registry.positionals:
            segments.append(entry.action.metavar)
        return " ".join(segments)

    @property
    def registry(self):
        return self._registry

    def handle(self, key, /, *, descr, action):
        """
        register one handler.

        parameters
        - key: '--long', '-s', ('-s', '--long') or a bare positional name.
        - descr: help text.
        - action: an Action instance (Help, Version, Value, Flag, Count, Constant, Custom).
        """
        if not isinstance(action, Action):
            raise TypeError("handle() action must be an Action instance")
        if not isinstance(descr, str):
            raise TypeError("handle() descr must be a string")

        if isinstance(key, tuple):
            _, long = Registry.split(key)
            name, _ = keyname(long)
            positional = False
        elif isinstance(key, str):
            name, kind = keyname(key)
            if not name:
                raise ValueError("handle() key must not be empty")
            positional = kind is TokenKind.POSITIONAL
        else:
            raise TypeError("handle() key must be a string or a (short, long) pair")

        handler = Handler(bind(action, name), positional)
        for overwritten in self._registry.register(key, handler, descr=descr):
            trigger(RedefinedHandlerWarning(
                "handler %r was registered again and replaces the previous one" % (overwritten,),
                title="redefined handler",
                code=FaultCode.REDEFINED_HANDLER,
                hint="register each key once",
                token=str(overwritten),
                prog=self._prog,
            ))

    def parse(self, argv=Unset, /):
        """
        parse argv (default: the terminal's argument vector) into a dict.

        faults are surfaced through trigger(): raised under the "throw"
        strategy, printed and followed by exit(1) under "exit". help and
        version actions exit with status 0 instead of returning.
        """
        if argv is Unset:
            argv = self._terminal.argv()
        if isinstance(argv, str):
            raise TypeError("parse() argument must be an iterable of strings")
        argv = list(argv)
        if not all(isinstance(arg, str) for arg in argv):
            raise TypeError("parse() argument must be an iterable of strings")

        self._dispatcher.reset()
        self._continuations.popall()

        result = {}

        for arg in argv:
            try:
                token = classify(arg)
            except MalformedTokenError as fault:
                self.trigger(fault)
                continue

            match token.kind:
                case TokenKind.POSITIONAL:
                    self._parse_positional(arg, token.value, result)
                case TokenKind.SHORT:
                    self._parse_short(arg, token.name, token.value, result)
                case TokenKind.LONG:
                    self._parse_long(arg, token.name, token.value, result)

        self.drain("expected positional argument; encountered end of arguments list")
        self._unreached()

        return result

    def drain(self, reason, /, **context):
        """
        empty the continuation queue: required continuations are rejected
        with `reason`, optional ones resolve to None.
        """
        for continuation in self._continuations.popall():
            if continuation.required:
                continuation.reject(reason, **context)
            else:
                continuation.resolve(None)

    def trigger(self, fault, /, **options):
        """
        surface a fault with this parser's strategy and terminal.
        """
        trigger(
            fault,
            **options,
            prog=self._prog,
            strategy=self._strategy,
            terminal=self._terminal,
            colorful=self._colorful,
        )

    def helptext(self):
        """
        compose the help output.

        layout
        - "usage: <usage>" and a blank line
        - the description paragraph (when set) and a blank line
        - "positional arguments:" lines (when positionals were registered)
        - "optional arguments:" lines in registration order
        """
        lines = ["usage: %s" % self.usage, ""]

        if self._descr:
            lines.extend((self._descr, ""))

        if positionals := self._registry.positionals:
            lines.append("positional arguments:")
            for entry in positionals:
                lines.append(self._format("  %s" % entry.action.metavar, entry.descr))
            lines.append("")

        lines.append("optional arguments:")
        for entry in self._registry.entries:
            if entry.short is not None and entry.long is not None:
                head = "  %s, %s" % (entry.short, entry.long)
            elif entry.short is not None:
                head = "  %s" % entry.short
            else:
                head = "      %s" % entry.long
            if isinstance(entry.action, Value):
                head = "%s %s" % (head, entry.action.metavar)
            lines.append(self._format(head, entry.descr))

        return "\n".join(lines)

    def _format(self, head, descr):
        if not descr:
            return head
        if len(head) >= self._padding:
            # hanging indent: description on its own line at the padding column
            return "%s\n%s%s" % (head, " " * self._padding, descr)
        return head.ljust(self._padding) + descr

    def _helper(self):
        self._terminal.emit(self.helptext())
        self._terminal.exit(0)

    def _versioner(self):
        self._terminal.emit(self._version)
        self._terminal.exit(0)

    def _unreached(self):
        # a '+' positional owes a value even when no token ever reached its slot
        if self._dispatcher.collecting:
            return
        match self._registry.lookup(self._dispatcher.cursor):
            case Handler(Value(dest, "+") as action, True):
                self.trigger(MissingValueError(
                    "expected positional argument; encountered end of arguments list",
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    hint="pass at least one value for %s" % action.metavar,
                    dest=dest,
                ))

    def _parse_positional(self, arg, value, result):
        if self._continuations:
            self._continuations.pop().resolve(value)
            return

        cursor = self._dispatcher.cursor
        handler = self._registry.lookup(cursor)

        if handler is None:
            if cursor == 0:
                self.trigger(MissingHandlerError(
                    "no positional argument handlers were registered: %s" % arg,
                    title="unexpected positional",
                    code=FaultCode.MISSING_HANDLER,
                    hint="this program takes no positional arguments; run '%s --help' to see its usage" % self._prog,
                    token=arg,
                ))
            else:
                self.trigger(UnexpectedPositionalError(
                    "encountered extraneous positional argument: %s" % arg,
                    title="extraneous positional",
                    code=FaultCode.UNEXPECTED_POSITIONAL,
                    hint="remove this extra value or run '%s --help' to see the expected usage" % self._prog,
                    token=arg,
                    index=cursor,
                ))
            return

        self._dispatcher.dispatch(handler.action, handler.positional, value, result)

    def _parse_short(self, arg, name, value, result):
        self.drain("expected value argument; encountered keyword argument: %s" % arg, token=arg)

        if not name:
            return self._unknown(arg, arg)

        for index, letter in enumerate(name):
            key = "-" + letter
            handler = self._registry.lookup(key)
            if handler is None:
                return self._unknown(arg, key)
            # clustered letters never take a value; the last one gets the inline value
            self._dispatcher.dispatch(
                handler.action,
                handler.positional,
                value if index == len(name) - 1 else None,
                result,
            )

    def _parse_long(self, arg, name, value, result):
        self.drain("expected value argument; encountered keyword argument: %s" % arg, token=arg)

        key = "--" + name
        handler = self._registry.lookup(key)
        if handler is None:
            return self._unknown(arg, key)
        self._dispatcher.dispatch(handler.action, handler.positional, value, result)

    def _unknown(self, arg, key):
        self.trigger(UnknownSwitchError(
            "unrecognized keyword argument encountered: %s" % arg,
            title="unknown option or flag",
            code=FaultCode.UNKNOWN_SWITCH,
            hint="run '%s --help' to see all available options" % self._prog,
            token=arg,
            key=key,
        ))


__all__ = (
    "Parser",
)
