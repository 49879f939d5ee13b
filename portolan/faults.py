"""
Portolan faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- ParserException / ParserWarning: base types that carry message + options and
  know how to render themselves through rich.
- trigger(): the single emission point for every fault; the error strategy in
  the options decides whether an exception is raised or rendered and the
  process terminated.

Strategies
- "throw": the exception is raised synchronously; no partial result escapes.
- "exit": the exception is rendered on the terminal's stderr console and the
  terminal exits with status 1.

Host customization
- __codes__ in __main__ remaps numeric codes to custom labels.
- __styles__ in __main__ overrides palette entries.
- __prog__ in __main__ overrides the program name in headers.
"""
import copy
import inspect
import warnings
from collections import defaultdict
from enum import IntEnum, StrEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset, UnsetType


class Strategy(StrEnum):
    """
    error strategy of a parser.

    - THROW: raise the fault to the caller.
    - EXIT: print the fault and terminate with a failure status.
    """
    THROW = "throw"
    EXIT = "exit"


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - tokens (1111x): MALFORMED_TOKEN, UNKNOWN_SWITCH
    - positionals (1112x): MISSING_HANDLER, UNEXPECTED_POSITIONAL
    - values (1113x): MISSING_VALUE
    - warnings (12xxx): REDEFINED_HANDLER
    """
    # --- token errors ---
    MALFORMED_TOKEN         = 11111
    UNKNOWN_SWITCH          = 11112

    # --- positional errors ---
    MISSING_HANDLER         = 11121
    UNEXPECTED_POSITIONAL   = 11122

    # --- value errors ---
    MISSING_VALUE           = 11131

    # --- warnings ---
    REDEFINED_HANDLER       = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _render(fault, palette):
    main = __import__("__main__")
    colorful = fault.options.get("colorful", True)
    styles = _styles(palette)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        return Text(str(fragment), styler(style))

    prog = getattr(main, "__prog__", fault.options.get("prog") or "portolan")
    code = fault.options.get("code")

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(code.normalize() if code is not None else "", "code"),
        " | ",
        text(str(fault.options.get("title", "")).title(), "title"),
        " ]"
    )

    # highlight the offending token inside the message
    message = text(fault.message, "message")
    if token := fault.options.get("token"):
        message.highlight_words([str(token)], styler("token"))

    renders = [header, message]
    if hint := fault.options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
    return Group(*renders)


class ParserException(SyntaxError):
    """
    base of every parsing fault.

    it derives from SyntaxError: a malformed command line is a syntax error of
    the command language. `message` is the plain text; `options` is a read-only
    mapping of rendering/runtime context (title, code, hint, token, strategy,
    terminal, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        super().__init__(message if message is not Unset else "")
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "token": "bold bright_red",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self):
        if Strategy(self.options.get("strategy", Strategy.THROW)) is Strategy.THROW:
            raise self from None
        terminal = self.options["terminal"]
        terminal.fail(self)
        terminal.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedTokenError(ParserException): ...
class UnknownSwitchError(ParserException): ...
class MissingHandlerError(ParserException): ...
class UnexpectedPositionalError(ParserException): ...
class MissingValueError(ParserException): ...


class ParserWarning(Warning):
    """
    base of non-fatal faults; emitted through the warnings module.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        super().__init__(message if message is not Unset else "")
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "token": "bold #FFB400",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self):
        warnings.warn(self, stacklevel=len(inspect.stack()))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RedefinedHandlerWarning(ParserWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace before triggering.
    - under the "throw" strategy exceptions are raised; under "exit" they are
      rendered by options["terminal"] which then exits with status 1.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "Strategy",
    "FaultCode",
    "ParserException",
    "MalformedTokenError",
    "UnknownSwitchError",
    "MissingHandlerError",
    "UnexpectedPositionalError",
    "MissingValueError",
    "ParserWarning",
    "RedefinedHandlerWarning",
    "trigger",
)
