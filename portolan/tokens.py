"""
Argument classifier.

A pure, stateless split of raw command-line tokens:

    >>> classify("--foo=bar")
    Token(kind=<TokenKind.LONG: 'long'>, name='foo', value='bar')
    >>> classify("-v")
    Token(kind=<TokenKind.SHORT: 'short'>, name='v', value=None)
    >>> classify("file.txt")
    Token(kind=<TokenKind.POSITIONAL: 'positional'>, name=None, value='file.txt')

Tokens with three or more leading dashes are rejected with MalformedTokenError.
"""
from enum import StrEnum
from typing import NamedTuple

from .faults import FaultCode, MalformedTokenError


class TokenKind(StrEnum):
    POSITIONAL = "positional"
    SHORT = "short"
    LONG = "long"


class Token(NamedTuple):
    kind: TokenKind
    name: str | None
    value: str | None


def kindof(token, /):
    """
    find out which kind of token the given string is.

    raises MalformedTokenError for '---' prefixes.
    """
    if not isinstance(token, str):
        raise TypeError("kindof() argument must be a string")
    if token.startswith("---"):
        raise MalformedTokenError(
            "arguments may not start with ---: %r" % token,
            title="malformed token",
            code=FaultCode.MALFORMED_TOKEN,
            hint="use a single dash for short flags and two dashes for long ones",
            token=token,
        )
    if token.startswith("--"):
        return TokenKind.LONG
    if token.startswith("-"):
        return TokenKind.SHORT
    return TokenKind.POSITIONAL


def classify(token, /):
    """
    split a raw token into (kind, name, inline value).

    - positional: name is None, value is the whole token.
    - short/long: name is the text between the dash prefix and the first '=',
      value is the text after it (possibly empty) or None when there is no '='.
    """
    kind = kindof(token)
    if kind is TokenKind.POSITIONAL:
        return Token(kind, None, token)

    body = token[2:] if kind is TokenKind.LONG else token[1:]
    name, sign, value = body.partition("=")
    return Token(kind, name, value if sign else None)


def keyname(key, /):
    """
    get the name and kind of a registration key ('--foo', '-f' or 'foo').

    registration keys never carry an inline value.
    """
    kind = kindof(key)
    if "=" in key and kind is not TokenKind.POSITIONAL:
        raise ValueError("registration keys cannot carry an inline value: %r" % key)
    match kind:
        case TokenKind.LONG:
            return key[2:], kind
        case TokenKind.SHORT:
            return key[1:], kind
        case _:
            return key, kind


__all__ = (
    "TokenKind",
    "Token",
    "kindof",
    "classify",
    "keyname",
)
