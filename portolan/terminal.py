"""
Terminal collaborator.

Everything the parser does to the outside world goes through a Terminal:
- argv(): the default argument vector (sys.argv without the program path);
- emit(text): plain output for help and version text;
- fail(fault): rich rendering of a fault on stderr;
- exit(status): process termination.

Tests inject a Terminal backed by in-memory consoles, e.g.

    >>> import io
    >>> from rich.console import Console
    >>> terminal = Terminal(stdout=Console(file=io.StringIO()), stderr=Console(file=io.StringIO()))
"""
import sys

from rich.console import Console

from .utils import Unset


class Terminal:
    __slots__ = ("_stdout", "_stderr")

    def __init__(self, *, stdout=Unset, stderr=Unset):
        if stdout is not Unset and not isinstance(stdout, Console):
            raise TypeError("stdout must be a rich Console")
        if stderr is not Unset and not isinstance(stderr, Console):
            raise TypeError("stderr must be a rich Console")
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdout(self):
        # lazily bound to the current sys.stdout
        if self._stdout is Unset:
            self._stdout = Console()
        return self._stdout

    @property
    def stderr(self):
        if self._stderr is Unset:
            self._stderr = Console(stderr=True)
        return self._stderr

    def argv(self):
        return sys.argv[1:]

    def emit(self, text, /):
        self.stdout.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)

    def fail(self, fault, /):
        self.stderr.print(fault)

    def exit(self, status, /):
        sys.exit(status)


__all__ = (
    "Terminal",
)
