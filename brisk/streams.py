"""Line-oriented input and output streams used by the interpreter.

The interpreter reads one line per `input` statement and writes one line
per `print` statement. It only relies on two methods:

* ``read_line()`` returning the next line without its line terminator,
  or ``None`` once the input is exhausted;
* ``write_line(text)`` appending one line of output.

`ConsoleInput`/`ConsoleOutput` are the defaults; `LineBuffer` keeps both
sides in memory, which is handy when embedding the interpreter.
"""

import sys
from typing import Iterable, List, Optional, TextIO


def _strip_newline(line: str) -> str:
    if line.endswith('\r\n'):
        return line[:-2]
    if line.endswith('\n'):
        return line[:-1]
    return line


class ConsoleInput:
    """Reads lines from a text stream (standard input by default)."""
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def read_line(self) -> Optional[str]:
        stream = self.stream if self.stream is not None else sys.stdin
        line = stream.readline()
        if line == '':
            return None
        return _strip_newline(line)


class ConsoleOutput:
    """Writes lines to a text stream (standard output by default)."""
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def write_line(self, text: str) -> None:
        # Resolve sys.stdout lazily so redirections made after construction apply.
        stream = self.stream if self.stream is not None else sys.stdout
        print(text, file=stream, flush=True)


class LineBuffer:
    """In-memory input lines and captured output lines."""
    def __init__(self, lines: Iterable[str] = ()):
        self.pending: List[str] = [_strip_newline(line) for line in lines]
        self.output: List[str] = []

    def read_line(self) -> Optional[str]:
        if not self.pending:
            return None
        return self.pending.pop(0)

    def write_line(self, text: str) -> None:
        self.output.append(text)

    def feed(self, *lines: str) -> None:
        self.pending.extend(_strip_newline(line) for line in lines)
