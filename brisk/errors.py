"""Error types for the Brisk toolchain.

Every failure raised by the lexer, the parser or the interpreter derives
from :class:`BriskError` and carries an :class:`ErrorVal` describing the
phase it came from, the error kind and, where known, the source position.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


PHASE_TITLES = {
    'lex': 'Lex',
    'parse': 'Parse',
    'runtime': 'Runtime',
}


@dataclass
class ErrorVal:
    """Describes a Brisk error.

    `phase` is one of 'lex', 'parse' or 'runtime'. `name` is the error
    kind (e.g. 'UndefinedVariable') and `message` a human readable
    explanation.
    """
    phase: str
    name: str
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        text = f"{PHASE_TITLES.get(self.phase, self.phase)} error: {self.name}: {self.message}"
        if self.line is not None:
            text += f" at {self.line}:{self.column}"
        return text


class BriskError(Exception):
    """Base exception for all Brisk errors."""
    phase = 'runtime'
    kind = 'Error'

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None,
                 name: Optional[str] = None):
        self.err = ErrorVal(self.phase, name or self.kind, message, line, column)
        super().__init__(str(self.err))

    def __str__(self) -> str:
        return str(self.err)

    @property
    def message(self) -> str:
        return self.err.message

    @property
    def line(self) -> Optional[int]:
        return self.err.line

    @property
    def column(self) -> Optional[int]:
        return self.err.column


class LexError(BriskError):
    phase = 'lex'
    kind = 'UnexpectedCharacter'


class ParseError(BriskError):
    phase = 'parse'
    kind = 'UnexpectedToken'


class EvalError(BriskError):
    """Errors raised while executing a program."""
    phase = 'runtime'


class UndefinedVariable(EvalError):
    kind = 'UndefinedVariable'


class OperandTypeError(EvalError):
    kind = 'TypeError'


class DivisionByZero(EvalError):
    kind = 'DivisionByZero'


class UnexpectedEndOfInput(EvalError):
    kind = 'UnexpectedEndOfInput'


class IterationLimitExceeded(EvalError):
    kind = 'IterationLimit'


class BreakSignal(Exception):
    """Internal exception used to leave the innermost while loop."""
    def __init__(self):
        super().__init__('break')
