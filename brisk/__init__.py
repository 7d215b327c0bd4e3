# Brisk language package
# This package provides a lexer, two parser front ends and an interpreter
# for the Brisk scripting language.
from .errors import BriskError, LexError, ParseError, EvalError
from .interpreter import Interpreter, parse_source, run_file, run_program
from .parser import parse_program

__all__ = [
    'run_program',
    'run_file',
    'parse_program',
    'parse_source',
    'Interpreter',
    'BriskError',
    'LexError',
    'ParseError',
    'EvalError',
]
