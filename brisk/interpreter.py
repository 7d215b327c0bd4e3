"""Interpreter for the Brisk language.

This module walks the AST produced by either front end and executes it
against a single global :class:`~brisk.environment.Environment`. Output
is written eagerly, one line per `print`, so anything printed before a
runtime error stays visible. The first error aborts the run.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional
import math
import pathlib

from .ast import (
    Program, Block, PrintStmt, InputStmt, Assign, IfStmt, WhileStmt, BreakStmt,
    ExprStmt, NumberLiteral, StringLiteral, BoolLiteral, Ident, BinaryOp, UnaryOp,
    CompoundAssign, Node,
)
from .environment import Environment
from .errors import (
    BriskError, EvalError, BreakSignal, UndefinedVariable, OperandTypeError,
    DivisionByZero, UnexpectedEndOfInput, IterationLimitExceeded,
)
from .grammar import parse_with_grammar
from .parser import parse_program
from .streams import ConsoleInput, ConsoleOutput, LineBuffer
from .types import is_bool, is_number, is_string, to_string, type_name, values_equal


FRONT_ENDS: Dict[str, Callable[[str], Program]] = {
    'descent': parse_program,
    'grammar': parse_with_grammar,
}


def parse_source(source: str, parser: str = 'descent') -> Program:
    """Parse source text with the named front end ('descent' or 'grammar')."""
    try:
        front_end = FRONT_ENDS[parser]
    except KeyError:
        raise ValueError(f"unknown parser {parser!r}; expected one of {sorted(FRONT_ENDS)}") from None
    return front_end(source)


class Interpreter:
    """Core interpreter that executes Brisk AST.

    Args:
        input_stream: object with ``read_line()``; defaults to standard input.
        output_stream: object with ``write_line(text)``; defaults to standard output.
        debug_level: trace verbosity; 0 disables tracing.
        debug_file: file the trace is written to when `debug_level` > 0.
        max_iterations: optional cap on the total number of while-loop
            iterations. The language itself has no such limit; this exists
            for harnesses that must not hang on a runaway script.
    """
    def __init__(self, input_stream=None, output_stream=None, debug_level: int = 0,
                 debug_file: str = 'debug.txt', max_iterations: Optional[int] = None):
        self.env = Environment()
        self.input_stream = input_stream if input_stream is not None else ConsoleInput()
        self.output_stream = output_stream if output_stream is not None else ConsoleOutput()
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = None
        self.max_iterations = max_iterations
        self.iterations = 0

    def debug(self, msg: str):
        if self.debug_level > 0 and self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: Program) -> None:
        """Execute `program` against a fresh environment.

        With tracing enabled, each run rewrites `debug_file` with its own trace.
        """
        self.env = Environment()
        self.iterations = 0
        if self.debug_level > 0 and self.debug_fp is None:
            self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
        self.debug(f"run: {len(program.body)} top-level statements")
        try:
            try:
                self.execute_block(program.body)
            except BreakSignal:
                # only reachable with hand-built or deserialized trees
                raise EvalError("'break' outside of a while loop", name='BreakOutsideLoop') from None
            except RecursionError:
                raise EvalError('expression nested too deeply', name='NestingTooDeep') from None
        except BriskError as e:
            self.debug(f"aborted: {e}")
            raise
        else:
            self.debug(f"finished: {len(self.env)} variables bound")
        finally:
            self.close()

    def execute_block(self, statements: Iterable[Node]) -> None:
        for stmt in statements:
            self.execute(stmt)

    def execute(self, node: Node) -> None:
        if self.debug_level >= 4:
            self.debug(f"execute {type(node).__name__} at line {getattr(node, 'line', None)}")
        try:
            self.execute_statement(node)
        except EvalError as e:
            # attach the position of the innermost statement that has one
            line = getattr(node, 'line', None)
            if e.err.line is None and line is not None:
                e.err.line = line
                e.err.column = node.column
            raise

    def execute_statement(self, node: Node) -> None:
        if isinstance(node, PrintStmt):
            text = to_string(self.evaluate(node.expr))
            if self.debug_level >= 2:
                self.debug(f"print {text!r}")
            self.output_stream.write_line(text)
            return
        if isinstance(node, InputStmt):
            line = self.input_stream.read_line()
            if line is None:
                raise UnexpectedEndOfInput(f'input ended before a line could be read into {node.name}')
            self.env.set(node.name, line)
            if self.debug_level >= 2:
                self.debug(f"input {node.name} = {line!r}")
            return
        if isinstance(node, Assign):
            value = self.evaluate(node.value)
            self.env.set(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name}: {type_name(value)} = {to_string(value)!r}")
            return
        if isinstance(node, IfStmt):
            cond = self.evaluate_condition(node.condition, 'if')
            if cond:
                self.execute_block(node.then_block.statements)
            elif node.else_block is not None:
                self.execute_block(node.else_block.statements)
            return
        if isinstance(node, WhileStmt):
            while self.evaluate_condition(node.condition, 'while'):
                self.count_iteration()
                try:
                    self.execute_block(node.body.statements)
                except BreakSignal:
                    break
            return
        if isinstance(node, BreakStmt):
            raise BreakSignal()
        if isinstance(node, ExprStmt):
            self.evaluate(node.expr)
            return
        if isinstance(node, Block):
            # blocks share the global environment
            self.execute_block(node.statements)
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def evaluate_condition(self, node: Node, construct: str) -> bool:
        cond = self.evaluate(node)
        if self.debug_level >= 3:
            self.debug(f"{construct} condition -> {to_string(cond)}")
        if not is_bool(cond):
            raise OperandTypeError(f'{construct} condition must be Bool, got {type_name(cond)}')
        return cond

    def count_iteration(self):
        self.iterations += 1
        if self.max_iterations is not None and self.iterations > self.max_iterations:
            raise IterationLimitExceeded(f'more than {self.max_iterations} loop iterations')

    def evaluate(self, node: Node) -> Any:
        if isinstance(node, (NumberLiteral, StringLiteral, BoolLiteral)):
            return node.value
        if isinstance(node, Ident):
            if node.name not in self.env:
                raise UndefinedVariable(f'undefined variable {node.name}', node.line, node.column)
            return self.env.get(node.name)
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.apply_binary_op(node.op, left, right)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand)
            return self.apply_unary_op(node.op, operand)
        if isinstance(node, CompoundAssign):
            if node.name not in self.env:
                raise UndefinedVariable(f'undefined variable {node.name}', node.line, node.column)
            current = self.env.get(node.name)
            value = self.apply_binary_op(node.op, current, self.evaluate(node.value))
            self.env.set(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name} {node.op}= -> {to_string(value)!r}")
            return value
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def apply_unary_op(self, op: str, a: Any) -> Any:
        if op == '-':
            if is_number(a):
                return -a
            raise OperandTypeError(f'unsupported operand type for unary -: {type_name(a)}')
        if op == '!':
            if is_bool(a):
                return not a
            raise OperandTypeError(f'unsupported operand type for !: {type_name(a)}')
        raise OperandTypeError(f'unknown operator {op}')

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op == '+':
            if is_number(a) and is_number(b):
                return a + b
            # concatenation: strings with strings or numbers, in either order
            if (is_string(a) and (is_string(b) or is_number(b))) or (is_number(a) and is_string(b)):
                return to_string(a) + to_string(b)
            raise self.operand_error(op, a, b)
        if op in ('-', '*', '/', '%'):
            if not (is_number(a) and is_number(b)):
                raise self.operand_error(op, a, b)
            if op == '-':
                return a - b
            if op == '*':
                return a * b
            if b == 0.0:
                raise DivisionByZero('division by zero' if op == '/' else 'modulo by zero')
            if op == '/':
                return a / b
            # remainder truncates toward zero, like C's fmod
            return math.fmod(a, b)
        if op == '^':
            if not (is_number(a) and is_number(b)):
                raise self.operand_error(op, a, b)
            return self.power(a, b)
        if op in ('==', '!='):
            eq = values_equal(a, b)
            return eq if op == '==' else not eq
        if op in ('<', '<=', '>', '>='):
            if not (is_number(a) and is_number(b)):
                raise self.operand_error(op, a, b)
            if op == '<':
                return a < b
            if op == '<=':
                return a <= b
            if op == '>':
                return a > b
            return a >= b
        if op in ('&&', '||'):
            if not (is_bool(a) and is_bool(b)):
                raise self.operand_error(op, a, b)
            return (a and b) if op == '&&' else (a or b)
        raise OperandTypeError(f'unknown operator {op}')

    @staticmethod
    def power(a: float, b: float) -> float:
        """Raise `a` to `b` with IEEE results where `math.pow` would raise.

        A negative base with a fractional exponent gives NaN and overflow
        gives a signed infinity; zero to a negative power is a division by
        zero.
        """
        try:
            return math.pow(a, b)
        except OverflowError:
            negative = a < 0 and math.fmod(b, 2.0) == 1.0
            return -math.inf if negative else math.inf
        except ValueError:
            if a == 0.0:
                raise DivisionByZero('zero raised to a negative power') from None
            return math.nan

    @staticmethod
    def operand_error(op: str, a: Any, b: Any) -> OperandTypeError:
        return OperandTypeError(f'unsupported operand types for {op}: {type_name(a)} and {type_name(b)}')


def run_program(source: str, input_lines: Optional[Iterable[str]] = None, parser: str = 'descent',
                **options) -> Interpreter:
    """Parse and run a Brisk program from a source string.

    When `input_lines` is given, `input` statements read from it instead of
    standard input. Remaining keyword arguments go to :class:`Interpreter`.
    Returns the interpreter so callers can inspect the final environment.
    """
    program = parse_source(source, parser)
    if input_lines is not None:
        options.setdefault('input_stream', LineBuffer(input_lines))
    interpreter = Interpreter(**options)
    interpreter.run(program)
    return interpreter


def run_file(file_path: str, parser: str = 'descent', **options) -> Interpreter:
    """Read, parse and run a Brisk script file."""
    source = pathlib.Path(file_path).read_text(encoding='utf-8')
    program = parse_source(source, parser)
    interpreter = Interpreter(**options)
    interpreter.run(program)
    return interpreter
