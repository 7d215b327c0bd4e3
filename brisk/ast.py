"""Abstract Syntax Tree (AST) definitions for the Brisk language.

The AST classes defined in this module represent the syntactic structure
of parsed Brisk programs. Statements and expressions are separate node
families; the interpreter dispatches on the concrete class. Nodes are
frozen: a parsed tree is never modified after construction.

Source positions (`line`, `column`) are carried for error reporting only
and are excluded from equality, so two trees built from the same text by
different front ends compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


# Expressions

@dataclass(frozen=True)
class NumberLiteral(Node):
    value: float


@dataclass(frozen=True)
class StringLiteral(Node):
    value: str


@dataclass(frozen=True)
class BoolLiteral(Node):
    value: bool


@dataclass(frozen=True)
class Ident(Node):
    name: str
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class BinaryOp(Node):
    op: str
    left: 'Expr'
    right: 'Expr'


@dataclass(frozen=True)
class UnaryOp(Node):
    op: str  # '-' or '!'
    operand: 'Expr'


@dataclass(frozen=True)
class CompoundAssign(Node):
    name: str
    op: str  # the arithmetic operator: '+', '-', '*', '/' or '%'
    value: 'Expr'
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


Expr = Union[NumberLiteral, StringLiteral, BoolLiteral, Ident, BinaryOp, UnaryOp, CompoundAssign]


# Statements

@dataclass(frozen=True)
class Block(Node):
    statements: Tuple['Stmt', ...]


@dataclass(frozen=True)
class PrintStmt(Node):
    expr: Expr
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class InputStmt(Node):
    name: str
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class Assign(Node):
    name: str
    value: Expr
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class IfStmt(Node):
    condition: Expr
    then_block: Block
    else_block: Optional[Block]
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class WhileStmt(Node):
    condition: Expr
    body: Block
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class BreakStmt(Node):
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class ExprStmt(Node):
    expr: Expr
    line: Optional[int] = field(default=None, compare=False)
    column: Optional[int] = field(default=None, compare=False)


Stmt = Union[PrintStmt, InputStmt, Assign, IfStmt, WhileStmt, BreakStmt, ExprStmt, Block]


@dataclass(frozen=True)
class Program(Node):
    body: Tuple[Stmt, ...]
