"""Grammar-based front end for the Brisk language.

This module describes the Brisk syntax declaratively as a Lark grammar
and parses it with an LALR parser. The resulting parse tree is turned into
the same AST the recursive-descent parser in :mod:`brisk.parser` builds,
using a custom transformer. Both front ends accept the same programs and
report failures with the same error classes.

Shift/reduce conflicts in the grammar (an expression followed by a
statement that starts with ``-``, or the right-hand side of a compound
assignment) are resolved by shifting, i.e. the expression keeps going,
which is also what the recursive-descent parser does.
"""

from __future__ import annotations

import math

from lark import Lark, Transformer, v_args
from lark.exceptions import (
    UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError,
)

from .ast import (
    Program, Block, PrintStmt, InputStmt, Assign, IfStmt, WhileStmt, BreakStmt,
    ExprStmt, NumberLiteral, StringLiteral, BoolLiteral, Ident, BinaryOp, UnaryOp,
    CompoundAssign, Node,
)
from .errors import BriskError, LexError, ParseError


BRISK_GRAMMAR = r"""
    program: (_statement | ";")*

    _statement: print_stmt
              | input_stmt
              | if_stmt
              | while_stmt
              | break_stmt
              | block
              | assign_stmt
              | expr_stmt

    print_stmt: "print" "(" expr ")"
    input_stmt: "input" IDENT
    assign_stmt: IDENT "=" expr
    if_stmt: "if" "(" expr ")" block ["else" block]
    while_stmt: "while" "(" expr ")" block
    break_stmt: BREAK
    block: "{" (_statement | ";")* "}"
    expr_stmt: expr

    // Expressions with precedence
    ?expr: logic_or
    ?logic_or: logic_and (OR logic_and)*
    ?logic_and: comparison (AND comparison)*
    ?comparison: additive ((EQ | NE | LT | LE | GT | GE) additive)*
    ?additive: multiplicative ((PLUS | MINUS) multiplicative)*
    ?multiplicative: unary ((STAR | SLASH | PERCENT) unary)*
    ?unary: (MINUS | BANG) unary -> unary_op
          | power
    ?power: compound_assign (CARET unary)?
    ?compound_assign: IDENT (PLUS_EQ | MINUS_EQ | STAR_EQ | SLASH_EQ | PERCENT_EQ) expr -> compound
                    | primary
    ?primary: NUMBER -> number
            | STRING -> string
            | TRUE -> true
            | FALSE -> false
            | IDENT -> ident
            | "(" expr ")"

    // Tokens
    TRUE: "true"
    FALSE: "false"
    BREAK: "break"
    NUMBER: /[0-9][0-9_]*(\.[0-9][0-9_]*)?/
    STRING: /"[^"]*"/
    IDENT: /[^\W\d]\w*/

    OR: "||"
    AND: "&&"
    EQ: "=="
    NE: "!="
    LE: "<="
    GE: ">="
    LT: "<"
    GT: ">"
    PLUS_EQ: "+="
    MINUS_EQ: "-="
    STAR_EQ: "*="
    SLASH_EQ: "/="
    PERCENT_EQ: "%="
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    PERCENT: "%"
    BANG: "!"
    CARET: "^"

    // Comments run to the next '#' or to the end of the input
    COMMENT: /#[^#]*#?/
    %ignore COMMENT
    WS: /\s+/
    %ignore WS
"""


BRISK_PARSER = Lark(
    BRISK_GRAMMAR,
    start='program',
    parser='lalr',
    lexer='basic',
    propagate_positions=True,
    maybe_placeholders=False,
)


def _fold_binary(items) -> Node:
    left = items[0]
    i = 1
    while i < len(items):
        op = items[i]
        right = items[i + 1]
        left = BinaryOp(op=str(op), left=left, right=right)
        i += 2
    return left


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def program(self, items):
        return Program(body=tuple(items))

    def block(self, items):
        return Block(statements=tuple(items))

    @v_args(meta=True)
    def print_stmt(self, meta, items):
        return PrintStmt(items[0], getattr(meta, 'line', None), getattr(meta, 'column', None))

    @v_args(meta=True)
    def input_stmt(self, meta, items):
        return InputStmt(str(items[0]), getattr(meta, 'line', None), getattr(meta, 'column', None))

    def assign_stmt(self, items):
        name = items[0]
        return Assign(str(name), items[1], name.line, name.column)

    @v_args(meta=True)
    def if_stmt(self, meta, items):
        condition = items[0]
        then_block = items[1]
        else_block = items[2] if len(items) > 2 else None
        return IfStmt(condition, then_block, else_block,
                      getattr(meta, 'line', None), getattr(meta, 'column', None))

    @v_args(meta=True)
    def while_stmt(self, meta, items):
        return WhileStmt(items[0], items[1], getattr(meta, 'line', None), getattr(meta, 'column', None))

    def break_stmt(self, items):
        token = items[0]
        return BreakStmt(token.line, token.column)

    @v_args(meta=True)
    def expr_stmt(self, meta, items):
        return ExprStmt(items[0], getattr(meta, 'line', None), getattr(meta, 'column', None))

    # Expressions
    def logic_or(self, items):
        return _fold_binary(items)

    def logic_and(self, items):
        return _fold_binary(items)

    def comparison(self, items):
        return _fold_binary(items)

    def additive(self, items):
        return _fold_binary(items)

    def multiplicative(self, items):
        return _fold_binary(items)

    def unary_op(self, items):
        return UnaryOp(op=str(items[0]), operand=items[1])

    def compound(self, items):
        name, op, value = items
        # '+=' -> '+'
        return CompoundAssign(str(name), str(op)[:-1], value, name.line, name.column)

    def power(self, items):
        base, _, exponent = items
        return BinaryOp(op='^', left=base, right=exponent)

    def number(self, items):
        token = items[0]
        value = float(str(token).replace('_', ''))
        if math.isinf(value):
            raise LexError('number literal out of range', token.line, token.column,
                           name='NumberOutOfRange')
        return NumberLiteral(value)

    def string(self, items):
        return StringLiteral(str(items[0])[1:-1])

    def true(self, items):
        return BoolLiteral(True)

    def false(self, items):
        return BoolLiteral(False)

    def ident(self, items):
        token = items[0]
        return Ident(str(token), token.line, token.column)


def check_breaks(statements, in_loop: bool = False):
    """Reject `break` statements that are not inside a while loop."""
    for stmt in statements:
        if isinstance(stmt, BreakStmt) and not in_loop:
            raise ParseError("'break' outside of a while loop", stmt.line, stmt.column,
                             name='BreakOutsideLoop')
        if isinstance(stmt, Block):
            check_breaks(stmt.statements, in_loop)
        elif isinstance(stmt, IfStmt):
            check_breaks(stmt.then_block.statements, in_loop)
            if stmt.else_block is not None:
                check_breaks(stmt.else_block.statements, in_loop)
        elif isinstance(stmt, WhileStmt):
            check_breaks(stmt.body.statements, True)


def _describe_token(token) -> str:
    if token.type == '$END':
        return 'end of input'
    return f"{token.type} {str(token)!r}"


def _expected(names) -> str:
    names = sorted(n for n in names if not n.startswith('__'))
    return ', '.join(names) if names else 'a different token'


def parse_with_grammar(source: str) -> Program:
    """Parse Brisk source code into a Program AST using the Lark grammar."""
    try:
        tree = BRISK_PARSER.parse(source)
    except UnexpectedCharacters as e:
        if e.char == '"':
            raise LexError('unterminated string literal', e.line, e.column,
                           name='UnterminatedString') from None
        raise LexError(f"unexpected character {e.char!r}", e.line, e.column) from None
    except UnexpectedToken as e:
        if e.token.type == '$END':
            raise ParseError(f"expected {_expected(e.expected)}, found end of input",
                             e.line if e.line != -1 else None, e.column if e.column != -1 else None,
                             name='UnexpectedEnd') from None
        raise ParseError(f"expected {_expected(e.expected)}, found {_describe_token(e.token)}",
                         e.line, e.column) from None
    except UnexpectedEOF as e:
        raise ParseError(f"expected {_expected(e.expected)}, found end of input",
                         name='UnexpectedEnd') from None
    except UnexpectedInput as e:
        raise ParseError(str(e), getattr(e, 'line', None), getattr(e, 'column', None)) from None
    try:
        program: Program = ASTTransformer().transform(tree)
        check_breaks(program.body)
    except VisitError as e:
        # errors raised inside transformer callbacks arrive wrapped
        if isinstance(e.orig_exc, BriskError):
            raise e.orig_exc from None
        if isinstance(e.orig_exc, RecursionError):
            raise _nesting_error() from None
        raise
    except RecursionError:
        raise _nesting_error() from None
    return program


def _nesting_error() -> ParseError:
    return ParseError('expression nested too deeply', name='NestingTooDeep')

