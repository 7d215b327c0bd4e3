"""Recursive-descent parser for the Brisk language.

The parser pulls tokens lazily from :func:`brisk.lexer.tokenize` and keeps
a small look-ahead buffer (two tokens are needed to tell ``x = ...`` and
``x += ...`` apart from an expression that merely starts with ``x``).

Grammar, lowest to highest precedence::

    program        := (statement | ";")*
    statement      := print_stmt | input_stmt | if_stmt | while_stmt
                    | break_stmt | block | assign_stmt | expr_stmt
    print_stmt     := "print" "(" expr ")"
    input_stmt     := "input" IDENT
    assign_stmt    := IDENT "=" expr
    if_stmt        := "if" "(" expr ")" block ("else" block)?
    while_stmt     := "while" "(" expr ")" block
    break_stmt     := "break"
    block          := "{" (statement | ";")* "}"
    expr_stmt      := expr
    expr           := logic_or
    logic_or       := logic_and ("||" logic_and)*
    logic_and      := comparison ("&&" comparison)*
    comparison     := additive (("=="|"!="|"<"|"<="|">"|">=") additive)*
    additive       := multiplicative (("+"|"-") multiplicative)*
    multiplicative := unary (("*"|"/"|"%") unary)*
    unary          := ("-"|"!") unary | power
    power          := compound_assign ("^" unary)?
    compound_assign:= IDENT ("+="|"-="|"*="|"/="|"%=") expr | primary
    primary        := NUMBER | STRING | BOOL | IDENT | "(" expr ")"

Statement terminators are optional: a ``;`` after a statement is consumed
as an empty statement, so the last statement of a block may omit it.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Union

from .ast import (
    Program, Block, PrintStmt, InputStmt, Assign, IfStmt, WhileStmt, BreakStmt,
    ExprStmt, NumberLiteral, StringLiteral, BoolLiteral, Ident, BinaryOp, UnaryOp,
    CompoundAssign, Node,
)
from .errors import ParseError
from .lexer import Token, tokenize


COMPARISON_OPS = ('==', '!=', '<', '<=', '>', '>=')
ADDITIVE_OPS = ('+', '-')
MULTIPLICATIVE_OPS = ('*', '/', '%')
UNARY_OPS = ('-', '!')
COMPOUND_OPS = {'+=': '+', '-=': '-', '*=': '*', '/=': '/', '%=': '%'}


class Parser:
    def __init__(self, tokens: Iterable[Token]):
        self.tokens: Iterator[Token] = iter(tokens)
        self.buffer: List[Token] = []
        self.loop_depth = 0

    def peek(self, offset: int = 0) -> Token:
        while len(self.buffer) <= offset:
            token = next(self.tokens, None)
            if token is None:
                # The token stream always ends with EOF; repeat it when
                # looking past the end.
                token = self.buffer[-1] if self.buffer else Token('EOF', None)
            self.buffer.append(token)
        return self.buffer[offset]

    def advance(self) -> Token:
        token = self.peek()
        if token.type != 'EOF':
            self.buffer.pop(0)
        return token

    def match(self, expected: Union[str, tuple]) -> bool:
        token = self.peek()
        if isinstance(expected, tuple):
            return token.type in expected
        return token.type == expected

    def consume(self, expected: str, what: Optional[str] = None) -> Token:
        token = self.peek()
        if token.type != expected:
            self.error(what or repr(expected), token)
        return self.advance()

    def error(self, expected: str, token: Token):
        if token.type == 'EOF':
            raise ParseError(f"expected {expected}, found end of input", token.line, token.column,
                             name='UnexpectedEnd')
        raise ParseError(f"expected {expected}, found {token.describe()}", token.line, token.column)

    def parse_program(self) -> Program:
        statements: List[Node] = []
        while not self.match('EOF'):
            if self.match(';'):
                self.advance()
                continue
            statements.append(self.parse_statement())
        return Program(tuple(statements))

    def parse_statement(self) -> Node:
        token = self.peek()
        if token.type == 'print':
            return self.parse_print_stmt()
        if token.type == 'input':
            return self.parse_input_stmt()
        if token.type == 'if':
            return self.parse_if_stmt()
        if token.type == 'while':
            return self.parse_while_stmt()
        if token.type == 'break':
            return self.parse_break_stmt()
        if token.type == '{':
            return self.parse_block()
        if token.type == 'IDENT' and self.peek(1).type == '=':
            return self.parse_assign_stmt()
        expr = self.parse_expression()
        return ExprStmt(expr, token.line, token.column)

    def parse_print_stmt(self) -> PrintStmt:
        token = self.consume('print')
        self.consume('(')
        expr = self.parse_expression()
        self.consume(')')
        return PrintStmt(expr, token.line, token.column)

    def parse_input_stmt(self) -> InputStmt:
        token = self.consume('input')
        name = self.consume('IDENT', 'identifier after input')
        return InputStmt(name.value, token.line, token.column)

    def parse_assign_stmt(self) -> Assign:
        name = self.consume('IDENT')
        self.consume('=')
        value = self.parse_expression()
        return Assign(name.value, value, name.line, name.column)

    def parse_block(self) -> Block:
        self.consume('{')
        statements: List[Node] = []
        while not self.match('}'):
            if self.match('EOF'):
                self.error("'}'", self.peek())
            if self.match(';'):
                self.advance()
                continue
            statements.append(self.parse_statement())
        self.consume('}')
        return Block(tuple(statements))

    def parse_condition(self) -> Node:
        self.consume('(')
        condition = self.parse_expression()
        self.consume(')')
        return condition

    def parse_if_stmt(self) -> IfStmt:
        token = self.consume('if')
        condition = self.parse_condition()
        then_block = self.parse_block()
        else_block = None
        if self.match('else'):
            self.advance()
            else_block = self.parse_block()
        return IfStmt(condition, then_block, else_block, token.line, token.column)

    def parse_while_stmt(self) -> WhileStmt:
        token = self.consume('while')
        condition = self.parse_condition()
        self.loop_depth += 1
        try:
            body = self.parse_block()
        finally:
            self.loop_depth -= 1
        return WhileStmt(condition, body, token.line, token.column)

    def parse_break_stmt(self) -> BreakStmt:
        token = self.consume('break')
        if self.loop_depth == 0:
            raise ParseError("'break' outside of a while loop", token.line, token.column,
                             name='BreakOutsideLoop')
        return BreakStmt(token.line, token.column)

    # Expressions

    def parse_expression(self) -> Node:
        return self.parse_logic_or()

    def parse_logic_or(self) -> Node:
        node = self.parse_logic_and()
        while self.match('||'):
            op_token = self.advance()
            right = self.parse_logic_and()
            node = BinaryOp(op_token.type, node, right)
        return node

    def parse_logic_and(self) -> Node:
        node = self.parse_comparison()
        while self.match('&&'):
            op_token = self.advance()
            right = self.parse_comparison()
            node = BinaryOp(op_token.type, node, right)
        return node

    def parse_comparison(self) -> Node:
        node = self.parse_additive()
        while self.match(COMPARISON_OPS):
            op_token = self.advance()
            right = self.parse_additive()
            node = BinaryOp(op_token.type, node, right)
        return node

    def parse_additive(self) -> Node:
        node = self.parse_multiplicative()
        while self.match(ADDITIVE_OPS):
            op_token = self.advance()
            right = self.parse_multiplicative()
            node = BinaryOp(op_token.type, node, right)
        return node

    def parse_multiplicative(self) -> Node:
        node = self.parse_unary()
        while self.match(MULTIPLICATIVE_OPS):
            op_token = self.advance()
            right = self.parse_unary()
            node = BinaryOp(op_token.type, node, right)
        return node

    def parse_unary(self) -> Node:
        if self.match(UNARY_OPS):
            op_token = self.advance()
            operand = self.parse_unary()
            return UnaryOp(op_token.type, operand)
        return self.parse_power()

    def parse_power(self) -> Node:
        node = self.parse_compound_assign()
        if self.match('^'):
            self.advance()
            # right-associative; the exponent may carry its own sign
            right = self.parse_unary()
            node = BinaryOp('^', node, right)
        return node

    def parse_compound_assign(self) -> Node:
        token = self.peek()
        if token.type == 'IDENT' and self.peek(1).type in COMPOUND_OPS:
            self.advance()
            op_token = self.advance()
            # the right-hand side binds with full expression precedence
            value = self.parse_expression()
            return CompoundAssign(token.value, COMPOUND_OPS[op_token.type], value,
                                  token.line, token.column)
        return self.parse_primary()

    def parse_primary(self) -> Node:
        token = self.peek()
        if token.type == 'NUMBER':
            self.advance()
            return NumberLiteral(token.value)
        if token.type == 'STRING':
            self.advance()
            return StringLiteral(token.value)
        if token.type == 'BOOL':
            self.advance()
            return BoolLiteral(token.value)
        if token.type == 'IDENT':
            self.advance()
            return Ident(token.value, token.line, token.column)
        if token.type == '(':
            self.advance()
            expr = self.parse_expression()
            self.consume(')')
            return expr
        self.error('expression', token)


def parse_program(source: str) -> Program:
    """Parse Brisk source code into a Program AST.

    Lexing is lazy, so lexical errors surface at the point the parser
    reaches them.
    """
    parser = Parser(tokenize(source))
    try:
        return parser.parse_program()
    except RecursionError:
        token = parser.buffer[0] if parser.buffer else None
        raise ParseError('expression nested too deeply',
                         token.line if token else None, token.column if token else None,
                         name='NestingTooDeep') from None
