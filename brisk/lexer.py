"""Lexer for the Brisk language.

`tokenize` scans the source text character by character and lazily
yields :class:`Token` objects, finishing with a single ``EOF`` token.
Whitespace and ``# ... #`` comments are skipped. Two-character operators
are matched before their one-character prefixes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List
import math

from .errors import LexError
from .types import format_number


KEYWORDS = ('if', 'else', 'while', 'print', 'input', 'break')
BOOL_LITERALS = {'true': True, 'false': False}

TWO_CHAR_OPS = ('==', '!=', '<=', '>=', '+=', '-=', '*=', '/=', '%=', '&&', '||')
SINGLE_CHAR_OPS = ('+', '-', '*', '/', '%', '^', '=', '<', '>', '!', '(', ')', '{', '}', ';')
DIGITS = '0123456789'


# Identifier characters match the grammar's IDENT terminal, /[^\W\d]\w*/
def is_ident_start(c: str) -> bool:
    return (c.isalnum() or c == '_') and not c.isdecimal()


def is_ident_char(c: str) -> bool:
    return c.isalnum() or c == '_'


@dataclass(frozen=True)
class Token:
    """A lexical token.

    `type` is 'NUMBER', 'STRING', 'IDENT', 'BOOL' or 'EOF' for valued
    tokens; for keywords and operators it is the keyword or operator text
    itself (e.g. 'while', '+='). Positions are ignored by equality.
    """
    type: str
    value: Any
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    @property
    def is_keyword(self) -> bool:
        return self.type in KEYWORDS

    def describe(self) -> str:
        if self.type == 'EOF':
            return 'end of input'
        if self.type in ('NUMBER', 'STRING', 'IDENT', 'BOOL'):
            return f"{self.type} {render_token(self)}"
        return repr(self.type)


def tokenize(source: str) -> Iterator[Token]:
    """Lazily convert source code into tokens.

    The minus sign is always a separate operator token; negative numbers
    are built by the parser's unary rule. String literals have no escape
    sequences and may span lines.

    Raises:
        LexError: on an unterminated string, a number literal too large
            for a float, or an unrecognized character.
    """
    i = 0
    line = 1
    col = 1
    length = len(source)

    def advance(n: int = 1):
        nonlocal i, col, line
        for _ in range(n):
            if i < length and source[i] == '\n':
                line += 1
                col = 1
            else:
                col += 1
            i += 1

    while i < length:
        c = source[i]
        if c.isspace():
            advance()
            continue
        # Comments run to the next '#' or to the end of the input
        if c == '#':
            advance()
            while i < length and source[i] != '#':
                advance()
            advance()
            continue
        if is_ident_start(c):
            start_line, start_col = line, col
            start_i = i
            while i < length and is_ident_char(source[i]):
                advance()
            word = source[start_i:i]
            if word in KEYWORDS:
                yield Token(word, word, start_line, start_col)
            elif word in BOOL_LITERALS:
                yield Token('BOOL', BOOL_LITERALS[word], start_line, start_col)
            else:
                yield Token('IDENT', word, start_line, start_col)
            continue
        if c in DIGITS:
            start_line, start_col = line, col
            start_i = i
            while i < length and (source[i] in DIGITS or source[i] == '_'):
                advance()
            if i + 1 < length and source[i] == '.' and source[i + 1] in DIGITS:
                advance()
                while i < length and (source[i] in DIGITS or source[i] == '_'):
                    advance()
            text = source[start_i:i].replace('_', '')
            value = float(text)
            if math.isinf(value):
                raise LexError('number literal out of range', start_line, start_col,
                               name='NumberOutOfRange')
            yield Token('NUMBER', value, start_line, start_col)
            continue
        if c == '"':
            start_line, start_col = line, col
            advance()
            start_i = i
            while i < length and source[i] != '"':
                advance()
            if i >= length:
                raise LexError('unterminated string literal', start_line, start_col,
                               name='UnterminatedString')
            value = source[start_i:i]
            advance()
            yield Token('STRING', value, start_line, start_col)
            continue
        pair = source[i:i + 2]
        if pair in TWO_CHAR_OPS:
            yield Token(pair, pair, line, col)
            advance(2)
            continue
        if c in SINGLE_CHAR_OPS:
            yield Token(c, c, line, col)
            advance()
            continue
        raise LexError(f"unexpected character {c!r}", line, col)
    yield Token('EOF', None, line, col)


def render_token(token: Token) -> str:
    """Return source text that lexes back to an equal token."""
    if token.type == 'NUMBER':
        return format_number(token.value)
    if token.type == 'STRING':
        return '"' + token.value + '"'
    if token.type == 'BOOL':
        return 'true' if token.value else 'false'
    if token.type == 'IDENT':
        return token.value
    if token.type == 'EOF':
        return ''
    return token.type


def render_tokens(tokens: List[Token]) -> str:
    """Join rendered tokens with single spaces."""
    return ' '.join(render_token(t) for t in tokens if t.type != 'EOF')
