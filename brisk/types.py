"""Runtime value helpers for Brisk.

Brisk values are represented by plain Python objects:

* ``float`` for Number (the only numeric type),
* ``str`` for String,
* ``bool`` for Bool (produced by comparisons and logical operators).

Integers never appear at runtime; literals are converted to ``float`` by
the front ends. Because ``bool`` is a subclass of ``int`` in Python, the
helpers below always test for ``bool`` explicitly.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any
import math


def is_number(value: Any) -> bool:
    return isinstance(value, float) and not isinstance(value, bool)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def type_name(value: Any) -> str:
    """Return the Brisk type name of a runtime value."""
    if isinstance(value, bool):
        return 'Bool'
    if isinstance(value, float):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    return type(value).__name__


def format_number(value: float) -> str:
    """Render a Number the way `print` shows it.

    Whole numbers have no fractional part (``3.0`` prints as ``3``) and no
    exponent notation is ever used, so ``1e21`` prints as
    ``1000000000000000000000`` and ``1e-7`` as ``0.0000001``. The digits are
    the shortest ones that round-trip to the same float.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    text = format(Decimal(repr(value)), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def to_string(value: Any) -> str:
    """Convert a Brisk value to its display text."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    return str(value)


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality; values of different kinds are never equal."""
    if type_name(a) != type_name(b):
        return False
    return a == b
