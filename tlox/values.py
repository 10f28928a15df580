"""Runtime value model for tlox.

tlox has a small closed set of runtime values, represented directly by
Python objects:

* ``Empty``   -> the :data:`EMPTY` singleton (written ``nil`` in source)
* ``Integer`` -> ``int`` restricted to the signed 64-bit range
* ``Float``   -> ``float``
* ``String``  -> ``str``
* ``Boolean`` -> ``bool``

Because ``bool`` is a subclass of ``int`` in Python, every helper here
tests for booleans before integers. The arithmetic helpers raise plain
Python ``TypeError`` (operand kinds not supported), ``ValueError``
(outside the operator's domain) or ``OverflowError`` (Integer result out
of range); the interpreter converts those into tlox runtime failures
carrying the operator token.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1


class Empty:
    """Marker type for the tlox empty value."""
    __slots__ = ()

    def __repr__(self) -> str:
        return 'nil'

    def __bool__(self) -> bool:
        return False


EMPTY = Empty()


def is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_float(value: Any) -> bool:
    return isinstance(value, float)


def is_number(value: Any) -> bool:
    return is_integer(value) or is_float(value)


def type_name(value: Any) -> str:
    """Return the tlox type name of a runtime value."""
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, int):
        return 'Integer'
    if isinstance(value, float):
        return 'Float'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, Empty):
        return 'Empty'
    return type(value).__name__


def check_integer(value: int) -> int:
    if value < INT_MIN or value > INT_MAX:
        raise OverflowError('Integer overflow')
    return value


def float_to_string(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    # shortest round-trip digits, written out positionally without an exponent
    text = format(Decimal(repr(value)), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def to_string(value: Any) -> str:
    """Canonical text form of a value, as written by ``print``.

    Empty prints as the empty string, booleans as ``true``/``false`` and
    integral floats without a fractional part.
    """
    if isinstance(value, Empty):
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return float_to_string(value)
    if isinstance(value, str):
        return value
    return str(value)


def is_truthy(value: Any) -> bool:
    # Truthiness: Empty and numeric zero are false, every string is true
    if isinstance(value, Empty):
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return True
    return False


def is_equal(a: Any, b: Any) -> bool:
    """Structural equality. Empty never equals anything, itself included."""
    if isinstance(a, Empty) or isinstance(b, Empty):
        return False
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if is_number(a) and is_number(b):
        if is_float(a) or is_float(b):
            return float(a) == float(b)
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    return False


def _unsupported(op: str, a: Any, b: Any) -> TypeError:
    return TypeError(f"unsupported operand types for {op}: {type_name(a)} and {type_name(b)}")


def add(a: Any, b: Any) -> Any:
    # String concatenation wins as soon as either side is a String
    if isinstance(a, str) or isinstance(b, str):
        return to_string(a) + to_string(b)
    if is_integer(a) and is_integer(b):
        return check_integer(a + b)
    if is_number(a) and is_number(b):
        return float(a) + float(b)
    raise _unsupported('+', a, b)


def subtract(a: Any, b: Any) -> Any:
    if is_integer(a) and is_integer(b):
        return check_integer(a - b)
    if is_number(a) and is_number(b):
        return float(a) - float(b)
    raise _unsupported('-', a, b)


def multiply(a: Any, b: Any) -> Any:
    if is_integer(a) and is_integer(b):
        return check_integer(a * b)
    if is_number(a) and is_number(b):
        return float(a) * float(b)
    raise _unsupported('*', a, b)


def divide(a: Any, b: Any) -> float:
    """Division always produces a Float, following IEEE-754 for zero divisors."""
    if not (is_number(a) and is_number(b)):
        raise _unsupported('/', a, b)
    a, b = float(a), float(b)
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def integer_power(base: int, exponent: int) -> int:
    """Integer exponentiation by repeated squaring; negative exponents are rejected."""
    if exponent < 0:
        raise ValueError(f"negative Integer exponent {exponent}")
    result = 1
    while exponent:
        if exponent & 1:
            result = check_integer(result * base)
        exponent >>= 1
        if exponent:
            base = check_integer(base * base)
    return result


def power(a: Any, b: Any) -> Any:
    if is_integer(a) and is_integer(b):
        return integer_power(a, b)
    if is_number(a) and is_number(b):
        try:
            return math.pow(float(a), float(b))
        except ValueError:
            raise ValueError(f"{to_string(a)} ** {to_string(b)} is not a real number")
        except OverflowError:
            raise OverflowError('Float overflow')
    raise _unsupported('**', a, b)


def compare(op: str, a: Any, b: Any) -> Any:
    """Ordering comparison. Only Integer pairs are ordered; other numeric pairs yield Empty."""
    if not (is_number(a) and is_number(b)):
        raise _unsupported(op, a, b)
    if not (is_integer(a) and is_integer(b)):
        return EMPTY
    if op == '>':
        return a > b
    if op == '>=':
        return a >= b
    if op == '<':
        return a < b
    if op == '<=':
        return a <= b
    raise ValueError(f"unknown comparison operator {op}")


def negate(value: Any) -> int:
    if is_integer(value):
        return check_integer(-value)
    if is_float(value):
        raise ValueError('unary minus is not defined for Float')
    raise TypeError(f"bad operand type for unary -: {type_name(value)}")
