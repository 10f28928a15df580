import math

import pytest

from tlox.values import (
    EMPTY, INT_MAX, INT_MIN, Empty, add, compare, divide, integer_power, is_equal,
    is_truthy, multiply, negate, power, subtract, to_string, type_name,
)


def test_empty_is_a_singleton_marker():
    assert isinstance(EMPTY, Empty)
    assert repr(EMPTY) == 'nil'
    assert not EMPTY


@pytest.mark.parametrize('value, expected', [
    (EMPTY, 'Empty'),
    (True, 'Boolean'),
    (3, 'Integer'),
    (3.0, 'Float'),
    ('s', 'String'),
])
def test_type_name(value, expected):
    assert type_name(value) == expected


@pytest.mark.parametrize('value, expected', [
    (EMPTY, ''),
    (True, 'true'),
    (False, 'false'),
    (-42, '-42'),
    (1.0, '1'),
    (2.5, '2.5'),
    (0.1, '0.1'),
    (100.0, '100'),
    (-0.0, '-0'),
    (1e-07, '0.0000001'),
    (1e16, '10000000000000000'),
    (4.065611775352152e+17, '406561177535215200'),
    (math.inf, 'inf'),
    (-math.inf, '-inf'),
    (math.nan, 'NaN'),
    ('text', 'text'),
])
def test_to_string(value, expected):
    assert to_string(value) == expected


@pytest.mark.parametrize('value, expected', [
    (EMPTY, False),
    (False, False),
    (True, True),
    (0, False),
    (7, True),
    (0.0, False),
    (-0.5, True),
    ('', True),
    ('0', True),
])
def test_truthiness(value, expected):
    assert is_truthy(value) is expected


def test_equality():
    assert is_equal(1, 1)
    assert is_equal(1, 1.0)
    assert is_equal('a', 'a')
    assert is_equal(True, True)
    assert not is_equal(1, '1')
    assert not is_equal(True, 1)
    assert not is_equal(0, False)
    assert not is_equal(EMPTY, EMPTY)
    assert not is_equal(EMPTY, 0)


def test_integer_arithmetic_stays_integer():
    assert add(2, 3) == 5 and isinstance(add(2, 3), int)
    assert subtract(2, 5) == -3
    assert multiply(4, 5) == 20


def test_mixed_arithmetic_widens_to_float():
    assert add(1, 0.5) == 1.5
    assert isinstance(subtract(3, 1.0), float)
    assert multiply(2.0, 3) == 6.0


def test_addition_concatenates_when_either_side_is_a_string():
    assert add('a', 'b') == 'ab'
    assert add('n=', 3) == 'n=3'
    assert add(1.5, '!') == '1.5!'
    assert add('x', True) == 'xtrue'
    assert add('x', EMPTY) == 'x'


def test_division_always_yields_float():
    assert divide(7, 2) == 3.5
    assert divide(4, 2) == 2.0 and isinstance(divide(4, 2), float)


def test_division_by_zero_follows_ieee():
    assert divide(1, 0) == math.inf
    assert divide(-1, 0) == -math.inf
    assert divide(1, -0.0) == -math.inf
    assert math.isnan(divide(0, 0))


def test_integer_power():
    assert integer_power(2, 10) == 1024
    assert integer_power(-3, 3) == -27
    assert integer_power(5, 0) == 1
    assert power(2, 3) == 8 and isinstance(power(2, 3), int)
    with pytest.raises(ValueError):
        power(2, -1)


def test_float_power():
    assert power(4, 0.5) == 2.0
    assert power(2.0, 2) == 4.0
    with pytest.raises(ValueError):
        power(-8.0, 0.5)
    with pytest.raises(OverflowError):
        power(10.0, 400)


def test_integer_overflow_is_detected():
    assert add(INT_MAX - 1, 1) == INT_MAX
    with pytest.raises(OverflowError):
        add(INT_MAX, 1)
    with pytest.raises(OverflowError):
        subtract(INT_MIN, 1)
    with pytest.raises(OverflowError):
        multiply(INT_MAX, 2)
    with pytest.raises(OverflowError):
        integer_power(2, 64)
    with pytest.raises(OverflowError):
        negate(INT_MIN)


def test_comparisons_order_integers_only():
    assert compare('<', 1, 2) is True
    assert compare('>=', 2, 2) is True
    assert compare('>', 1, 2) is False
    assert compare('<=', 3, 2) is False
    assert compare('<', 1, 2.0) is EMPTY
    assert compare('>', 1.5, 0.5) is EMPTY


def test_comparison_of_non_numbers_is_a_type_error():
    with pytest.raises(TypeError):
        compare('<', 'a', 'b')
    with pytest.raises(TypeError):
        compare('<', True, 1)


def test_negate():
    assert negate(5) == -5
    with pytest.raises(ValueError):
        negate(1.5)
    with pytest.raises(TypeError):
        negate('x')


@pytest.mark.parametrize('operation', [subtract, multiply, divide, power])
def test_unsupported_operand_types(operation):
    with pytest.raises(TypeError):
        operation('a', 1)
    with pytest.raises(TypeError):
        operation(EMPTY, 1)
