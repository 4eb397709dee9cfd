"""Tests for the sparse LinearFunction type."""

import numpy as np
import pytest

from linear_function import DimensionMismatch, LinearFunction

POINTS = [(0.0, 0.0, 0.0), (1.0, 2.0, 3.0), (-4.5, 0.25, 7.0), (1e3, -1e-3, 2.0)]


def make_pair():
    f = LinearFunction(30.0, {0: 32.0, 2: -5.0})
    g = LinearFunction(-5.0, {1: 12.0, 2: 5.0})
    return f, g


def test_evaluate_with_sequence_and_mapping():
    f = LinearFunction(10.0, {0: 20.0, 2: -2.0})
    assert f.evaluate([2.0, -432.0, 0.0]) == pytest.approx(50.0)
    assert f.evaluate({0: 2.0, 1: -432.0}) == pytest.approx(50.0)


def test_missing_variables_evaluate_as_zero():
    f = LinearFunction(1.0, {0: 2.0, 5: 3.0})
    assert f.evaluate([4.0]) == pytest.approx(9.0)
    assert f.evaluate({}) == pytest.approx(1.0)


def test_absent_coefficient_is_zero():
    f = LinearFunction.single_variable(3)
    assert f[3] == 1.0
    assert f[0] == 0.0
    assert f.coefficient(100) == 0.0


@pytest.mark.parametrize("p", POINTS)
def test_addition_is_pointwise(p):
    f, g = make_pair()
    assert (f + g).evaluate(p) == pytest.approx(f.evaluate(p) + g.evaluate(p))
    assert f.add(g).evaluate(p) == pytest.approx(f.evaluate(p) + g.evaluate(p))
    assert (f - g).evaluate(p) == pytest.approx(f.evaluate(p) - g.evaluate(p))


@pytest.mark.parametrize("k", [0.0, 2.0, -1.5, 1e6])
@pytest.mark.parametrize("p", POINTS)
def test_scaling_is_pointwise(k, p):
    f, _ = make_pair()
    assert f.scale(k).evaluate(p) == pytest.approx(k * f.evaluate(p))
    assert (k * f).evaluate(p) == pytest.approx(k * f.evaluate(p))


def test_operators_match_known_results():
    f, g = make_pair()
    assert f + g == LinearFunction(25.0, {0: 32.0, 1: 12.0, 2: 0.0})
    assert f - g == LinearFunction(35.0, {0: 32.0, 1: -12.0, 2: -10.0})
    assert f * 2 == LinearFunction(60.0, {0: 64.0, 2: -10.0})
    assert f / 2 == LinearFunction(15.0, {0: 16.0, 2: -2.5})
    assert -f == LinearFunction(-30.0, {0: -32.0, 2: 5.0})


def test_arithmetic_returns_new_instances():
    f, g = make_pair()
    h = f + g
    assert h is not f
    assert f == LinearFunction(30.0, {0: 32.0, 2: -5.0})


def test_equality_tolerates_rounding():
    a = LinearFunction(0.3, {0: 0.1 + 0.2})
    b = LinearFunction(0.1 + 0.2, {0: 0.3})
    assert a == b
    assert hash(LinearFunction(1.0, {0: 2.0})) == hash(LinearFunction(1.0, {0: 2.0, 1: 0.0}))
    assert a != LinearFunction(0.3, {0: 0.3 + 1e-6})


def test_equal_functions_hash_equally_across_rounding_boundary():
    a = LinearFunction(1 + 4e-10)
    b = LinearFunction(1 + 6e-10, {1: 3e-10})
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1
    assert {a: "first"}[b] == "first"


def test_vector_roundtrip_and_dimension_check():
    f = LinearFunction.from_vector([3.0, 0.0, -1.0], constant=2.0)
    np.testing.assert_allclose(f.to_vector(3), [3.0, 0.0, -1.0])
    assert f.variables() == [0, 2]
    assert f.max_variable() == 2
    with pytest.raises(DimensionMismatch):
        f.to_vector(2)


def test_negative_or_non_integer_variables_rejected():
    with pytest.raises(DimensionMismatch):
        LinearFunction(0.0, {-1: 1.0})
    with pytest.raises(TypeError):
        LinearFunction(0.0, {"x": 1.0})


def test_coefficient_queries():
    f = LinearFunction(0.0, {0: -1.0, 1: -2.0})
    assert f.only_negative_coefficients()
    assert f.max_coefficient() == (0, -1.0)
    assert not LinearFunction(0.0, {0: 1.0, 1: -1.0}).only_negative_coefficients()
    assert LinearFunction(0.0, {2: 4.0, 0: 4.0}).max_coefficient() == (0, 4.0)
    with pytest.raises(ValueError):
        LinearFunction(5.0).max_coefficient()


def test_str_rendering():
    assert str(LinearFunction(0.0, {0: 3.0, 1: 2.0})) == "3x1 + 2x2"
    assert str(LinearFunction(-1.0, {0: -1.0, 2: 0.5})) == "-x1 + 0.5x3 - 1"
    assert str(LinearFunction()) == "0"
