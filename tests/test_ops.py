"""
Builtin unary functions: forward values and agreement of all three
derivative strategies with finite differences.

Run with: pytest tests/test_ops.py -v
"""

import math

import numpy as np
import pytest
from scipy.special import erf as scipy_erf
from scipy.stats import norm

from tapegrad import (
    Tape, ops, apply_builtin, UnknownFunctionError,
    central_difference, second_central_difference, differentiate_graph, evaluate,
)


TOLERANCE = 1e-6


def assert_close(actual: float, expected: float, tol: float = TOLERANCE) -> None:
    """Assert two values are approximately equal (absolute or relative)."""
    diff = abs(actual - expected)
    assert diff < tol * max(1.0, abs(expected)), f"Values differ: {actual} vs {expected} (diff={diff})"


REFERENCE = {
    "exp": math.exp,
    "log": math.log,
    "sqrt": math.sqrt,
    "sin": math.sin,
    "cos": math.cos,
    "tanh": math.tanh,
    "erf": lambda v: float(scipy_erf(v)),
    "norm_pdf": lambda v: float(norm.pdf(v)),
    "norm_cdf": lambda v: float(norm.cdf(v)),
}


@pytest.fixture(params=sorted(ops.BUILTINS))
def builtin(request):
    """(name, tape, x, y) with y = name(1.3 * x + 0.2) at x = 0.7."""
    tape = Tape()
    x = tape.leaf("x", 0.7)
    y = apply_builtin(request.param, 1.3 * x + 0.2)
    return request.param, tape, x, y


class TestForward:
    """Forward values against math / scipy."""

    def test_value(self, builtin) -> None:
        name, tape, x, y = builtin
        assert_close(y.eval(), REFERENCE[name](1.3 * 0.7 + 0.2), tol=1e-12)

    def test_label(self, builtin) -> None:
        name, tape, x, y = builtin
        assert y.label == f"{name}(1.3 * x + 0.2)"


class TestDerivatives:
    """Pointwise, reverse and generated derivatives agree."""

    def test_derive_matches_finite_difference(self, builtin) -> None:
        name, tape, x, y = builtin
        assert_close(y.derive(x), central_difference(tape, y.idx, x.idx), tol=1e-6)

    def test_reverse_matches_derive(self, builtin) -> None:
        name, tape, x, y = builtin
        y.backward()
        assert_close(x.grad, y.derive(x), tol=1e-12)

    def test_generated_matches_derive(self, builtin) -> None:
        name, tape, x, y = builtin
        d = y.differentiate_graph(x)
        for xv in (0.7, 0.35, 1.9):
            x.set(xv)
            assert_close(d.eval(), y.derive(x), tol=1e-10)

    def test_second_order_matches_finite_difference(self, builtin) -> None:
        name, tape, x, y = builtin
        d2 = y.differentiate_graph(x).differentiate_graph(x)
        assert_close(d2.eval(), second_central_difference(tape, y.idx, x.idx), tol=1e-4)

    def test_third_order_matches_derive(self, builtin) -> None:
        name, tape, x, y = builtin
        d2 = y.differentiate_graph(x).differentiate_graph(x)
        d3 = d2.differentiate_graph(x)
        assert_close(d3.eval(), d2.derive(x), tol=1e-10)


class TestPower:
    """x ** p for constant exponents."""

    def test_integer_power(self) -> None:
        tape = Tape()
        x = tape.leaf("x", 2.0)
        y = x ** 3
        assert y.eval() == 8.0
        assert y.derive(x) == 12.0
        d2 = y.differentiate_graph(x).differentiate_graph(x)
        assert d2.eval() == 12.0

    def test_fractional_power(self) -> None:
        tape = Tape()
        x = tape.leaf("x", 4.0)
        y = x ** 0.5
        assert y.eval() == 2.0
        assert y.derive(x) == 0.25
        assert y.differentiate_graph(x).eval() == 0.25

    def test_zero_power_is_constant(self) -> None:
        tape = Tape()
        x = tape.leaf("x", 4.0)
        y = x ** 0
        assert y.eval() == 1.0
        assert y.derive(x) == 0.0
        assert y.differentiate_graph(x) is None

    def test_label(self) -> None:
        tape = Tape()
        x = tape.leaf("x", 4.0)
        assert (x ** 2).label == "pow[2](x)"


class TestRegistry:
    """Name-based access to the builtins."""

    def test_known_names(self) -> None:
        assert {"exp", "log", "sqrt", "sin", "cos", "tanh", "erf",
                "norm_pdf", "norm_cdf"} <= set(ops.BUILTINS)

    def test_apply_builtin(self) -> None:
        tape = Tape()
        x = tape.leaf("x", 0.0)
        assert apply_builtin("cos", x).eval() == 1.0

    def test_unknown_name(self) -> None:
        tape = Tape()
        x = tape.leaf("x", 0.0)
        n = len(tape)
        with pytest.raises(UnknownFunctionError):
            apply_builtin("gamma", x)
        with pytest.raises(KeyError):
            apply_builtin("gamma", x)
        assert len(tape) == n


class TestComposition:
    """Builtins composed with each other and with arithmetic."""

    def test_sin_cos_identity(self) -> None:
        tape = Tape()
        x = tape.leaf("x", 0.9)
        y = ops.sin(x) * ops.sin(x) + ops.cos(x) * ops.cos(x)
        assert_close(y.eval(), 1.0, tol=1e-12)
        d = y.differentiate_graph(x)
        assert_close(d.eval(), 0.0, tol=1e-12)

    def test_log_exp_roundtrip_derivative(self) -> None:
        tape = Tape()
        x = tape.leaf("x", 1.7)
        y = ops.log(ops.exp(x))
        assert_close(y.derive(x), 1.0, tol=1e-12)
        assert_close(y.differentiate_graph(x).eval(), 1.0, tol=1e-12)

    def test_black_scholes_delta(self) -> None:
        # d1 = (log(S/K) + (r + sigma^2/2) T) / (sigma sqrt(T)); delta = N(d1)
        tape = Tape()
        S = tape.leaf("S", 100.0)
        K = tape.leaf("K", 95.0)
        r = tape.leaf("r", 0.05)
        sigma = tape.leaf("sigma", 0.2)
        T = tape.leaf("T", 1.0)
        d1 = (ops.log(S / K) + (r + sigma * sigma / 2.0) * T) / (sigma * ops.sqrt(T))
        d2 = d1 - sigma * ops.sqrt(T)
        call = S * ops.norm_cdf(d1) - K * ops.exp(-(r * T)) * ops.norm_cdf(d2)
        delta = call.derive(S)
        expected = float(norm.cdf((math.log(100.0 / 95.0) + 0.07) / 0.2))
        assert_close(delta, expected, tol=1e-10)
        call.backward()
        assert_close(S.grad, expected, tol=1e-10)
        gamma = differentiate_graph(tape, differentiate_graph(tape, call.idx, S.idx), S.idx)
        expected_gamma = float(norm.pdf((math.log(100.0 / 95.0) + 0.07) / 0.2)) / (100.0 * 0.2)
        assert_close(evaluate(tape, gamma), expected_gamma, tol=1e-10)

    def test_log_of_zero_is_data(self) -> None:
        tape = Tape()
        x = tape.leaf("x", 0.0)
        assert np.isneginf(ops.log(x).eval())
        assert np.isposinf(ops.log(x).derive(x))
