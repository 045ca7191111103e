# tapegrad/ops/special.py
import numpy as np
from scipy.special import ndtr

from .transcendental import _unary

SQRT_TWO_PI = np.sqrt(2.0 * np.pi)


def _pdf(v):
    return np.exp(-0.5 * v * v) / SQRT_TWO_PI


def norm_pdf(x):
    """Standard normal density; d/dx phi(x) = -x * phi(x)."""
    return _unary(x, "norm_pdf", _pdf, lambda v: -v * _pdf(v),
                  lambda arg, out, der: -(arg * out) * der)


def norm_cdf(x):
    """
    Standard normal CDF N(x), with dN/dx = phi(x).
    The symbolic derivative is a norm_pdf node, so N can be differentiated
    to any order.
    """
    return _unary(x, "norm_cdf", ndtr, _pdf,
                  lambda arg, out, der: norm_pdf(arg) * der)
