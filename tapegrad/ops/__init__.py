# tapegrad/ops/__init__.py

# Convenience re-exports so users can do: from tapegrad.ops import mul, exp, ...
from .arithmetic import add, sub, mul, div, neg
from .transcendental import exp, log, sqrt, sin, cos, tanh, erf, power
from .special import norm_pdf, norm_cdf
from ..core.errors import UnknownFunctionError

# Builtin unary functions by name; each takes a Term and returns a Term.
BUILTINS = {
    "exp": exp,
    "log": log,
    "sqrt": sqrt,
    "sin": sin,
    "cos": cos,
    "tanh": tanh,
    "erf": erf,
    "norm_pdf": norm_pdf,
    "norm_cdf": norm_cdf,
}


def apply_builtin(name, x):
    """Apply the builtin unary function registered as `name` to Term `x`."""
    try:
        fn = BUILTINS[name]
    except KeyError:
        raise UnknownFunctionError(name) from None
    return fn(x)


__all__ = [
    "add", "sub", "mul", "div", "neg",
    "exp", "log", "sqrt", "sin", "cos", "tanh", "erf", "power",
    "norm_pdf", "norm_cdf",
    "BUILTINS", "apply_builtin",
]
