# tapegrad/__init__.py
# Tape-based automatic differentiation for scalar expressions

from .core import (
    Tape, Term, TapeConfig,
    TapeError, OutOfRangeIdError, WrongNodeKindError, CrossTapeError, UnknownFunctionError,
    evaluate, derive, reverse, clear_grad, gradient,
    differentiate_graph, nth_derivative_graph,
    central_difference, second_central_difference,
    grad, grads, grads_list, hessian, sweep, value,
)
from .core.graph_utils import get_graph_stats, format_tape, shared_nodes

# Builtin functions
from . import ops
from .ops import exp, log, sqrt, sin, cos, tanh, erf, power, norm_pdf, norm_cdf, apply_builtin

__version__ = "0.1.0"

__all__ = [
    # Core
    'Tape',
    'Term',
    'TapeConfig',
    # Errors
    'TapeError',
    'OutOfRangeIdError',
    'WrongNodeKindError',
    'CrossTapeError',
    'UnknownFunctionError',
    # Engine
    'evaluate',
    'derive',
    'reverse',
    'clear_grad',
    'gradient',
    'differentiate_graph',
    'nth_derivative_graph',
    # Helpers
    'central_difference',
    'second_central_difference',
    'grad',
    'grads',
    'grads_list',
    'hessian',
    'sweep',
    'value',
    'get_graph_stats',
    'format_tape',
    'shared_nodes',
    # Builtin functions
    'ops',
    'exp', 'log', 'sqrt', 'sin', 'cos', 'tanh', 'erf', 'power',
    'norm_pdf', 'norm_cdf',
    'apply_builtin',
]
