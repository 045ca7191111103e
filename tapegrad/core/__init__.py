# tapegrad/core/__init__.py

"""
Core public API for tapegrad.

Exports:
    Tape           : Append-only arena of expression nodes, addressed by id.
    Term           : (tape, id) handle with arithmetic operators.
    TapeConfig     : Per-tape settings (gradient policy, bump size, labels).
    evaluate       : Forward evaluation of a node.
    derive         : Pointwise derivative by the numeric chain rule.
    reverse        : One reverse sweep filling `Node.grad`.
    clear_grad     : Mark every gradient as absent.
    gradient       : Reverse sweep, gradients of selected ids as an array.
    differentiate_graph / nth_derivative_graph : symbolic derivatives as new subgraphs.
    grad, grads, grads_list, hessian, sweep, value : function-level helpers.
"""

from .config import TapeConfig
from .errors import (
    TapeError, OutOfRangeIdError, WrongNodeKindError, CrossTapeError, UnknownFunctionError,
)
from .node import Node, Leaf, Add, Sub, Mul, Div, Neg, UnaryFn, OperationKind, operands
from .tape import Tape
from .term import Term
from .engine import evaluate, derive, reverse, clear_grad, gradient
from .graphgen import differentiate_graph, nth_derivative_graph
from .bumping import central_difference, second_central_difference
from .seeds import grad, grads, grads_list, hessian, sweep, value

__all__ = [
    "TapeConfig",
    "TapeError", "OutOfRangeIdError", "WrongNodeKindError", "CrossTapeError",
    "UnknownFunctionError",
    "Node", "Leaf", "Add", "Sub", "Mul", "Div", "Neg", "UnaryFn", "OperationKind", "operands",
    "Tape", "Term",
    "evaluate", "derive", "reverse", "clear_grad", "gradient",
    "differentiate_graph", "nth_derivative_graph",
    "central_difference", "second_central_difference",
    "grad", "grads", "grads_list", "hessian", "sweep", "value",
]
