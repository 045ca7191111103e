# tapegrad/core/bumping.py
"""
Finite-difference bumping on a recorded tape.

Bumps a leaf in place, re-evaluates the expression and restores the leaf.
Used as an AD-free reference for the three differentiation strategies.

Formulas:
    first  = [f(x+h) - f(x-h)] / (2h)
    second = [f(x+h) - 2*f(x) + f(x-h)] / h²
"""
from __future__ import annotations
from contextlib import contextmanager
from typing import Optional

import numpy as np

from .engine import evaluate
from .errors import WrongNodeKindError
from .tape import Tape


@contextmanager
def bumped(tape: Tape, leaf: int, delta: float):
    """Temporarily shift leaf `leaf` by `delta`; the original value is always restored."""
    node = tape.node(leaf)
    if not node.is_leaf:
        raise WrongNodeKindError(f"can only bump a Leaf, node {leaf} is {type(node.kind).__name__}")
    base = node.value
    tape.set_leaf_value(leaf, base + delta)
    try:
        yield
    finally:
        tape.set_leaf_value(leaf, base)


def central_difference(tape: Tape, idx: int, wrt: int, h: Optional[float] = None) -> np.float64:
    h = tape.config.bump_size if h is None else h
    with bumped(tape, wrt, h):
        up = evaluate(tape, idx)
    with bumped(tape, wrt, -h):
        down = evaluate(tape, idx)
    return np.float64((up - down) / (2.0 * h))


def second_central_difference(tape: Tape, idx: int, wrt: int,
                              h: Optional[float] = None) -> np.float64:
    # second differences lose digits fast; a larger step than first order
    h = np.sqrt(tape.config.bump_size) if h is None else h
    mid = evaluate(tape, idx)
    with bumped(tape, wrt, h):
        up = evaluate(tape, idx)
    with bumped(tape, wrt, -h):
        down = evaluate(tape, idx)
    return np.float64((up - 2.0 * mid + down) / (h * h))
