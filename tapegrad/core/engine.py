# tapegrad/core/engine.py
from __future__ import annotations
import logging
from typing import Optional, Sequence

import numpy as np

from .node import Add, Div, Leaf, Mul, Neg, Sub, UnaryFn
from .tape import Tape

logger = logging.getLogger(__name__)

# Numeric edge cases are data, not errors: x/0 -> inf, 0/0 -> nan.
_IEEE = dict(divide="ignore", invalid="ignore", over="ignore", under="ignore")


# ---------------------------- forward evaluation ---------------------------- #
def evaluate(tape: Tape, idx: int) -> np.float64:
    """
    Value of node `idx` at the current leaf values.

    Re-walks the subtree on every call (no caching), which is what makes a
    `set_leaf_value` visible to every ancestor without rebuilding anything.
    """
    tape.node(idx)
    with np.errstate(**_IEEE):
        return _eval(tape, idx)


def _eval(tape: Tape, idx: int) -> np.float64:
    k = tape.nodes[idx].kind
    if isinstance(k, Leaf):
        return k.value
    if isinstance(k, Add):
        return _eval(tape, k.left) + _eval(tape, k.right)
    if isinstance(k, Sub):
        return _eval(tape, k.left) - _eval(tape, k.right)
    if isinstance(k, Mul):
        return _eval(tape, k.left) * _eval(tape, k.right)
    if isinstance(k, Div):
        return np.float64(_eval(tape, k.left)) / np.float64(_eval(tape, k.right))
    if isinstance(k, Neg):
        return -_eval(tape, k.operand)
    if isinstance(k, UnaryFn):
        return np.float64(k.forward_fn(_eval(tape, k.operand)))
    raise TypeError(f"unknown operation kind {type(k).__name__}")


# --------------------------- pointwise derivative --------------------------- #
def derive(tape: Tape, idx: int, wrt: int) -> np.float64:
    """
    d(node idx)/d(node wrt) at the current leaf values, by the numeric chain
    rule. Appends nothing to the tape.

    A leaf counts as the differentiation variable only by id, never by value:
    two leaves both holding 2.0 are different variables.
    """
    tape.node(idx)
    tape.node(wrt)
    with np.errstate(**_IEEE):
        return np.float64(_derive(tape, idx, wrt))


def _derive(tape: Tape, idx: int, wrt: int):
    k = tape.nodes[idx].kind
    if isinstance(k, Leaf):
        return 1.0 if idx == wrt else 0.0
    if isinstance(k, Add):
        return _derive(tape, k.left, wrt) + _derive(tape, k.right, wrt)
    if isinstance(k, Sub):
        return _derive(tape, k.left, wrt) - _derive(tape, k.right, wrt)
    if isinstance(k, Mul):
        # d(l*r) = l * dr + dl * r
        return (_eval(tape, k.left) * _derive(tape, k.right, wrt)
                + _derive(tape, k.left, wrt) * _eval(tape, k.right))
    if isinstance(k, Div):
        # d(l/r) = dl / r - l * dr / r^2
        lv = np.float64(_eval(tape, k.left))
        rv = np.float64(_eval(tape, k.right))
        return _derive(tape, k.left, wrt) / rv - lv * _derive(tape, k.right, wrt) / (rv * rv)
    if isinstance(k, Neg):
        return -_derive(tape, k.operand, wrt)
    if isinstance(k, UnaryFn):
        return _derive(tape, k.operand, wrt) * k.numeric_derivative_fn(_eval(tape, k.operand))
    raise TypeError(f"unknown operation kind {type(k).__name__}")


# ------------------------------- reverse sweep ------------------------------ #
def clear_grad(tape: Tape) -> None:
    """Mark every gradient on the tape as absent."""
    for node in tape.nodes:
        node.grad = None


def reverse(tape: Tape, root: int, seed=1.0, accumulate: Optional[bool] = None) -> None:
    """
    Run one reverse sweep from `root`, leaving d(root)/d(n) in `n.grad` for
    every node n that root depends on. Nodes root does not reach keep
    grad = None.

    Args:
        tape: The tape holding `root`.
        root: Id of the output node; its grad is seeded with `seed`.
        seed: Adjoint of the root (1.0 for a plain gradient).
        accumulate: Policy for a node consumed by several downstream nodes.
            True adds the contributions, False overwrites them (the push from
            the lowest-id consumer wins, which is only right for tree-shaped
            graphs). Defaults to `tape.config.accumulate_grad`.

    Notes:
        - Operands always precede their consumers, so walking ids downwards
          from root finishes every consumer of a node before the node itself.
        - Node 0 has no operands and is never visited as a pusher.
    """
    tape.node(root)
    if accumulate is None:
        accumulate = tape.config.accumulate_grad

    clear_grad(tape)
    nodes = tape.nodes
    nodes[root].grad = np.float64(seed)

    def push(target: int, contribution) -> None:
        node = nodes[target]
        if accumulate and node.grad is not None:
            node.grad = node.grad + contribution
        else:
            node.grad = contribution

    with np.errstate(**_IEEE):
        for i in range(root, 0, -1):
            node = nodes[i]
            g = node.grad
            if g is None:
                continue  # not reached from root
            k = node.kind
            if isinstance(k, Leaf):
                continue
            if isinstance(k, Add):
                push(k.left, g)
                push(k.right, g)
            elif isinstance(k, Sub):
                push(k.left, g)
                push(k.right, -g)
            elif isinstance(k, Mul):
                push(k.left, g * _eval(tape, k.right))
                push(k.right, g * _eval(tape, k.left))
            elif isinstance(k, Div):
                lv = np.float64(_eval(tape, k.left))
                rv = np.float64(_eval(tape, k.right))
                push(k.left, g / rv)
                push(k.right, -g * lv / (rv * rv))
            elif isinstance(k, Neg):
                push(k.operand, -g)
            elif isinstance(k, UnaryFn):
                push(k.operand, g * k.numeric_derivative_fn(_eval(tape, k.operand)))

    logger.debug("reverse sweep from node %d over %d node(s), accumulate=%s",
                 root, root + 1, accumulate)


def gradient(tape: Tape, root: int, wrt: Sequence[int], seed=1.0) -> np.ndarray:
    """
    One reverse sweep from `root`, returning d(root)/d(w) for each id in `wrt`
    as a float64 array. Nodes the sweep did not reach contribute 0.0.
    """
    for w in wrt:
        tape.node(w)
    reverse(tape, root, seed=seed)
    out = np.zeros(len(wrt), dtype=np.float64)
    for i, w in enumerate(wrt):
        g = tape.nodes[w].grad
        if g is not None:
            out[i] = g
    return out
