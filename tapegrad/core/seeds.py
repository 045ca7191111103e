# tapegrad/core/seeds.py

#-----------------------------------------------------------------------------
# Function-level helpers: record f on a fresh tape, "plant" a seed
# (dy/dy = 1) at the scalar output and read the results back as numbers.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union
import numpy as np

from .config import TapeConfig
from .engine import evaluate, gradient
from .graphgen import differentiate_graph
from .tape import Tape
from .term import Term


def value(x: Any) -> Any:
    """Return the numeric value of a Term; pass through plain numbers unchanged."""
    return x.eval() if isinstance(x, Term) else x


def _as_output(tape: Tape, y: Any) -> Term:
    # f may return a plain number when it ignores its inputs
    if isinstance(y, Term):
        if y.tape is not tape:
            from .errors import CrossTapeError
            raise CrossTapeError("function output was recorded on a different tape")
        return y
    return tape.constant(y)


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Term], Term], x0: float, *, config: Optional[TapeConfig] = None) -> float:
    """
    Derivative of a scalar function y=f(x) at x0.
    Runs one reverse sweep on a fresh, isolated tape.
    """
    tape = Tape(config)
    x = tape.leaf("x", x0)
    y = _as_output(tape, f(x))
    return gradient(tape, y.idx, [x.idx])[0]


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Term]], Term],
          inputs: Dict[str, float], *, config: Optional[TapeConfig] = None) -> Dict[str, float]:
    """
    Gradient of y=f(vars) w.r.t. ALL inputs (dict form), from ONE reverse sweep.

    Parameters
    ----------
    f       : function taking a dict {name: Term} and returning a scalar Term
    inputs  : dict {name: numeric}

    Returns
    -------
    dict {name: float}  # gradients in the same key order as `inputs`
    """
    tape = Tape(config)
    leaves = {k: tape.leaf(k, v) for k, v in inputs.items()}
    y = _as_output(tape, f(leaves))
    g = gradient(tape, y.idx, [t.idx for t in leaves.values()])
    return dict(zip(leaves.keys(), g))


def grads_list(f: Callable[[List[Term]], Term],
               x0_list: Iterable[float], *, config: Optional[TapeConfig] = None) -> List[float]:
    """
    Same as grads(), but the inputs are provided as a list and the result is a list
    of partials in the same order.

    Example
    -------
    f = lambda xs: xs[0]*xs[0] + 3*xs[1]
    grads_list(f, [2.0, 4.0]) -> [4.0, 3.0]
    """
    tape = Tape(config)
    xs = [tape.leaf(f"x{i}", v) for i, v in enumerate(x0_list)]
    y = _as_output(tape, f(xs))
    return list(gradient(tape, y.idx, [x.idx for x in xs]))


# --------------------------------- Hessian ---------------------------------- #
def hessian(f: Callable[[Dict[str, Term]], Term],
            inputs: Dict[str, float], *, config: Optional[TapeConfig] = None) -> np.ndarray:
    """
    Full Hessian of y=f(vars) by generating derivative graphs twice.

    Row i is the generated graph of dy/dx_i, differentiated again w.r.t.
    every input. "No contribution" at either level reads as 0.0.

    Returns
    -------
    np.ndarray [n, n] in the order of inputs.keys().
    """
    tape = Tape(config)
    leaves = [tape.leaf(k, v) for k, v in inputs.items()]
    y = _as_output(tape, f(dict(zip(inputs.keys(), leaves))))

    n = len(leaves)
    H = np.zeros((n, n), dtype=np.float64)
    for i, xi in enumerate(leaves):
        d1 = differentiate_graph(tape, y.idx, xi.idx)
        if d1 is None:
            continue
        for j, xj in enumerate(leaves):
            d2 = differentiate_graph(tape, d1, xj.idx)
            if d2 is not None:
                H[i, j] = evaluate(tape, d2)
    return H


# ---------------------------------- sweep ----------------------------------- #
def sweep(leaf: Term, xs: Iterable[float], outputs: Union[Term, Sequence[Term]]) -> np.ndarray:
    """
    Resample expressions across an input sweep without rebuilding the graph.

    Sets `leaf` to each x in turn and evaluates every output term. The leaf
    keeps its original value afterwards.

    Returns
    -------
    np.ndarray of shape [len(xs), len(outputs)].
    """
    if isinstance(outputs, Term):
        outputs = [outputs]
    for t in outputs:
        leaf._check_same_tape(t)
    xs = np.asarray(list(xs), dtype=np.float64)
    if not leaf.node.is_leaf:
        from .errors import WrongNodeKindError
        raise WrongNodeKindError(f"sweep variable {leaf!r} is not a Leaf")
    base = leaf.node.value
    out = np.empty((len(xs), len(outputs)), dtype=np.float64)
    try:
        for i, x in enumerate(xs):
            leaf.set(x)
            for j, t in enumerate(outputs):
                out[i, j] = t.eval()
    finally:
        leaf.set(base)
    return out
