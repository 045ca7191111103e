# tapegrad/core/graphgen.py
"""
Symbolic differentiation by graph generation.

`differentiate_graph(tape, idx, wrt)` appends to `tape` a subgraph whose value
is d(node idx)/d(node wrt) and returns its id. The result is an ordinary
expression on the same tape: it can be evaluated at any leaf assignment,
differentiated pointwise, swept in reverse, or fed back into
`differentiate_graph` for the next order.

`None` means "no contribution": the subtree provably does not depend on `wrt`.
Callers read it as 0.0, and the generator uses it to avoid building terms
that would only multiply or add a literal zero.
"""
from __future__ import annotations
import logging
from typing import Dict, Optional

from .errors import TapeError
from .node import Add, Div, Leaf, Mul, Neg, Sub, UnaryFn
from .tape import Tape

logger = logging.getLogger(__name__)


def differentiate_graph(tape: Tape, idx: int, wrt: int) -> Optional[int]:
    tape.node(idx)
    tape.node(wrt)
    start = len(tape)
    # one derivative subgraph per node per call; shared subexpressions reuse it
    memo: Dict[int, Optional[int]] = {}
    result = _gen(tape, idx, wrt, memo)
    logger.debug("d[%d]/d[%d] -> %s, appended %d node(s)",
                 idx, wrt, result, len(tape) - start)
    return result


def nth_derivative_graph(tape: Tape, idx: int, wrt: int, order: int) -> Optional[int]:
    """Apply `differentiate_graph` `order` times; `order=0` returns `idx`."""
    if order < 0:
        raise ValueError(f"order must be non-negative, got {order}")
    current: Optional[int] = idx
    for _ in range(order):
        current = differentiate_graph(tape, current, wrt)
        if current is None:
            return None
    return current


def _gen(tape: Tape, idx: int, wrt: int, memo: Dict[int, Optional[int]]) -> Optional[int]:
    if idx in memo:
        return memo[idx]
    result = _gen_node(tape, idx, wrt, memo)
    memo[idx] = result
    return result


def _gen_node(tape: Tape, idx: int, wrt: int, memo) -> Optional[int]:
    k = tape.nodes[idx].kind
    binary = tape.create_binary

    if isinstance(k, Leaf):
        # a real leaf, not a sentinel: the result must be evaluable on its own
        return tape.create_leaf("1", 1.0) if idx == wrt else None

    if isinstance(k, Neg):
        d = _gen(tape, k.operand, wrt, memo)
        return None if d is None else tape.create_unary(Neg, d)

    if isinstance(k, UnaryFn):
        d = _gen(tape, k.operand, wrt, memo)
        if d is None:
            return None
        out = k.symbolic_derivative_builder(k.operand, idx, d)
        if out is not None:
            tape.node(out)
        return out

    l, r = k.left, k.right
    dl = _gen(tape, l, wrt, memo)
    dr = _gen(tape, r, wrt, memo)
    if dl is None and dr is None:
        return None

    if isinstance(k, Add):
        if dr is None:
            return dl
        if dl is None:
            return dr
        return binary(Add, dl, dr)

    if isinstance(k, Sub):
        if dr is None:
            return dl
        if dl is None:
            return tape.create_unary(Neg, dr)
        return binary(Sub, dl, dr)

    if isinstance(k, Mul):
        # d(l*r) = dl*r + l*dr
        if dr is None:
            return binary(Mul, dl, r)
        if dl is None:
            return binary(Mul, l, dr)
        return binary(Add, binary(Mul, dl, r), binary(Mul, l, dr))

    if isinstance(k, Div):
        # d(l/r) = dl/r - ((l*dr)/r)/r
        if dr is None:
            return binary(Div, dl, r)
        quotient = binary(Div, binary(Div, binary(Mul, l, dr), r), r)
        if dl is None:
            return tape.create_unary(Neg, quotient)
        return binary(Sub, binary(Div, dl, r), quotient)

    raise TapeError(f"cannot differentiate node {idx} of kind {type(k).__name__}")
