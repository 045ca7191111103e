# tapegrad/core/term.py
from __future__ import annotations
from typing import Optional


class Term:
    """
    Handle to one node of a Tape: a (tape, idx) pair.

    A Term owns nothing. Many Terms may point at the same node, and a Term
    stays valid for as long as its tape lives, because nodes are never
    removed or renumbered.

    Attributes
    ----------
    tape : Tape
        The tape the node lives on.
    idx  : int
        Id of the node on that tape.
    """

    __slots__ = ("tape", "idx")

    # numpy scalars on the left (np.float64 * term) defer to our reflected operators
    __array_ufunc__ = None

    def __init__(self, tape, idx: int):
        self.tape = tape
        self.idx = idx

    def __repr__(self):
        return f"Term({self.idx}, {self.label!r})"

    @property
    def node(self):
        return self.tape.node(self.idx)

    @property
    def label(self) -> str:
        return self.node.label

    @property
    def value(self):
        """Stored value for a leaf, None for any computed node."""
        return self.node.value

    @property
    def grad(self):
        """Gradient from the last reverse sweep, or None if this node was not reached."""
        return self.node.grad

    # ------------------------------------------------------------------ #
    def eval(self):
        from .engine import evaluate
        return evaluate(self.tape, self.idx)

    def __float__(self):
        return float(self.eval())

    def derive(self, wrt: Term):
        from .engine import derive
        self._check_same_tape(wrt)
        return derive(self.tape, self.idx, wrt.idx)

    def backward(self, seed=1.0) -> None:
        from .engine import reverse
        reverse(self.tape, self.idx, seed=seed)

    def differentiate_graph(self, wrt: Term) -> Optional[Term]:
        """Derivative subgraph w.r.t. `wrt` as a new Term, or None if independent."""
        from .graphgen import differentiate_graph
        self._check_same_tape(wrt)
        out = differentiate_graph(self.tape, self.idx, wrt.idx)
        return None if out is None else Term(self.tape, out)

    def set(self, value) -> None:
        self.tape.set_leaf_value(self.idx, value)

    def apply(self, label: str, f, g, builder) -> Term:
        """
        Wrap this term in a custom unary function.

        `builder(operand, output, operand_derivative)` receives node ids and
        must return the id of the derivative subgraph (or None).
        """
        return Term(self.tape, self.tape.create_custom_unary(label, self.idx, f, g, builder))

    def _check_same_tape(self, other: Term) -> None:
        if other.tape is not self.tape:
            from .errors import CrossTapeError
            raise CrossTapeError(
                f"{self!r} and {other!r} are recorded on different tapes"
            )

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, other):
        from ..ops.transcendental import power
        if isinstance(other, Term):
            return NotImplemented
        return power(self, other)
