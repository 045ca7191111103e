# tapegrad/ops/arithmetic.py
import numbers

from ..core.errors import CrossTapeError
from ..core.node import Add, Div, Mul, Neg, Sub
from ..core.term import Term


def _as_term(x, tape) -> Term:
    """Ensure x is a Term; otherwise record it as a constant leaf on `tape`."""
    if isinstance(x, Term):
        return x
    if isinstance(x, numbers.Real):
        return tape.constant(x)
    raise TypeError(f"cannot combine Term with {type(x).__name__}")


def _binary(x, y, kind) -> Term:
    """
    Generic binary primitive: resolves the shared tape, promotes numbers to
    constant leaves, then appends kind(x, y).
    """
    if isinstance(x, Term) and isinstance(y, Term) and x.tape is not y.tape:
        # checked before promoting constants so nothing gets appended
        raise CrossTapeError(f"{x!r} and {y!r} are recorded on different tapes")
    tape = x.tape if isinstance(x, Term) else y.tape
    x = _as_term(x, tape)
    y = _as_term(y, tape)
    return Term(tape, tape.create_binary(kind, x.idx, y.idx))


def add(x, y): return _binary(x, y, Add)
def sub(x, y): return _binary(x, y, Sub)
def mul(x, y): return _binary(x, y, Mul)
def div(x, y): return _binary(x, y, Div)


def neg(x: Term) -> Term:
    return Term(x.tape, x.tape.create_unary(Neg, x.idx))
