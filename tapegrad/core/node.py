# tapegrad/core/node.py
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

import numpy as np

# (operand id, output id, operand-derivative id) -> id of d(output), or None
SymbolicBuilder = Callable[[int, int, int], Optional[int]]


@dataclass(frozen=True)
class Leaf:
    """Input or constant; the only kind whose value can be overwritten."""
    value: np.float64


@dataclass(frozen=True)
class Add:
    left: int
    right: int


@dataclass(frozen=True)
class Sub:
    left: int
    right: int


@dataclass(frozen=True)
class Mul:
    left: int
    right: int


@dataclass(frozen=True)
class Div:
    left: int
    right: int


@dataclass(frozen=True)
class Neg:
    operand: int


@dataclass(frozen=True)
class UnaryFn:
    """
    Externally supplied elementary function.

    Attributes
    ----------
    operand : int
        Id of the argument node.
    forward_fn : Callable[[float], float]
        f(x).
    numeric_derivative_fn : Callable[[float], float]
        f'(x), evaluated at a point.
    symbolic_derivative_builder : SymbolicBuilder
        Appends the subgraph of d f(u)/d wrt given (u, f(u), du/dwrt) ids.
        Only the author of f knows how to spell f' with tape nodes.
    """
    operand: int
    forward_fn: Callable[[float], float]
    numeric_derivative_fn: Callable[[float], float]
    symbolic_derivative_builder: SymbolicBuilder


OperationKind = Union[Leaf, Add, Sub, Mul, Div, Neg, UnaryFn]

BINARY_KINDS = (Add, Sub, Mul, Div)
BINARY_SYMBOLS = {Add: "+", Sub: "-", Mul: "*", Div: "/"}


def operands(kind: OperationKind) -> Tuple[int, ...]:
    """Operand ids referenced by `kind`, left to right."""
    if isinstance(kind, BINARY_KINDS):
        return (kind.left, kind.right)
    if isinstance(kind, (Neg, UnaryFn)):
        return (kind.operand,)
    return ()


@dataclass
class Node:
    """
    One entry of the tape.

    Attributes
    ----------
    idx   : int
        Position on the tape; never changes once appended.
    label : str
        Debug label built from the operand labels (e.g. "a + b").
    kind  : OperationKind
        How this node derives its value.
    grad  : Optional[float]
        d(root)/d(this node) from the most recent reverse sweep, or None
        when the node was not reached (or no sweep has run).
    """
    idx: int
    label: str
    kind: OperationKind
    grad: Optional[float] = None

    @property
    def is_leaf(self) -> bool:
        return isinstance(self.kind, Leaf)

    @property
    def value(self) -> Optional[np.float64]:
        # only leaves carry a stored value; everything else is recomputed
        return self.kind.value if isinstance(self.kind, Leaf) else None

    @property
    def op_tag(self) -> str:
        if isinstance(self.kind, UnaryFn):
            return self.label.split("(", 1)[0]
        return type(self.kind).__name__.lower()
