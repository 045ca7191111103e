# tapegrad/core/tape.py
from __future__ import annotations
from typing import Iterator, List, Optional

import numpy as np

from .config import DEFAULT_CONFIG, TapeConfig
from .errors import OutOfRangeIdError, WrongNodeKindError
from .node import (
    BINARY_KINDS, BINARY_SYMBOLS, Leaf, Neg, Node, OperationKind, SymbolicBuilder, UnaryFn,
)


class Tape:
    """
    Append-only arena of Nodes; a node's id is its position.

    Every operand id stored in a node is smaller than the node's own id, so
    insertion order is a topological order and reversed insertion order is
    a valid order for the backward sweep.
    """
    def __init__(self, config: Optional[TapeConfig] = None):
        self.nodes: List[Node] = []
        self.config = config or DEFAULT_CONFIG

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __getitem__(self, idx: int) -> Node:
        return self.node(idx)

    def __repr__(self):
        return f"Tape({len(self.nodes)} nodes)"

    def node(self, idx: int) -> Node:
        """Return the node at `idx`; negative or too-large ids are rejected."""
        self._check_id(idx)
        return self.nodes[idx]

    def _check_id(self, idx) -> None:
        # bool is an int subclass but never a meaningful id
        if isinstance(idx, bool) or not isinstance(idx, (int, np.integer)):
            raise OutOfRangeIdError(idx, len(self.nodes))
        if not 0 <= idx < len(self.nodes):
            raise OutOfRangeIdError(idx, len(self.nodes))

    def _push(self, label: str, kind: OperationKind) -> int:
        idx = len(self.nodes)
        self.nodes.append(Node(idx=idx, label=label, kind=kind))
        return idx

    # ------------------------------------------------------------------ #
    # construction
    # ------------------------------------------------------------------ #
    def create_leaf(self, label: str, value) -> int:
        return self._push(str(label), Leaf(np.float64(value)))

    def create_binary(self, kind, left: int, right: int) -> int:
        """
        Append `kind(left, right)` where kind is one of Add, Sub, Mul, Div.

        Both operand ids are validated before anything is appended.
        """
        if kind not in BINARY_KINDS:
            raise WrongNodeKindError(f"{kind!r} is not a binary operation kind")
        self._check_id(left)
        self._check_id(right)
        label = f"{self.nodes[left].label} {BINARY_SYMBOLS[kind]} {self.nodes[right].label}"
        return self._push(label, kind(int(left), int(right)))

    def create_unary(self, kind, operand: int) -> int:
        """Append a builtin unary node; Neg is the only one."""
        if kind is not Neg:
            raise WrongNodeKindError(
                f"{kind!r} is not a builtin unary kind; use create_custom_unary"
            )
        self._check_id(operand)
        return self._push("-" + self.nodes[operand].label, Neg(int(operand)))

    def create_custom_unary(self, label: str, operand: int, forward_fn, numeric_derivative_fn,
                            symbolic_derivative_builder: SymbolicBuilder) -> int:
        """
        Append `label(operand)` evaluated by caller-supplied callables.

        Args:
            label: Function name used in the debug label.
            operand: Id of the argument node.
            forward_fn: f(x) -> float.
            numeric_derivative_fn: f'(x) -> float.
            symbolic_derivative_builder: (operand, output, operand_derivative)
                -> id of the derivative subgraph, or None for no contribution.
        """
        for name, fn in (("forward_fn", forward_fn),
                         ("numeric_derivative_fn", numeric_derivative_fn),
                         ("symbolic_derivative_builder", symbolic_derivative_builder)):
            if not callable(fn):
                raise TypeError(f"{name} must be callable, got {type(fn).__name__}")
        self._check_id(operand)
        kind = UnaryFn(int(operand), forward_fn, numeric_derivative_fn, symbolic_derivative_builder)
        return self._push(f"{label}({self.nodes[operand].label})", kind)

    def set_leaf_value(self, idx: int, value) -> None:
        """Overwrite a leaf in place; downstream nodes see it on next evaluation."""
        node = self.node(idx)
        if not node.is_leaf:
            raise WrongNodeKindError(
                f"node {idx} ({node.label!r}) is {type(node.kind).__name__}, not Leaf"
            )
        node.kind = Leaf(np.float64(value))

    # ------------------------------------------------------------------ #
    # handles
    # ------------------------------------------------------------------ #
    def leaf(self, label: str, value):
        """Append a leaf and return a Term for it."""
        from .term import Term
        return Term(self, self.create_leaf(label, value))

    def constant(self, value):
        """Append an unnamed constant leaf labeled by its value."""
        from .term import Term
        return Term(self, self.create_leaf(self.config.constant_format.format(value), value))

    def term(self, idx: int):
        from .term import Term
        self._check_id(idx)
        return Term(self, int(idx))
