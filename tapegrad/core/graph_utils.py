"""
Tape inspection helpers.

Summaries of the recorded graph, returned as dicts and strings; nothing
here prints.
"""

from collections import Counter
from typing import Dict, Optional

import numpy as np

from .node import operands


def get_graph_stats(tape) -> Dict:
    """
    Statistics of the recorded graph.

    Returns:
        dict with node/edge counts, fan-in and fan-out (max and mean), and
        the number of nodes per operation tag.
    """
    if not tape.nodes:
        return {
            'nodes': 0,
            'edges': 0,
            'leaves': 0,
            'max_fan_in': 0,
            'avg_fan_in': 0.0,
            'max_fan_out': 0,
            'avg_fan_out': 0.0,
            'operations': {}
        }

    n_nodes = len(tape.nodes)

    # fan-in: operands per node
    fan_ins = [len(operands(node.kind)) for node in tape.nodes]

    # fan-out: consumers per node
    fan_outs = [0] * n_nodes
    for node in tape.nodes:
        for p in operands(node.kind):
            fan_outs[p] += 1

    op_counter = Counter(node.op_tag for node in tape.nodes)

    return {
        'nodes': n_nodes,
        'edges': sum(fan_ins),
        'leaves': sum(1 for node in tape.nodes if node.is_leaf),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        'operations': dict(op_counter)
    }


def shared_nodes(tape, root: int):
    """
    Ids reachable from `root` that feed more than one consumer inside that
    subgraph. Empty means the subgraph is tree-shaped, so overwrite and
    accumulate reverse sweeps agree on it.
    """
    tape.node(root)
    uses = Counter()
    stack, seen = [root], set()
    while stack:
        i = stack.pop()
        if i in seen:
            continue
        seen.add(i)
        for p in operands(tape.nodes[i].kind):
            uses[p] += 1
            stack.append(p)
    return sorted(i for i, c in uses.items() if c > 1)


def format_tape(tape, max_nodes: Optional[int] = None) -> str:
    """
    One line per node: id, op tag, operand ids, leaf value, gradient, label.
    """
    if not tape.nodes:
        return "Empty tape"

    n_show = len(tape.nodes) if max_nodes is None else min(len(tape.nodes), max_nodes)
    lines = []
    for node in tape.nodes[:n_show]:
        ops = ", ".join(str(p) for p in operands(node.kind))
        val = "" if node.value is None else f" = {float(node.value):.6g}"
        grad = "-" if node.grad is None else f"{float(node.grad):.6g}"
        lines.append(f"Node {node.idx:4d}: {node.op_tag:10s} [{ops}]{val}  grad={grad}  {node.label}")

    if len(tape.nodes) > n_show:
        lines.append(f"... ({len(tape.nodes) - n_show} more nodes)")
    return "\n".join(lines)
