# aad/core/engine.py
from __future__ import annotations
from typing import List, Tuple

import numpy as np

from . import tape as tape_mod
from .node import Node, Op
from .var import ADVar


def _postorder(tape, root_idx: int) -> List[int]:
    """
    Depth-first postorder over the sub-DAG below `root_idx`.

    Children are visited in construction order and each index is emitted
    once, after all of its children. An explicit stack replaces recursion
    so long chains do not hit the interpreter's recursion limit.
    """
    nodes = tape.nodes
    order: List[int] = []
    seen = {root_idx}
    stack = [(root_idx, iter(nodes[root_idx].children))]
    while stack:
        idx, kids = stack[-1]
        for c in kids:
            if c not in seen:
                seen.add(c)
                stack.append((c, iter(nodes[c].children)))
                break
        else:
            stack.pop()
            order.append(idx)
    return order


def topological_order(root: ADVar) -> List[ADVar]:
    """
    Nodes reachable from `root`, every node after all of its children.
    The root is last. The order is deterministic for a given graph.
    """
    root.tape.lookup(root.idx, root.serial)
    return [ADVar._from_index(root.tape, i) for i in _postorder(root.tape, root.idx)]


def _local_grads(node: Node, nodes: List[Node]) -> Tuple[np.float64, ...]:
    """
    Contribution of `node.adj` to each child, in child order.

    Reads the children's forward values and the node's own value; never
    writes anything.
    """
    g = node.adj
    op = node.op
    if op is Op.SUM:
        return g, g
    if op is Op.PRODUCT:
        a, b = (nodes[c].val for c in node.children)
        return b * g, a * g
    a = nodes[node.children[0]].val
    if op is Op.POWER:
        p = np.float64(node.exponent)
        return (p * np.power(a, p - 1.0) * g,)
    if op is Op.RELU:
        return (g if a > 0 else np.float64(0.0),)
    if op is Op.TANH:
        return (g * (1.0 - node.val * node.val),)
    if op is Op.EXP:
        return (g * node.val,)
    raise ValueError(f"no backward rule for operator {op!r}")


def backward(root: ADVar):
    """
    Reverse pass from `root`.

    1) Ordering    : postorder of everything reachable from root.
    2) Seeding     : adj := 0 on every ordered node, then root.adj := 1.
    3) Propagating : walk the order backwards (root first); every derived
                     node adds its contributions into its children.

    Afterwards each reachable node holds d(root)/d(node). Calling again,
    from this or another root, recomputes from scratch.
    """
    tape = root.tape
    tape.lookup(root.idx, root.serial)
    nodes = tape.nodes

    order = _postorder(tape, root.idx)

    for i in order:
        nodes[i].adj = np.float64(0.0)
    nodes[root.idx].adj = np.float64(1.0)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for i in reversed(order):
            node = nodes[i]
            if node.is_leaf:
                continue
            for c, contrib in zip(node.children, _local_grads(node, nodes)):
                # accumulate: a child reached along several paths sums them
                nodes[c].adj = nodes[c].adj + contrib


def zero_adjoints(tape=None):
    """Set every adjoint on `tape` (the active tape by default) to zero."""
    tape = tape if tape is not None else tape_mod.global_tape
    for node in tape.nodes:
        node.adj = np.float64(0.0)
