# aad/core/tape.py
from __future__ import annotations
from typing import List, Optional, Sequence
from contextlib import contextmanager
import itertools

import numpy as np

from .node import Node, Op, forward_value

_serials = itertools.count()


class Tape:
    """
    Arena holding every node in creation order. Nodes refer to each other by
    index, so an operand always sits at a smaller index than its result.
    """
    def __init__(self):
        self.nodes: List[Node] = []

    def __len__(self):
        return len(self.nodes)

    def reset(self):
        self.nodes.clear()

    def mark(self) -> int:
        """Position to come back to with `rewind`."""
        return len(self.nodes)

    def rewind(self, mark: int):
        """
        Drop every node recorded after `mark`. Handles to dropped nodes go
        stale; leaves recorded before the mark (e.g. trainable parameters)
        stay valid.
        """
        if mark < 0 or mark > len(self.nodes):
            raise ValueError(f"mark {mark} outside tape of length {len(self.nodes)}")
        del self.nodes[mark:]

    def push_leaf(self, val, *, name: Optional[str] = None) -> int:
        self.nodes.append(Node(
            val=np.float64(val), adj=np.float64(0.0), op=None, children=(),
            exponent=None, serial=next(_serials), name=name,
        ))
        return len(self.nodes) - 1

    def push_node(self, *, op, children: Sequence[int], exponent: Optional[float] = None) -> int:
        """
        Record a derived node. The forward value is computed here from the
        operands' current values; operands are not touched.
        """
        op = Op(op)
        children = tuple(children)
        if len(children) != op.arity:
            raise ValueError(
                f"operator {op.value!r} takes {op.arity} operand(s), got {len(children)}"
            )
        if op is Op.POWER and exponent is None:
            raise ValueError("operator 'pow' needs an exponent")
        for c in children:
            if not 0 <= c < len(self.nodes):
                raise ValueError(f"operand index {c} is not on this tape")
        val = forward_value(op, [self.nodes[c].val for c in children], exponent)
        self.nodes.append(Node(
            val=val, adj=np.float64(0.0), op=op, children=children,
            exponent=None if exponent is None else float(exponent),
            serial=next(_serials),
        ))
        return len(self.nodes) - 1

    def lookup(self, idx: int, serial: int) -> Node:
        """Return the node at `idx`, checking the slot was not rewound and reused."""
        if idx < len(self.nodes):
            node = self.nodes[idx]
            if node.serial == serial:
                return node
        raise RuntimeError(
            f"stale node handle (index {idx}): the tape was rewound past it"
        )


# Global default tape
global_tape = Tape()


@contextmanager
def use_tape(tape: Optional[Tape] = None):
    """
    Context manager to temporarily use a fresh tape:
        with use_tape():
            ... build computation ...
            backward(y)
    """
    from . import tape as _tape_mod  # local import to avoid cycles
    prev = _tape_mod.global_tape
    try:
        _tape_mod.global_tape = tape if tape is not None else Tape()
        yield _tape_mod.global_tape
    finally:
        _tape_mod.global_tape = prev
