# aad/core/var.py
from __future__ import annotations
import numbers
from typing import Optional, Tuple

import numpy as np

from . import tape as tape_mod  # module access so use_tape() swaps are seen
from .node import Node, Op


class ADVar:
    """
    Handle to one node of a tape, for reverse-mode Automatic Differentiation.

    Creating an ADVar from a number records a leaf on the active tape.
    Arithmetic on ADVars records derived nodes on the tape of the operands.

    Attributes
    ----------
    tape   : Tape
        Arena the node lives on.
    idx    : int
        Arena index; this is the node's identity.
    serial : int
        Creation stamp of the node, checked on every access.
    """

    __slots__ = ("tape", "idx", "serial")

    __array_ufunc__ = None  # numpy scalars defer to ADVar's reflected operators

    def __init__(self, val, *, name: Optional[str] = None, tape=None):
        # Only real scalars; vectors are out of scope
        if isinstance(val, bool) or not isinstance(val, numbers.Real):
            raise TypeError(f"ADVar only accepts real scalars, but got {type(val)}")
        self.tape = tape if tape is not None else tape_mod.global_tape
        self.idx = self.tape.push_leaf(val, name=name)
        self.serial = self.tape.nodes[self.idx].serial

    @classmethod
    def _from_index(cls, tape, idx: int) -> "ADVar":
        """Handle to an already recorded node."""
        v = object.__new__(cls)
        v.tape = tape
        v.idx = idx
        v.serial = tape.nodes[idx].serial
        return v

    @property
    def node(self) -> Node:
        return self.tape.lookup(self.idx, self.serial)

    @property
    def val(self) -> float:
        return float(self.node.val)

    @val.setter
    def val(self, new_val):
        node = self.node
        if not node.is_leaf:
            raise ValueError("only leaf values can be overwritten; derived values are fixed")
        if isinstance(new_val, bool) or not isinstance(new_val, numbers.Real):
            raise TypeError(f"leaf value must be a real scalar, but got {type(new_val)}")
        node.val = np.float64(new_val)

    @property
    def adj(self) -> float:
        return float(self.node.adj)

    @property
    def op(self) -> Optional[Op]:
        return self.node.op

    @property
    def exponent(self) -> Optional[float]:
        return self.node.exponent

    @property
    def is_leaf(self) -> bool:
        return self.node.is_leaf

    @property
    def name(self) -> Optional[str]:
        return self.node.name

    @property
    def children(self) -> Tuple["ADVar", ...]:
        return tuple(ADVar._from_index(self.tape, c) for c in self.node.children)

    def __eq__(self, other):
        # Node identity, not value equality
        if not isinstance(other, ADVar):
            return NotImplemented
        return self.tape is other.tape and self.idx == other.idx and self.serial == other.serial

    def __hash__(self):
        return hash((id(self.tape), self.idx, self.serial))

    def __repr__(self):
        node = self.node
        kind = "leaf" if node.is_leaf else node.op.value
        return f"ADVar({float(node.val)!r}, {kind}, grad={float(node.adj)!r}, name={node.name!r})"

    def backward(self):
        from .engine import backward
        backward(self)

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
        from ..ops.arithmetic import pow
        return pow(self, other)

    def reciprocal(self):
        from ..ops.arithmetic import reciprocal
        return reciprocal(self)

    def relu(self):
        from ..ops.special import relu
        return relu(self)

    def tanh(self):
        from ..ops.transcendental import tanh
        return tanh(self)

    def exp(self):
        from ..ops.transcendental import exp
        return exp(self)
