# aad/core/node.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np


class Op(str, Enum):
    """Closed set of primitive operators a derived node can be built from."""
    SUM = "add"
    PRODUCT = "mul"
    POWER = "pow"
    RELU = "relu"
    TANH = "tanh"
    EXP = "exp"

    @property
    def arity(self) -> int:
        return ARITY[self]


ARITY = {
    Op.SUM: 2,
    Op.PRODUCT: 2,
    Op.POWER: 1,
    Op.RELU: 1,
    Op.TANH: 1,
    Op.EXP: 1,
}


@dataclass
class Node:
    """
    One arena slot on the tape.

    Attributes
    ----------
    val      : np.float64
        Forward (primal) value. Fixed for derived nodes; leaves may be
        overwritten between passes by an optimizer step.
    adj      : np.float64
        Adjoint accumulator, d(root)/d(this) after a backward pass.
    op       : Optional[Op]
        None for a leaf, otherwise the operator that produced the node.
    children : Tuple[int, ...]
        Arena indices of the operands, in construction order.
    exponent : Optional[float]
        Only set for Op.POWER.
    serial   : int
        Creation stamp, used to tell a live slot from a reused one.
    name     : Optional[str]
        Debug label.
    """
    val: np.float64
    adj: np.float64
    op: Optional[Op]
    children: Tuple[int, ...]
    exponent: Optional[float]
    serial: int
    name: Optional[str] = None

    @property
    def is_leaf(self) -> bool:
        return self.op is None


def forward_value(op: Op, vals: Sequence[np.float64], exponent: Optional[float] = None) -> np.float64:
    """Forward formula of `op` applied to the operand values."""
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        if op is Op.SUM:
            return vals[0] + vals[1]
        if op is Op.PRODUCT:
            return vals[0] * vals[1]
        if op is Op.POWER:
            return np.power(vals[0], np.float64(exponent))
        if op is Op.RELU:
            # fmax ignores NaN, so relu(nan) == 0
            return np.fmax(vals[0], np.float64(0.0))
        if op is Op.TANH:
            return np.tanh(vals[0])
        if op is Op.EXP:
            return np.exp(vals[0])
    raise ValueError(f"unknown operator {op!r}")
