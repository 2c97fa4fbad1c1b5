# aad/ops/special.py
from ..core.node import Op
from .arithmetic import _unary


def relu(x):
    """
    Rectified linear unit, max(0, x).
    Gradient passes through only where x > 0; the subgradient at 0 is 0.
    """
    return _unary(x, Op.RELU)
