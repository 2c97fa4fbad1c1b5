# aad/ops/transcendental.py
from ..core.node import Op
from .arithmetic import _unary


def tanh(x):
    """
    Hyperbolic tangent. The backward rule reuses the output value:
    d tanh(x)/dx = 1 - tanh(x)^2
    """
    return _unary(x, Op.TANH)


def exp(x):
    """Exponential; d exp(x)/dx = exp(x)."""
    return _unary(x, Op.EXP)
