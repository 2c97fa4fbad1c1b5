# aad/ops/__init__.py

from . import arithmetic
from . import transcendental
from . import special

# Convenience re-exports so users can do: from scalar_aad.aad.ops import mul, tanh, ...
from .arithmetic import add, sub, mul, div, neg, pow, reciprocal
from .transcendental import tanh, exp
from .special import relu

__all__ = [
    "add", "sub", "mul", "div", "neg", "pow", "reciprocal",
    "tanh", "exp",
    "relu",
]
