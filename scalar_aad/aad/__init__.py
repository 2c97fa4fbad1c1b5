# aad/__init__.py
# Scalar reverse-mode automatic differentiation

from .core.var import ADVar
from .core.node import Op
from .core.tape import Tape, global_tape, use_tape
from .core.engine import (
    backward,
    topological_order,
    zero_adjoints,
)
from .core.seeds import (
    leaf,
    value,
    gradient,
    set_value,
    grad,
    grads,
    grads_list,
    numerical_grads,
    gradcheck,
)

# Graph builder
from . import ops
from .ops import add, sub, mul, div, neg, pow, reciprocal, tanh, exp, relu

__all__ = [
    # Core
    'ADVar',
    'Op',
    'Tape',
    'global_tape',
    'use_tape',
    # Engine
    'backward',
    'topological_order',
    'zero_adjoints',
    # Accessors / helpers
    'leaf',
    'value',
    'gradient',
    'set_value',
    'grad',
    'grads',
    'grads_list',
    'numerical_grads',
    'gradcheck',
    # Ops
    'ops',
    'add', 'sub', 'mul', 'div', 'neg', 'pow', 'reciprocal',
    'tanh', 'exp', 'relu',
]
