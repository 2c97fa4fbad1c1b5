# aad/core/__init__.py

"""
Core public API for the AAD package.

Exports:
    ADVar             : Handle to a scalar node on a tape.
    Tape              : Arena of nodes.
    global_tape       : The default tape used to record ops.
    use_tape          : Context manager to temporarily switch the active tape.
    backward          : Run a reverse pass from a root.
    topological_order : Nodes reachable from a root, children first.
    zero_adjoints     : Reset all adjoints on the active tape to zero.
    leaf, value, gradient, set_value : Node accessors.
    grad, grads, grads_list          : One-shot gradient helpers.
    numerical_grads, gradcheck       : Finite-difference reference.
"""

from .node import Op, Node
from .var import ADVar
from .tape import Tape, global_tape, use_tape
from .engine import backward, topological_order, zero_adjoints
from .seeds import (
    leaf, value, gradient, set_value,
    grad, grads, grads_list,
    numerical_grads, gradcheck,
)

__all__ = [
    "Op", "Node",
    "ADVar",
    "Tape", "global_tape", "use_tape",
    "backward", "topological_order", "zero_adjoints",
    "leaf", "value", "gradient", "set_value",
    "grad", "grads", "grads_list",
    "numerical_grads", "gradcheck",
]
