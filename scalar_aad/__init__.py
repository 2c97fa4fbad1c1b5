"""
scalar_aad: a scalar reverse-mode AD engine and a small feed-forward
network trained with it.
"""

from .aad import ADVar, backward, leaf, value, gradient, set_value, use_tape

__version__ = "0.1.0"

__all__ = [
    "ADVar",
    "backward",
    "leaf",
    "value",
    "gradient",
    "set_value",
    "use_tape",
]
