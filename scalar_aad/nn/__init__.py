"""
Network layer on top of the AAD engine: an MLP and its training loop.
"""

from .mlp import Neuron, Layer, MLP
from .training import (
    TrainingConfig,
    squared_error_loss,
    sgd_step,
    train,
    predict,
)

__all__ = [
    'Neuron',
    'Layer',
    'MLP',
    'TrainingConfig',
    'squared_error_loss',
    'sgd_step',
    'train',
    'predict',
]
