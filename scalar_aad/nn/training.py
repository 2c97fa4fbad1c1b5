"""
Gradient-descent training for MLP models.

Each iteration builds a fresh graph over the persistent parameter leaves:

    loss = sum_k (model(x_k) - y_k)^2
    backward(loss)
    p.val <- p.val - learning_rate * p.adj      for every parameter p

and then rewinds the tape to drop that iteration's derived nodes.
"""

import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..aad.core.var import ADVar
from ..aad.core.engine import backward
from .mlp import MLP


@dataclass
class TrainingConfig:
    """Configuration for gradient-descent training."""
    learning_rate: float = 0.05
    iterations: int = 100

    # Seed for parameter initialisation when the driver builds the model
    seed: Optional[int] = None

    # Logging
    verbose: bool = True
    log_every: int = 10

    def __post_init__(self):
        if self.iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {self.iterations}")
        if self.log_every < 1:
            raise ValueError(f"log_every must be >= 1, got {self.log_every}")


def squared_error_loss(preds: Sequence[ADVar], targets: Sequence[float]) -> ADVar:
    """Sum of squared errors between predictions and targets."""
    if len(preds) != len(targets):
        raise ValueError(f"{len(preds)} predictions for {len(targets)} targets")
    if not preds:
        raise ValueError("cannot compute a loss over zero samples")
    loss = (preds[0] - targets[0]) ** 2
    for p, t in zip(preds[1:], targets[1:]):
        loss = loss + (p - t) ** 2
    return loss


def sgd_step(params: Sequence[ADVar], learning_rate: float) -> None:
    """Move every parameter leaf against its gradient."""
    for p in params:
        p.val = p.val - learning_rate * p.adj


def _forward_scalar(model: MLP, x: Sequence[float]) -> ADVar:
    out = model(x)
    if len(out) != 1:
        raise ValueError(f"expected a single-output model, got {len(out)} outputs")
    return out[0]


def train(model: MLP,
          xs: Sequence[Sequence[float]],
          ys: Sequence[float],
          config: Optional[TrainingConfig] = None) -> Dict:
    """
    Fit a single-output model to (xs, ys) with plain gradient descent.

    Args:
        model: network to train; its parameters are updated in place
        xs: input rows, each of length model input size
        ys: targets, one per row
        config: training configuration (defaults if None)

    Returns:
        {
            'loss_history': List[float],   # loss before each update
            'final_loss': float,           # loss after the last update
            'iterations': int,
            'runtime_sec': float,
        }
    """
    config = config or TrainingConfig()
    if len(xs) != len(ys):
        raise ValueError(f"{len(xs)} input rows for {len(ys)} targets")

    tape = model.tape
    params = model.parameters()
    history: List[float] = []
    start = time.time()

    for it in range(config.iterations):
        mark = tape.mark()
        try:
            loss = squared_error_loss([_forward_scalar(model, x) for x in xs], ys)
            backward(loss)
            sgd_step(params, config.learning_rate)
            history.append(loss.val)
        finally:
            tape.rewind(mark)

        if config.verbose and (it % config.log_every == 0 or it == config.iterations - 1):
            print(f"  iter {it:5d}: loss = {history[-1]:.6f}")

    mark = tape.mark()
    try:
        final_loss = squared_error_loss([_forward_scalar(model, x) for x in xs], ys).val
    finally:
        tape.rewind(mark)
    runtime = time.time() - start

    if config.verbose:
        print(f"  final loss = {final_loss:.6f}  ({runtime:.2f} s)")

    return {
        'loss_history': history,
        'final_loss': final_loss,
        'iterations': config.iterations,
        'runtime_sec': runtime,
    }


def predict(model: MLP, xs: Sequence[Sequence[float]]) -> List[float]:
    """Model outputs as plain floats; the graph is discarded afterwards."""
    tape = model.tape
    mark = tape.mark()
    try:
        return [_forward_scalar(model, x).val for x in xs]
    finally:
        tape.rewind(mark)
