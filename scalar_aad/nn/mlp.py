"""
Feed-forward network built from ADVar parameters.

Parameters are leaves recorded once on the active tape at construction;
every call builds a fresh graph of derived nodes on top of them.
"""

from typing import List, Optional, Sequence, Union

import numpy as np

from ..aad.core.var import ADVar
from ..aad.core import tape as tape_mod

Scalar = Union[float, ADVar]


class Neuron:
    """
    One unit: b + sum_i w_i * x_i, optionally squashed with tanh.

    Attributes:
        w (List[ADVar]): Input weights, uniform(-1, 1) at init
        b (ADVar): Bias, 0 at init
        nonlin (bool): Apply tanh to the pre-activation
    """

    def __init__(self, nin: int, nonlin: bool = True,
                 rng: Optional[np.random.Generator] = None, tape=None):
        if nin < 1:
            raise ValueError(f"a neuron needs at least one input, got nin={nin}")
        rng = rng if rng is not None else np.random.default_rng()
        tape = tape if tape is not None else tape_mod.global_tape
        self.w = [ADVar(float(wi), tape=tape) for wi in rng.uniform(-1.0, 1.0, nin)]
        self.b = ADVar(0.0, tape=tape)
        self.nonlin = nonlin

    def __call__(self, x: Sequence[Scalar]) -> ADVar:
        if len(x) != len(self.w):
            raise ValueError(f"neuron expects {len(self.w)} inputs, got {len(x)}")
        act = self.b
        for wi, xi in zip(self.w, x):
            act = act + wi * xi
        return act.tanh() if self.nonlin else act

    def parameters(self) -> List[ADVar]:
        return self.w + [self.b]

    def __repr__(self):
        return f"{'Tanh' if self.nonlin else 'Linear'}Neuron({len(self.w)})"


class Layer:
    def __init__(self, nin: int, nout: int, **kwargs):
        self.neurons = [Neuron(nin, **kwargs) for _ in range(nout)]

    def __call__(self, x: Sequence[Scalar]) -> List[ADVar]:
        return [n(x) for n in self.neurons]

    def parameters(self) -> List[ADVar]:
        return [p for n in self.neurons for p in n.parameters()]

    def __repr__(self):
        return f"Layer of [{', '.join(str(n) for n in self.neurons)}]"


class MLP:
    """
    Multi-layer perceptron: tanh hidden layers, linear output layer.

    Usage:
        >>> model = MLP(3, [4, 4, 1], seed=0)
        >>> out = model([2.0, 3.0, -1.0])   # list with one ADVar
    """

    def __init__(self, nin: int, nouts: Sequence[int], seed: Optional[int] = None, tape=None):
        if not nouts:
            raise ValueError("MLP needs at least one layer")
        rng = np.random.default_rng(seed)
        self.tape = tape if tape is not None else tape_mod.global_tape
        sizes = [nin] + list(nouts)
        self.layers = [
            Layer(sizes[i], sizes[i + 1], nonlin=i != len(nouts) - 1, rng=rng, tape=self.tape)
            for i in range(len(nouts))
        ]

    def __call__(self, x: Sequence[Scalar]) -> List[ADVar]:
        for layer in self.layers:
            x = layer(x)
        return x

    def parameters(self) -> List[ADVar]:
        return [p for layer in self.layers for p in layer.parameters()]

    def __repr__(self):
        return f"MLP of [{', '.join(str(layer) for layer in self.layers)}]"
