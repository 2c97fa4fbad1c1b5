"""
Demo driver.

1. Evaluates a fixed expression and prints its value and the gradients of
   its two inputs.
2. Trains a small MLP on a four-sample toy dataset and prints the fit.

Run with:  python -m scalar_aad.demo   (or the `scalar-aad-demo` script)
"""

from typing import Dict, Optional

from .aad.core.var import ADVar
from .aad.core.tape import use_tape
from .aad.core.engine import backward
from .aad.core.graph_utils import print_graph_summary
from .nn import MLP, TrainingConfig, train, predict

XS = [
    [2.0, 3.0, -1.0],
    [3.0, -1.0, 0.5],
    [0.5, 1.0, 1.0],
    [1.0, 1.0, -1.0],
]
YS = [1.0, -1.0, -1.0, 1.0]


def expression_demo(verbose: bool = True) -> Dict[str, float]:
    """Build the fixed expression, run one backward pass, report g, dg/da, dg/db."""
    with use_tape():
        a = ADVar(-4.0, name="a")
        b = ADVar(2.0, name="b")
        c = a + b
        d = a * b + b ** 3
        c += c + 1
        c += 1 + c + (-a)
        d += d * 2 + (b + a).relu()
        d += 3 * d + (b - a).relu()
        e = c - d
        f = e ** 2
        g = f / 2.0
        g += 10.0 / f

        backward(g)

        if verbose:
            print_graph_summary(g)
            print(f"g      = {g.val:.5f}")
            print(f"dg/da  = {a.adj:.5f}")
            print(f"dg/db  = {b.adj:.5f}")

        return {'g': g.val, 'a_grad': a.adj, 'b_grad': b.adj}


def training_demo(config: Optional[TrainingConfig] = None) -> Dict:
    """Fit MLP(3, [4, 4, 1]) to the toy dataset."""
    config = config or TrainingConfig(iterations=100, learning_rate=0.05, seed=1337)
    with use_tape():
        model = MLP(3, [4, 4, 1], seed=config.seed)
        if config.verbose:
            print(model)
            print(f"{len(model.parameters())} parameters")
        result = train(model, XS, YS, config)
        result['predictions'] = predict(model, XS)

    if config.verbose:
        for x, y, p in zip(XS, YS, result['predictions']):
            print(f"  {x} -> {p:+.4f}  (target {y:+.1f})")
    return result


def main():
    print("==== Expression ====")
    expression_demo()
    print("==== Training ====")
    training_demo()


if __name__ == "__main__":
    main()
