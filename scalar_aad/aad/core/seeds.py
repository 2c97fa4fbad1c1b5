# aad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the tape.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Optional

import numpy as np
from scipy.optimize import approx_fprime

from .var import ADVar
from .tape import use_tape
from .engine import backward


def leaf(val, name: Optional[str] = None) -> ADVar:
    """Record a constant or trainable parameter on the active tape."""
    return ADVar(val, name=name)


def value(x: Any) -> Any:
    """Return the numeric value of an ADVar; pass through plain numbers unchanged."""
    return x.val if isinstance(x, ADVar) else x


def gradient(x: ADVar) -> float:
    """d(root)/d(x) from the most recent backward pass that reached x."""
    return x.adj


def set_value(x: ADVar, new_val: float) -> None:
    """Overwrite a leaf's value (optimizer step). Derived nodes raise ValueError."""
    x.val = new_val


def _ensure_ad(v: Any, *, name: str) -> ADVar:
    """Wrap a plain value as ADVar if needed; otherwise return the ADVar itself."""
    return v if isinstance(v, ADVar) else ADVar(v, name=name)


def _as_output(y: Any) -> ADVar:
    if not isinstance(y, ADVar):
        # constant output: gradient is zero everywhere
        y = ADVar(y, name="y")
    return y


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[ADVar], ADVar], x0: float) -> float:
    """
    Derivative of a scalar function y=f(x) at x0.
    Runs one reverse pass within a fresh, isolated tape.
    """
    with use_tape():
        x = _ensure_ad(x0, name="x")
        y = _as_output(f(x))
        backward(y)
        return x.adj


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, ADVar]], ADVar],
          inputs: Dict[str, float]) -> Dict[str, float]:
    """
    Partial derivatives of f at `inputs`, keyed like `inputs`.

    Every input becomes a named leaf on a private tape, f is evaluated once
    and a single backward pass fills all the partials. The tape is dropped
    on return, so only plain floats come back.
    """
    with use_tape():
        vars_ad: Dict[str, ADVar] = {k: _ensure_ad(v, name=k) for k, v in inputs.items()}
        y = _as_output(f(vars_ad))
        backward(y)
        return {k: vars_ad[k].adj for k in inputs.keys()}


def grads_list(f: Callable[[List[ADVar]], ADVar],
               x0_list: Iterable[float]) -> List[float]:
    """Positional form of grads(): f takes a list of leaves, partials come back as floats."""
    with use_tape():
        xs = [_ensure_ad(v, name=f"x{i}") for i, v in enumerate(x0_list)]
        y = _as_output(f(xs))
        backward(y)
        return [x.adj for x in xs]


# ----------------------------- finite differences ---------------------------- #
def numerical_grads(f: Callable[[Dict[str, ADVar]], ADVar],
                    inputs: Dict[str, float],
                    eps: float = 1e-6) -> Dict[str, float]:
    """
    Forward-difference gradient of y=f(vars), as a reference for `grads`.

    Each evaluation rebuilds the graph on its own tape from the bumped
    inputs, so nothing recorded earlier is reused.
    """
    keys = list(inputs.keys())

    def f_flat(x: np.ndarray) -> float:
        with use_tape():
            vars_ad = {k: ADVar(float(xi), name=k) for k, xi in zip(keys, x)}
            return value(f(vars_ad))

    x0 = np.array([float(inputs[k]) for k in keys], dtype=float)
    g = approx_fprime(x0, f_flat, eps)
    return {k: float(gi) for k, gi in zip(keys, g)}


def gradcheck(f: Callable[[Dict[str, ADVar]], ADVar],
              inputs: Dict[str, float],
              *,
              eps: float = 1e-6,
              rtol: float = 1e-3,
              atol: float = 1e-4) -> bool:
    """True when reverse-mode and finite-difference gradients agree."""
    analytic = grads(f, inputs)
    numeric = numerical_grads(f, inputs, eps)
    a = np.array([analytic[k] for k in inputs.keys()])
    n = np.array([numeric[k] for k in inputs.keys()])
    return bool(np.allclose(a, n, rtol=rtol, atol=atol))
