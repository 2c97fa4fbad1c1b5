"""
Reverse-mode gradients against finite differences, plus the one-shot
gradient helpers.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent))

from scalar_aad.aad import grad, grads, grads_list, numerical_grads, gradcheck


EXPRESSIONS = [
    (lambda v: v["x"] * v["y"] + v["x"] ** 3,                      {"x": 1.3, "y": -0.4}),
    (lambda v: (v["x"] / v["y"]).tanh() * v["y"].exp(),            {"x": 0.7, "y": 1.9}),
    (lambda v: (v["x"] - v["y"]).relu() + (v["y"] * 2.0).relu(),   {"x": 2.0, "y": 0.5}),
    (lambda v: 1.0 / (1.0 + (-v["x"]).exp()),                      {"x": 0.3}),
    (lambda v: (v["a"] * v["b"] + v["c"]).tanh() ** 2 - v["a"] / 3.0,
     {"a": -0.8, "b": 0.6, "c": 0.25}),
]


@pytest.mark.parametrize("f, inputs", EXPRESSIONS)
def test_gradients_match_finite_differences(f, inputs):
    assert gradcheck(f, inputs)


def test_bump_changes_output_by_gradient_times_eps():
    f = lambda v: (v["x"] * v["y"]).exp() + v["y"] ** 2
    inputs = {"x": 0.5, "y": -1.2}
    g = grads(f, inputs)
    n = numerical_grads(f, inputs, eps=1e-7)
    for k in inputs:
        assert g[k] == pytest.approx(n[k], rel=1e-4, abs=1e-6)


def test_gradcheck_detects_wrong_gradients():
    # relu kink: forward differences see slope 1 just right of 0
    f = lambda v: v["x"].relu()
    assert not gradcheck(f, {"x": 0.0})


def test_grad_single_input():
    assert grad(lambda x: x * x * x, 2.0) == pytest.approx(12.0)
    assert grad(lambda x: x.tanh(), 0.0) == pytest.approx(1.0)


def test_grad_of_constant_function_is_zero():
    assert grad(lambda x: 3.0, 1.0) == 0.0


def test_grads_dict_keeps_input_order():
    out = grads(lambda v: v["b"] * v["a"] + v["a"], {"a": 2.0, "b": 5.0})
    assert list(out.keys()) == ["a", "b"]
    assert out == {"a": 6.0, "b": 2.0}


def test_grads_list():
    assert grads_list(lambda xs: xs[0] * xs[0] + 3 * xs[1], [2.0, 4.0]) == [4.0, 3.0]


def test_numerical_grads_returns_floats():
    out = numerical_grads(lambda v: v["x"] ** 2, {"x": 3.0})
    assert isinstance(out["x"], float)
    assert out["x"] == pytest.approx(6.0, rel=1e-4)
    assert np.isfinite(out["x"])
