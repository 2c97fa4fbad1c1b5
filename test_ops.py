"""
Graph construction tests: node layout produced by each builder, constant
wrapping, float semantics and the precondition checks.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent))

from scalar_aad.aad import ADVar, Op, Tape, use_tape, backward, leaf, set_value
from scalar_aad.aad import ops


def test_leaf_has_value_and_zero_gradient():
    with use_tape():
        a = leaf(2.5, name="a")
        assert a.is_leaf
        assert a.op is None
        assert a.children == ()
        assert a.val == 2.5
        assert a.adj == 0.0
        assert a.name == "a"


def test_binary_ops_keep_operand_order():
    with use_tape():
        a = leaf(1.0)
        b = leaf(2.0)
        assert ops.add(b, a).children == (b, a)
        assert ops.mul(a, b).children == (a, b)
        assert ops.add(a, b).op is Op.SUM
        assert ops.mul(a, b).op is Op.PRODUCT


def test_constants_are_wrapped_as_fresh_leaves():
    with use_tape():
        x = leaf(3.0)

        right = x + 2
        first, second = right.children
        assert first == x
        assert second.is_leaf and second.val == 2.0

        left = 2 * x
        first, second = left.children
        assert first.is_leaf and first.val == 2.0
        assert second == x

        # a new leaf every time
        assert (x + 2).children[1] != second


def test_negate_is_product_with_minus_one():
    with use_tape():
        x = leaf(3.0)
        y = -x
        assert y.op is Op.PRODUCT
        k, child = y.children
        assert k.is_leaf and k.val == -1.0
        assert child == x
        assert y.val == -3.0


def test_subtract_is_sum_with_negated_operand():
    with use_tape():
        a = leaf(5.0)
        b = leaf(2.0)
        y = a - b
        assert y.op is Op.SUM
        first, neg_b = y.children
        assert first == a
        assert neg_b.op is Op.PRODUCT and neg_b.children[1] == b
        assert y.val == 3.0

        z = 1.0 - a
        assert z.val == -4.0
        assert z.children[0].is_leaf and z.children[0].val == 1.0


def test_divide_is_product_with_reciprocal():
    with use_tape():
        a = leaf(3.0)
        b = leaf(4.0)
        y = a / b
        assert y.op is Op.PRODUCT
        first, recip = y.children
        assert first == a
        assert recip.op is Op.POWER and recip.exponent == -1.0
        assert recip.children == (b,)

        z = 10.0 / a
        assert z.val == pytest.approx(10.0 / 3.0)
        assert z.children[0].val == 10.0


def test_reciprocal_and_power_record_exponent():
    with use_tape():
        a = leaf(2.0)
        r = a.reciprocal()
        assert r.op is Op.POWER
        assert r.exponent == -1.0
        assert r.val == 0.5

        p = ops.pow(a, 3)
        assert p.exponent == 3.0
        assert isinstance(p.exponent, float)


def test_unary_transforms():
    with use_tape():
        a = leaf(-1.0)
        assert ops.relu(a).op is Op.RELU
        assert ops.tanh(a).op is Op.TANH
        assert ops.exp(a).op is Op.EXP
        assert ops.relu(a).val == 0.0
        assert ops.tanh(a).val == pytest.approx(np.tanh(-1.0))
        assert ops.exp(a).val == pytest.approx(np.exp(-1.0))


def test_builders_do_not_touch_operands():
    with use_tape():
        a = leaf(2.0)
        b = leaf(3.0)
        backward(a * b)
        before = (a.val, a.adj, b.val, b.adj)
        _ = (a + b) * (a - b) / b
        _ = a.tanh().exp().relu()
        assert (a.val, a.adj, b.val, b.adj) == before


def test_division_by_zero_gives_inf_without_raising():
    with use_tape():
        a = leaf(1.0)
        z = leaf(0.0)
        y = a / z
        assert np.isinf(y.val)
        backward(y)
        assert not np.isfinite(z.adj)


def test_fractional_power_of_negative_base_is_nan():
    with use_tape():
        a = leaf(-8.0)
        y = a ** 0.5
        assert np.isnan(y.val)
        backward(y)
        assert np.isnan(a.adj)


def test_relu_of_nan_is_zero():
    with use_tape():
        a = leaf(float("nan"))
        assert ops.relu(a).val == 0.0


def test_exp_overflow_is_inf():
    with use_tape():
        y = leaf(1000.0).exp()
        assert np.isinf(y.val)


def test_wrong_arity_raises():
    tape = Tape()
    i = tape.push_leaf(1.0)
    with pytest.raises(ValueError):
        tape.push_node(op=Op.SUM, children=[i])
    with pytest.raises(ValueError):
        tape.push_node(op=Op.TANH, children=[i, i])
    with pytest.raises(ValueError):
        tape.push_node(op=Op.POWER, children=[i])
    with pytest.raises(ValueError):
        tape.push_node(op=Op.EXP, children=[5])


def test_node_exponent_is_not_differentiable():
    with use_tape():
        a = leaf(2.0)
        with pytest.raises(TypeError):
            a ** leaf(3.0)
        with pytest.raises(TypeError):
            2.0 ** a


def test_non_numeric_operands_raise():
    with use_tape():
        a = leaf(2.0)
        with pytest.raises(TypeError):
            ops.add(a, "1")
        with pytest.raises(TypeError):
            ADVar([1.0, 2.0])
        with pytest.raises(TypeError):
            ADVar(True)


def test_mixing_tapes_raises():
    with use_tape():
        a = leaf(1.0)
    with use_tape():
        b = leaf(2.0)
        with pytest.raises(ValueError):
            a + b


def test_constant_lands_on_operand_tape():
    with use_tape() as t1:
        a = leaf(1.0)
    with use_tape() as t2:
        y = a + 2.0
        assert y.tape is t1
        assert len(t2) == 0
    assert len(t1) == 3


def test_set_value_only_on_leaves():
    with use_tape():
        a = leaf(1.0)
        y = a * 2.0
        with pytest.raises(ValueError):
            set_value(y, 5.0)
        with pytest.raises(ValueError):
            y.val = 5.0


def test_leaf_update_does_not_change_built_nodes():
    with use_tape():
        a = leaf(1.0)
        y = a * 2.0
        set_value(a, 4.0)
        assert a.val == 4.0
        assert y.val == 2.0
        assert (a * 2.0).val == 8.0
