# aad/ops/arithmetic.py
import numbers

from ..core.var import ADVar
from ..core.node import Op
from ..core import tape as tape_mod  # Use module access for use_tape() compatibility


def _tape_of(*xs):
    """Tape shared by the ADVar operands (the active tape if there are none)."""
    tapes = {id(x.tape): x.tape for x in xs if isinstance(x, ADVar)}
    if len(tapes) > 1:
        raise ValueError("operands live on different tapes")
    if tapes:
        return next(iter(tapes.values()))
    return tape_mod.global_tape


def _as_ad(x, tape):
    """Ensure x is an ADVar; otherwise wrap it as a fresh leaf on `tape`."""
    if isinstance(x, ADVar):
        x.tape.lookup(x.idx, x.serial)  # raises on a stale handle
        return x
    if isinstance(x, bool) or not isinstance(x, numbers.Real):
        raise TypeError(f"unsupported operand type {type(x)}")
    return ADVar(x, tape=tape)


def _record(tape, op, operands, exponent=None):
    """Push a derived node whose children are `operands` in the given order."""
    idx = tape.push_node(op=op, children=[x.idx for x in operands], exponent=exponent)
    return ADVar._from_index(tape, idx)


def _binary(x, y, op):
    tape = _tape_of(x, y)
    x = _as_ad(x, tape)
    y = _as_ad(y, tape)
    return _record(tape, op, (x, y))


def _unary(x, op, exponent=None):
    tape = _tape_of(x)
    x = _as_ad(x, tape)
    return _record(tape, op, (x,), exponent)


def add(x, y):
    """x + y  ->  SUM(x, y)"""
    return _binary(x, y, Op.SUM)


def mul(x, y):
    """x * y  ->  PRODUCT(x, y)"""
    return _binary(x, y, Op.PRODUCT)


def neg(x):
    """-x  ->  PRODUCT(-1, x)"""
    tape = _tape_of(x)
    return mul(ADVar(-1.0, tape=tape), _as_ad(x, tape))


def sub(x, y):
    """x - y  ->  SUM(x, neg(y))"""
    tape = _tape_of(x, y)
    x = _as_ad(x, tape)
    y = _as_ad(y, tape)
    return add(x, neg(y))


def pow(x, p):
    """
    x ** p with a constant exponent  ->  POWER(x; p)

    The exponent is a plain number and is not differentiated.
    """
    if isinstance(p, ADVar):
        raise TypeError("only constant (int/float) exponents are supported")
    if isinstance(p, bool) or not isinstance(p, numbers.Real):
        raise TypeError(f"unsupported exponent type {type(p)}")
    return _unary(x, Op.POWER, exponent=float(p))


def reciprocal(x):
    """1 / x  ->  POWER(x; -1)"""
    return _unary(x, Op.POWER, exponent=-1.0)


def div(x, y):
    """x / y  ->  PRODUCT(x, reciprocal(y))"""
    tape = _tape_of(x, y)
    x = _as_ad(x, tape)
    y = _as_ad(y, tape)
    return mul(x, reciprocal(y))
