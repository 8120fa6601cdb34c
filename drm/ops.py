"""Elementwise matrix-scalar operations.

Each operation combines every element ``a`` of a matrix with a scalar ``s``.  The ``r``-prefixed
operations take the scalar as the left operand, so ``rminus`` computes ``s - a``.

>>> lookup("-:").name
'rminus'

"""
import numpy as np

from .exceptions import InvalidOperation


class ScalarOp:
    __slots__ = "name", "symbol", "func", "is_swapped", "_zero_preserving"

    def __init__(self, name, symbol, func, *, is_swapped=False, zero_preserving=lambda s: False):
        self.name = name
        self.symbol = symbol
        self.func = func
        self.is_swapped = is_swapped
        self._zero_preserving = zero_preserving

    def __repr__(self):
        return f"ops.{self.name}"

    def __reduce__(self):
        return f"{self.name}"

    def __call__(self, values, scalar):
        if self.is_swapped:
            return self.func(scalar, values)
        return self.func(values, scalar)

    def keeps_zero(self, scalar):
        """Whether ``op(0, scalar) == 0``, i.e. sparse rows stay sparse."""
        return bool(self._zero_preserving(scalar))


def _pow_keeps_zero(s):
    return s > 0


plus = ScalarOp("plus", "+", np.add, zero_preserving=lambda s: s == 0)
minus = ScalarOp("minus", "-", np.subtract, zero_preserving=lambda s: s == 0)
rminus = ScalarOp("rminus", "-:", np.subtract, is_swapped=True, zero_preserving=lambda s: s == 0)
times = ScalarOp("times", "*", np.multiply, zero_preserving=np.isfinite)
truediv = ScalarOp("truediv", "/", np.true_divide, zero_preserving=lambda s: s != 0)
rtruediv = ScalarOp("rtruediv", "/:", np.true_divide, is_swapped=True)
pow = ScalarOp("pow", "^", np.power, zero_preserving=_pow_keeps_zero)
rpow = ScalarOp("rpow", "^:", np.power, is_swapped=True)

_BY_NAME = {op.name: op for op in [plus, minus, rminus, times, truediv, rtruediv, pow, rpow]}
_BY_SYMBOL = {op.symbol: op for op in _BY_NAME.values()}


def lookup(op):
    """Find a ``ScalarOp`` from an instance, its name, or its symbol.

    Raises
    ------
    InvalidOperation
        If ``op`` is not a known elementwise scalar operation.

    """
    if isinstance(op, ScalarOp):
        return op
    if isinstance(op, str):
        rv = _BY_NAME.get(op.lower(), _BY_SYMBOL.get(op))
        if rv is not None:
            return rv
    valid = ", ".join(f"{name!r} ({o.symbol})" for name, o in _BY_NAME.items())
    raise InvalidOperation(f"Unknown elementwise scalar operation: {op!r}.  Valid ops: {valid}")


def __dir__():
    return list(globals().keys() - {"np"})
