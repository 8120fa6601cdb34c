import math

from .. import ops
from .base import DrmLike, _is_scalar


class AewScalar(DrmLike):
    """Lazy elementwise operation between every element of a matrix and a scalar.

    Represents expressions like ``5.0 - A`` or ``A * 5.6``.  The node only describes the
    result: its shape is the shape of ``A``, it shares the partitioning of ``A``, and it never
    has missing rows because the evaluation fills them in before applying the operation.

    Parameters
    ----------
    A : DrmLike
        Upstream matrix expression.
    scalar : float
        Finite scalar operand.
    op : str or ScalarOp
        Operation name (e.g. ``"plus"``, ``"rminus"``) or symbol (e.g. ``"+"``, ``"-:"``).

    Raises
    ------
    InvalidOperation
        If ``op`` is not a known elementwise scalar operation.

    """

    __slots__ = "A", "scalar", "op"
    _name_prefix = "aew"

    def __init__(self, A, scalar, op, *, name=None):
        if not isinstance(A, DrmLike):
            raise TypeError(f"Upstream of AewScalar must be a matrix expression; got {type(A)}")
        op = ops.lookup(op)
        if not _is_scalar(scalar):
            raise TypeError(f"scalar must be a real number; got {type(scalar)}")
        scalar = float(scalar)
        if not math.isfinite(scalar):
            raise ValueError(f"scalar must be finite; got {scalar}")
        super().__init__(name)
        self.A = A
        self.scalar = scalar
        self.op = op  # assigned last; freezes the node

    def __setattr__(self, key, value):
        if hasattr(self, "op"):
            raise AttributeError(f"{type(self).__name__} objects are immutable")
        super().__setattr__(key, value)

    def __repr__(self):
        if self.op.is_swapped:
            return f"AewScalar({self.scalar!r} {self.op.symbol[0]} {self.A.name})"
        return f"AewScalar({self.A.name} {self.op.symbol} {self.scalar!r})"

    @property
    def nrow(self):
        return self.A.nrow

    @property
    def ncol(self):
        return self.A.ncol

    @property
    def partitioning_tag(self):
        return self.A.partitioning_tag

    @property
    def can_have_missing_rows(self):
        return False

    @property
    def key_kind(self):
        return self.A.key_kind

    def checkpoint(self):
        """Evaluate the expression into a new :class:`~drm.CheckpointedMatrix`."""
        from .physical import exec_aew_scalar

        return exec_aew_scalar(self)
