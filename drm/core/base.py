import itertools
import numbers
from contextvars import ContextVar

_recorder = ContextVar("recorder")
_prev_recorder = None


def call(method_name, owner, collection, *args, **kwargs):
    """Issue ``collection.method_name(*args, **kwargs)`` on behalf of ``owner``.

    All engine operations triggered by a matrix go through here so they can be recorded.
    """
    method = getattr(collection, method_name)
    try:
        rv = method(*args, **kwargs)
    except Exception as exc:
        # Record calls that fail for easier debugging
        rec = _recorder.get(_prev_recorder)
        if rec is not None:
            rec.record(method_name, owner, args, exc=exc)
        raise
    rec = _recorder.get(_prev_recorder)
    if rec is not None:
        rec.record(method_name, owner, args)
    return rv


def _is_scalar(x):
    return isinstance(x, numbers.Real) and not isinstance(x, bool)


class DrmLike:
    """Common interface of distributed row matrix expressions.

    Subclasses provide ``nrow``, ``ncol``, ``partitioning_tag``, ``can_have_missing_rows``,
    ``key_kind`` and ``checkpoint``.  Arithmetic with a real scalar builds a lazy
    :class:`~drm.AewScalar` expression; nothing is computed until ``checkpoint`` is called.
    """

    __slots__ = "name", "__weakref__"
    _name_counter = itertools.count()
    _name_prefix = "M"

    def __init__(self, name=None):
        if name is None:
            name = f"{self._name_prefix}_{next(DrmLike._name_counter)}"
        self.name = name

    @property
    def shape(self):
        return (self.nrow, self.ncol)

    def checkpoint(self):  # pragma: no cover (abstract)
        raise NotImplementedError

    def _ewise_scalar(self, scalar, op):
        if not _is_scalar(scalar):
            return NotImplemented
        from .expr import AewScalar

        return AewScalar(self, scalar, op)

    def __add__(self, other):
        return self._ewise_scalar(other, "plus")

    def __radd__(self, other):
        return self._ewise_scalar(other, "plus")

    def __sub__(self, other):
        return self._ewise_scalar(other, "minus")

    def __rsub__(self, other):
        return self._ewise_scalar(other, "rminus")

    def __mul__(self, other):
        return self._ewise_scalar(other, "times")

    def __rmul__(self, other):
        return self._ewise_scalar(other, "times")

    def __truediv__(self, other):
        return self._ewise_scalar(other, "truediv")

    def __rtruediv__(self, other):
        return self._ewise_scalar(other, "rtruediv")

    def __pow__(self, other):
        return self._ewise_scalar(other, "pow")

    def __rpow__(self, other):
        return self._ewise_scalar(other, "rpow")

    def __neg__(self):
        return self._ewise_scalar(-1.0, "times")
