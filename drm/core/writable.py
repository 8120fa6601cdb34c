"""Tagged cells understood by row-oriented stores.

A store receives ``(tagged_key, row)`` pairs.  Keys of a matrix are converted to one of the
cell types below once per write; see :func:`key_converter`.
"""
from ..exceptions import UnsupportedKeyType


class Writable:
    """Base class for values a row-oriented store can persist as-is.

    Subclass this for custom key types; such keys are passed to the store unchanged.
    """

    __slots__ = ()
    tag = "writable"


class _ValueWritable(Writable):
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        return type(self) is type(other) and self.value == other.value

    def __hash__(self):
        return hash((type(self).__name__, self.value))

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r})"

    def __reduce__(self):
        return type(self), (self.value,)


class IntWritable(_ValueWritable):
    __slots__ = ()
    tag = "int"

    def __init__(self, value):
        value = int(value)
        if not -(2**31) <= value < 2**31:
            raise OverflowError(f"IntWritable value out of 32-bit range: {value}")
        super().__init__(value)


class LongWritable(_ValueWritable):
    __slots__ = ()
    tag = "long"

    def __init__(self, value):
        value = int(value)
        if not -(2**63) <= value < 2**63:
            raise OverflowError(f"LongWritable value out of 64-bit range: {value}")
        super().__init__(value)


class Text(_ValueWritable):
    __slots__ = ()
    tag = "text"

    def __init__(self, value):
        super().__init__(str(value))


def _passthrough(key):
    return key


def key_converter(key_kind, key_type=None):
    """Return the function that turns one row key into its tagged cell.

    The dispatch happens here, once, so that writing rows only calls the returned function.

    Parameters
    ----------
    key_kind : KeyKind
        Key kind of the matrix being written.
    key_type : type, optional
        Concrete key class for ``KeyKind.WRITABLE`` matrices.

    Returns
    -------
    callable

    """
    from ..keys import KeyKind

    if key_kind is KeyKind.INT:
        return IntWritable
    if key_kind is KeyKind.LONG:
        return LongWritable
    if key_kind is KeyKind.TEXT:
        return Text
    if key_kind is KeyKind.WRITABLE:
        if key_type is not None and not (
            isinstance(key_type, type) and issubclass(key_type, Writable)
        ):
            raise UnsupportedKeyType(
                f"Do not know how to convert key type {key_type!r} to Writable."
            )
        return _passthrough
    raise UnsupportedKeyType(f"Do not know how to convert key kind {key_kind!r} to Writable.")
