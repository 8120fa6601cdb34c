"""Row key kinds of a distributed row matrix.

The key kind is fixed when a matrix is built.  Integer (``INT``) keys are positional: the key
is the row index.  All other kinds are labels.
"""
import enum

import numpy as np

from .core.writable import Writable
from .exceptions import UnsupportedKeyType

_ALIASES = {
    "int": "INT",
    "int32": "INT",
    "long": "LONG",
    "int64": "LONG",
    "text": "TEXT",
    "str": "TEXT",
    "string": "TEXT",
    "writable": "WRITABLE",
}


class KeyKind(enum.Enum):
    INT = "int"
    LONG = "long"
    TEXT = "text"
    WRITABLE = "writable"

    def __repr__(self):
        return f"KeyKind.{self.name}"

    @property
    def is_positional(self):
        """Whether keys are row indices (and so may have gaps or duplicates)."""
        return self is KeyKind.INT

    @classmethod
    def lookup(cls, key_kind):
        """Resolve a key kind from a ``KeyKind``, a name, or a key type.

        >>> KeyKind.lookup("str")
        KeyKind.TEXT
        >>> KeyKind.lookup(np.int64)
        KeyKind.LONG

        Raises
        ------
        UnsupportedKeyType
            If ``key_kind`` names no known kind.

        """
        if isinstance(key_kind, cls):
            return key_kind
        if isinstance(key_kind, str):
            name = _ALIASES.get(key_kind.lower())
            if name is None:
                raise UnsupportedKeyType(f"Unknown key kind: {key_kind!r}")
            return cls[name]
        if isinstance(key_kind, type):
            if key_kind is bool:
                raise UnsupportedKeyType(f"Unsupported key type: {key_kind.__name__}")
            if key_kind is int or key_kind is np.int32:
                return cls.INT
            if key_kind is np.int64:
                return cls.LONG
            if key_kind is str:
                return cls.TEXT
            if issubclass(key_kind, Writable):
                return cls.WRITABLE
            raise UnsupportedKeyType(f"Unsupported key type: {key_kind.__name__}")
        raise UnsupportedKeyType(f"Unsupported key type: {type(key_kind).__name__}")


def default_key_kind():
    from . import config

    return KeyKind.lookup(config.get("keys.default_kind"))
