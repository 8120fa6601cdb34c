import pickle

import numpy as np
import pytest

import drm
from drm.exceptions import DrmException, UnsupportedKeyType
from drm.io import IntWritable, LongWritable, Text, Writable, key_converter
from drm.keys import KeyKind, default_key_kind


class Coordinate(Writable):
    __slots__ = ("x",)

    def __init__(self, x):
        self.x = x


@pytest.mark.parametrize(
    "key_kind, expected",
    [
        (KeyKind.LONG, KeyKind.LONG),
        ("int", KeyKind.INT),
        ("INT32", KeyKind.INT),
        ("long", KeyKind.LONG),
        ("str", KeyKind.TEXT),
        ("string", KeyKind.TEXT),
        ("writable", KeyKind.WRITABLE),
        (int, KeyKind.INT),
        (np.int32, KeyKind.INT),
        (np.int64, KeyKind.LONG),
        (str, KeyKind.TEXT),
        (Text, KeyKind.WRITABLE),
        (Coordinate, KeyKind.WRITABLE),
    ],
)
def test_lookup(key_kind, expected):
    assert KeyKind.lookup(key_kind) is expected


@pytest.mark.parametrize("key_kind", [float, bool, bytes, "double", 3, None])
def test_lookup_unsupported(key_kind):
    with pytest.raises(UnsupportedKeyType):
        KeyKind.lookup(key_kind)


def test_unsupported_is_value_error():
    with pytest.raises(ValueError, match="Unsupported key type: float"):
        KeyKind.lookup(float)
    assert issubclass(UnsupportedKeyType, DrmException)


def test_positional():
    assert KeyKind.INT.is_positional
    assert not KeyKind.LONG.is_positional
    assert not KeyKind.TEXT.is_positional
    assert not KeyKind.WRITABLE.is_positional


def test_default_key_kind():
    assert default_key_kind() is KeyKind.INT
    with drm.config.set({"keys.default_kind": "text"}):
        assert default_key_kind() is KeyKind.TEXT


def test_key_converter():
    to_int = key_converter(KeyKind.INT)
    assert to_int(np.int32(7)) == IntWritable(7)
    assert key_converter(KeyKind.LONG)(2**40) == LongWritable(2**40)
    assert key_converter(KeyKind.TEXT)("row") == Text("row")
    c = Coordinate(1)
    assert key_converter(KeyKind.WRITABLE)(c) is c
    assert key_converter(KeyKind.WRITABLE, Coordinate)(c) is c
    with pytest.raises(UnsupportedKeyType, match="Do not know how to convert"):
        key_converter(KeyKind.WRITABLE, float)
    with pytest.raises(UnsupportedKeyType, match="Do not know how to convert"):
        key_converter("int")


def test_writable_ranges():
    assert IntWritable(2**31 - 1).value == 2**31 - 1
    assert IntWritable(-(2**31)).value == -(2**31)
    with pytest.raises(OverflowError, match="32-bit"):
        IntWritable(2**31)
    assert LongWritable(2**63 - 1).value == 2**63 - 1
    with pytest.raises(OverflowError, match="64-bit"):
        LongWritable(-(2**63) - 1)


def test_writable_values():
    assert IntWritable(1) != LongWritable(1)
    assert IntWritable(1) == IntWritable(np.int64(1))
    assert hash(Text("a")) == hash(Text("a"))
    assert Text(5).value == "5"
    assert repr(LongWritable(3)) == "LongWritable(3)"
    assert IntWritable.tag == "int"
    assert Text.tag == "text"
    assert Coordinate.tag == "writable"
    for w in [IntWritable(4), LongWritable(5), Text("x")]:
        assert pickle.loads(pickle.dumps(w)) == w
