import pickle

import numpy as np
import pytest

import drm
from drm import ops
from drm.exceptions import DimensionOverflow, DrmException, InvalidOperation


def test_lazy_attributes():
    for name in ["AewScalar", "CheckpointedMatrix", "InCoreMatrix", "Recorder"]:
        assert getattr(drm, name).__name__ == name
        assert name in dir(drm)
        assert name in drm.__all__
    assert drm.io.drm_parallelize is not None
    assert drm.engine.LocalContext is not None
    assert drm.keys.KeyKind.INT.value == "int"
    with pytest.raises(AttributeError, match="has no attribute 'Vector'"):
        drm.Vector


def test_config_defaults():
    assert drm.config.get("cache.storage_level") == "memory_only"
    assert drm.config.get("collect.max_rows") is None
    assert drm.config.get("keys.default_kind") == "int"
    with drm.config.set({"collect.max_rows": 10}):
        assert drm.config.get("collect.max_rows") == 10
    assert drm.config.get("collect.max_rows") is None


def test_exceptions():
    for exc in [InvalidOperation, DimensionOverflow, drm.exceptions.UnsupportedKeyType]:
        assert issubclass(exc, DrmException)
        assert issubclass(exc, ValueError)


def test_ops_lookup():
    assert ops.lookup("plus") is ops.plus
    assert ops.lookup("PLUS") is ops.plus
    assert ops.lookup("+") is ops.plus
    assert ops.lookup("^:") is ops.rpow
    assert ops.lookup(ops.minus) is ops.minus
    with pytest.raises(InvalidOperation, match="Valid ops: 'plus'"):
        ops.lookup("%")
    with pytest.raises(InvalidOperation):
        ops.lookup(3)
    assert "plus" in dir(ops)
    assert repr(ops.truediv) == "ops.truediv"
    assert pickle.loads(pickle.dumps(ops.rminus)) is ops.rminus


@pytest.mark.parametrize(
    "op, scalar, expected",
    [
        ("plus", 2, [2, 3, 5]),
        ("minus", 2, [-2, -1, 1]),
        ("rminus", 2, [2, 1, -1]),
        ("times", 2, [0, 2, 6]),
        ("truediv", 2, [0, 0.5, 1.5]),
        ("pow", 2, [0, 1, 9]),
        ("rpow", 2, [1, 2, 8]),
    ],
)
def test_ops_apply(op, scalar, expected):
    values = np.array([0.0, 1.0, 3.0])
    np.testing.assert_allclose(ops.lookup(op)(values, scalar), expected)


def test_ops_keep_zero():
    assert ops.plus.keeps_zero(0)
    assert not ops.plus.keeps_zero(1)
    assert ops.times.keeps_zero(-3.5)
    assert ops.truediv.keeps_zero(2)
    assert not ops.truediv.keeps_zero(0)
    assert ops.pow.keeps_zero(2)
    assert not ops.pow.keeps_zero(0)
    assert not ops.rtruediv.keeps_zero(2)
    assert not ops.rpow.keeps_zero(2)
    assert ops.rminus.keeps_zero(0)
