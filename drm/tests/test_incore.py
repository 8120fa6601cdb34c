import numpy as np
import pytest
import scipy.sparse as ss

from drm import InCoreMatrix

from .conftest import dense_row, sparse_row

try:
    import pandas as pd
except ImportError:  # pragma: no cover (import)
    pd = None


@pytest.mark.parametrize("dense", [True, False])
def test_new(dense):
    m = InCoreMatrix(3, 4, dense=dense)
    assert m.shape == (3, 4)
    assert m.nrows == 3
    assert m.ncols == 4
    assert m.is_dense is dense
    assert m.nnz == 0
    assert m.dtype == np.float64
    assert m.row_labels is None
    with pytest.raises(ValueError, match="non-negative"):
        InCoreMatrix(-1, 2, dense=dense)
    with pytest.raises(TypeError):
        InCoreMatrix(1.5, 2, dense=dense)


@pytest.mark.parametrize("dense", [True, False])
def test_setitem_accepts_either_row_kind(dense):
    m = InCoreMatrix(3, 3, dense=dense)
    m[0] = dense_row([1, 0, 2])
    m[1] = sparse_row([0, 3, 0])
    m[2] = dense_row([4])
    np.testing.assert_array_equal(m.to_dense(), [[1, 0, 2], [0, 3, 0], [4, 0, 0]])
    assert m.nnz == 4
    m[0] = sparse_row([0, 0, 5])
    np.testing.assert_array_equal(m.to_dense()[0], [0, 0, 5])
    with pytest.raises(ValueError, match="does not fit"):
        m[1] = dense_row([1, 2, 3, 4])
    with pytest.raises(IndexError):
        m[3] = dense_row([1])


def test_sparse_setitem_drops_explicit_zeros():
    m = InCoreMatrix(1, 3, dense=False)
    row = ss.csr_array(([0.0, 1.0], [0, 2], [0, 2]), shape=(1, 3))
    m[0] = row
    assert m.nnz == 1
    assert row.nnz == 2


def test_getitem():
    m = InCoreMatrix.from_dense([[1, 2], [3, 4]])
    np.testing.assert_array_equal(m[1], [3, 4])
    np.testing.assert_array_equal(m[-1], [3, 4])
    s = InCoreMatrix.from_scipy_sparse(ss.csr_array([[0, 2], [3, 0]]))
    r = s[0]
    assert isinstance(r, ss.csr_array)
    assert r.shape == (1, 2)
    np.testing.assert_array_equal(r.toarray(), [[0, 2]])
    assert [row.shape for row in s.rows()] == [(1, 2), (1, 2)]


def test_from_dense():
    m = InCoreMatrix.from_dense([[1, 2, 3]], dtype=np.int64)
    assert m.dtype == np.int64
    assert m.shape == (1, 3)
    with pytest.raises(ValueError, match="must be 2d"):
        InCoreMatrix.from_dense([1, 2, 3])


def test_row_labels():
    m = InCoreMatrix.from_dense([[1, 2], [3, 4]], row_labels={"a": 1, "b": 0})
    np.testing.assert_array_equal(m.row("a"), [3, 4])
    np.testing.assert_array_equal(m.row("b"), [1, 2])
    with pytest.raises(KeyError):
        m.row("c")
    with pytest.raises(IndexError, match="out of range"):
        m.row_labels = {"x": 2}
    m.row_labels = {5: 0}
    assert m.row_labels == {"5": 0}
    m.row_labels = None
    with pytest.raises(KeyError, match="no row labels"):
        m.row("5")


def test_to_scipy_sparse():
    m = InCoreMatrix.from_dense([[0, 1], [2, 0]])
    for fmt in ["csr", "CSC", "coo", "lil"]:
        A = m.to_scipy_sparse(fmt)
        assert A.format == fmt.lower()
        np.testing.assert_array_equal(A.toarray(), [[0, 1], [2, 0]])
    with pytest.raises(ValueError, match="Invalid format"):
        m.to_scipy_sparse("dense")
    s = InCoreMatrix.from_scipy_sparse(m.to_scipy_sparse())
    A = s.to_scipy_sparse("lil")
    A[0, 0] = 9
    assert s.to_dense()[0, 0] == 0


def test_isequal():
    m = InCoreMatrix.from_dense([[0, 1], [2, 0]])
    s = InCoreMatrix.from_scipy_sparse(ss.csr_array([[0, 1], [2, 0]]))
    assert m.isequal(s)
    assert s.isequal(m)
    assert not m.isequal(InCoreMatrix(2, 3))
    assert not m.isequal(InCoreMatrix(2, 2))
    s.row_labels = {"a": 0}
    assert m.isequal(s)
    assert not m.isequal(s, check_labels=True)
    with pytest.raises(TypeError, match="Expected an InCoreMatrix"):
        m.isequal(np.zeros((2, 2)))


def test_repr():
    assert repr(InCoreMatrix(2, 3)) == "InCoreMatrix(dense, shape=(2, 3), dtype=float64)"
    m = InCoreMatrix(2, 1, dense=False)
    m.row_labels = {"a": 0, "b": 1}
    assert repr(m) == "InCoreMatrix(sparse, shape=(2, 1), dtype=float64, 2 row labels)"


@pytest.mark.skipif("not pd")
def test_to_pandas():
    m = InCoreMatrix.from_dense([[1.0, 2.0], [3.0, 4.0]])
    df = m.to_pandas()
    assert list(df.index) == [0, 1]
    np.testing.assert_array_equal(df.to_numpy(), [[1, 2], [3, 4]])
    m.row_labels = {"b": 1}
    df = m.to_pandas()
    assert list(df.index) == [0, "b"]
    assert list(df.loc["b"]) == [3.0, 4.0]
