"""Helpers for the row vectors stored in a distributed row matrix.

A dense row is a 1-d ``numpy.ndarray``.  A sparse row is a ``scipy.sparse`` array or matrix
with exactly one row.  The length of a sparse row is its logical width, not its number of
stored values.
"""
import numpy as np
import scipy.sparse as ss


def _is_sparse(row):
    return ss.issparse(row)


def is_dense_row(row):
    return not _is_sparse(row)


def row_length(row):
    if _is_sparse(row):
        return row.shape[-1]
    return len(row)


def row_nnz(row):
    if _is_sparse(row):
        return int(row.count_nonzero())
    return int(np.count_nonzero(row))


def as_dense_row(row, dtype=None):
    if _is_sparse(row):
        row = row.toarray().ravel()
    return np.asarray(row, dtype=dtype)


def as_sparse_row(row):
    if _is_sparse(row):
        return ss.csr_array(row, copy=True)
    return ss.csr_array(np.asarray(row)[None, :])
