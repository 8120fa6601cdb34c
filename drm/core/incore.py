from operator import index as _index

import numpy as np
import scipy.sparse as ss

from .rows import as_dense_row, as_sparse_row, row_length


class InCoreMatrix:
    """A single-machine matrix with either a dense or a sparse backing.

    Rows are assigned by index (``m[i] = row``) and may be either dense numpy rows or sparse
    scipy rows regardless of the backing.  String row labels can be attached as a mapping
    from label to row index.

    Parameters
    ----------
    nrows : int
        Number of rows.
    ncols : int
        Number of columns.
    dense : bool, default True
        Whether to back the matrix by a 2d numpy array or by a ``scipy.sparse.lil_array``.
    dtype : dtype, default float64

    """

    __slots__ = "_data", "_row_labels", "__weakref__"

    def __init__(self, nrows, ncols, *, dense=True, dtype=np.float64):
        nrows = _index(nrows)
        ncols = _index(ncols)
        if nrows < 0 or ncols < 0:
            raise ValueError(f"Matrix dimensions must be non-negative; got ({nrows}, {ncols})")
        if dense:
            self._data = np.zeros((nrows, ncols), dtype=dtype)
        else:
            self._data = ss.lil_array((nrows, ncols), dtype=dtype)
        self._row_labels = None

    @classmethod
    def _from_data(cls, data, row_labels=None):
        rv = object.__new__(cls)
        rv._data = data
        rv._row_labels = None
        if row_labels is not None:
            rv.row_labels = row_labels
        return rv

    @classmethod
    def from_dense(cls, values, *, dtype=None, row_labels=None):
        """Create a dense-backed matrix from a 2d array or list of lists."""
        values = np.array(values, dtype=dtype)
        if values.ndim != 2:
            raise ValueError(f"values array must be 2d to create a Matrix; got {values.ndim}d")
        return cls._from_data(values, row_labels)

    @classmethod
    def from_scipy_sparse(cls, A, *, row_labels=None):
        """Create a sparse-backed matrix from a scipy.sparse array or matrix."""
        return cls._from_data(ss.lil_array(A), row_labels)

    def __repr__(self):
        kind = "dense" if self.is_dense else "sparse"
        labels = "" if self._row_labels is None else f", {len(self._row_labels)} row labels"
        return f"InCoreMatrix({kind}, shape={self.shape}, dtype={self.dtype}{labels})"

    @property
    def shape(self):
        return self._data.shape

    @property
    def nrows(self):
        return self._data.shape[0]

    @property
    def ncols(self):
        return self._data.shape[1]

    @property
    def dtype(self):
        return self._data.dtype

    @property
    def is_dense(self):
        return isinstance(self._data, np.ndarray)

    @property
    def nnz(self):
        if self.is_dense:
            return int(np.count_nonzero(self._data))
        return int(self._data.count_nonzero())

    @property
    def row_labels(self):
        return self._row_labels

    @row_labels.setter
    def row_labels(self, bindings):
        if bindings is None:
            self._row_labels = None
            return
        labels = {}
        for label, idx in dict(bindings).items():
            idx = _index(idx)
            if not 0 <= idx < self.nrows:
                raise IndexError(
                    f"Row label {label!r} out of range: index={idx}, size={self.nrows}"
                )
            labels[str(label)] = idx
        self._row_labels = labels

    def _check_index(self, i):
        i = _index(i)
        if i < 0:
            i += self.nrows
        if not 0 <= i < self.nrows:
            raise IndexError(f"Index out of range: index={i}, size={self.nrows}")
        return i

    def __getitem__(self, i):
        i = self._check_index(i)
        if self.is_dense:
            return self._data[i]
        return ss.csr_array(self._data[[i], :])

    def __setitem__(self, i, row):
        i = self._check_index(i)
        n = row_length(row)
        if n > self.ncols:
            raise ValueError(
                f"Row of length {n} does not fit in a matrix with {self.ncols} columns"
            )
        if self.is_dense:
            self._data[i, :n] = as_dense_row(row)
            self._data[i, n:] = 0
            return
        r = as_sparse_row(row)
        r.sum_duplicates()
        r.eliminate_zeros()
        self._data.rows[i] = r.indices.tolist()
        self._data.data[i] = r.data.astype(self.dtype).tolist()

    def row(self, label):
        """Return the row bound to ``label``."""
        if self._row_labels is None:
            raise KeyError(f"Matrix has no row labels; can not look up {label!r}")
        return self[self._row_labels[str(label)]]

    def rows(self):
        for i in range(self.nrows):
            yield self[i]

    def to_dense(self):
        """Return a copy of the values as a 2d numpy array."""
        if self.is_dense:
            return self._data.copy()
        return self._data.toarray()

    def to_scipy_sparse(self, format="csr"):
        """Return the values as a scipy.sparse array.

        Parameters
        ----------
        format : str
            {'bsr', 'csr', 'csc', 'coo', 'lil', 'dia', 'dok'}

        """
        format = format.lower()
        if format not in {"bsr", "csr", "csc", "coo", "lil", "dia", "dok"}:
            raise ValueError(f"Invalid format: {format}")
        if self.is_dense:
            return ss.coo_array(self._data).asformat(format)
        return self._data.asformat(format, copy=True)

    def to_pandas(self):
        """Return the values as a pandas DataFrame indexed by row label when available."""
        import pandas as pd

        index = None
        if self._row_labels is not None:
            by_index = {idx: label for label, idx in self._row_labels.items()}
            index = [by_index.get(i, i) for i in range(self.nrows)]
        return pd.DataFrame(self.to_dense(), index=index)

    def isequal(self, other, *, check_labels=False):
        """Whether ``other`` has the same shape and values (backing may differ)."""
        if type(other) is not InCoreMatrix:
            raise TypeError(f"Expected an InCoreMatrix; got {type(other)}")
        if self.shape != other.shape:
            return False
        if check_labels and self._row_labels != other._row_labels:
            return False
        return np.array_equal(self.to_dense(), other.to_dense())
