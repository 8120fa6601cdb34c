import numpy as np
import scipy.sparse as ss

from ..core.checkpointed import CheckpointedMatrix
from ..core.incore import InCoreMatrix
from ..engine import default_context
from ..keys import KeyKind


def _rows_of(m):
    """Split an in-core matrix into a list of rows and return its shape and row labels."""
    if type(m) is InCoreMatrix:
        return [row.copy() for row in m.rows()], m.shape, m.row_labels
    if ss.issparse(m):
        A = ss.csr_array(m)
        return [A[[i], :] for i in range(A.shape[0])], A.shape, None
    values = np.asarray(m)
    if values.ndim != 2:
        raise ValueError(f"A 2d array is required to parallelize a matrix; got {values.ndim}d")
    return [row.copy() for row in values], values.shape, None


def drm_wrap(
    collection, nrow=-1, ncol=-1, *, key_kind=None, can_have_missing_rows=False, **kwargs
):
    """Wrap an existing collection of ``(key, row)`` pairs as a :class:`~drm.CheckpointedMatrix`.

    Parameters
    ----------
    collection : LocalCollection or pyspark.RDD
    nrow : int, optional
        Number of rows if known.
    ncol : int, optional
        Number of columns if known.
    key_kind : KeyKind, str, or type, optional
    can_have_missing_rows : bool, default False
    **kwargs
        Passed on to ``CheckpointedMatrix``.

    Returns
    -------
    :class:`~drm.CheckpointedMatrix`

    """
    return CheckpointedMatrix(
        collection,
        nrow,
        ncol,
        key_kind=key_kind,
        can_have_missing_rows=can_have_missing_rows,
        **kwargs,
    )


def drm_parallelize(m, num_partitions=None, *, context=None, name=None):
    """Distribute the rows of an in-core matrix keyed by row index.

    Parameters
    ----------
    m : InCoreMatrix, np.ndarray, or scipy.sparse
    num_partitions : int, optional
        Defaults to ``config["engine.default_partitions"]``.
    context : LocalContext or SparkContextAdapter, optional
    name : str, optional

    Returns
    -------
    :class:`~drm.CheckpointedMatrix`

    """
    rows, (nrow, ncol), _ = _rows_of(m)
    if context is None:
        context = default_context()
    collection = context.parallelize(enumerate(rows), num_partitions)
    return CheckpointedMatrix(collection, nrow, ncol, key_kind=KeyKind.INT, name=name)


def drm_parallelize_with_row_labels(
    m, row_labels=None, num_partitions=None, *, context=None, name=None
):
    """Distribute the rows of an in-core matrix keyed by their text row labels.

    Parameters
    ----------
    m : InCoreMatrix, np.ndarray, or scipy.sparse
    row_labels : dict, optional
        Mapping from label to row index.  Defaults to ``m.row_labels``.  Every row needs a label.
    num_partitions : int, optional
    context : LocalContext or SparkContextAdapter, optional
    name : str, optional

    Returns
    -------
    :class:`~drm.CheckpointedMatrix`

    """
    rows, (nrow, ncol), labels = _rows_of(m)
    if row_labels is not None:
        labels = row_labels
    if labels is None:
        raise ValueError("Row labels are required; pass `row_labels=` or attach them to `m`")
    by_index = {int(idx): str(label) for label, idx in labels.items()}
    if sorted(by_index) != list(range(nrow)):
        raise ValueError(f"Every one of the {nrow} rows needs exactly one label")
    if context is None:
        context = default_context()
    collection = context.parallelize(
        ((by_index[i], row) for i, row in enumerate(rows)), num_partitions
    )
    return CheckpointedMatrix(collection, nrow, ncol, key_kind=KeyKind.TEXT, name=name)
