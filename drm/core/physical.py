"""Evaluation of logical expressions into checkpointed matrices."""
import logging
from collections import Counter

import numpy as np
import scipy.sparse as ss

from .base import call
from .checkpointed import CheckpointedMatrix, new_partitioning_tag
from .rows import as_dense_row, as_sparse_row, is_dense_row, row_length
from .utils import safe_to_nonneg_int

logger = logging.getLogger(__name__)


def fix_int_consistency(A):
    """Return rows of int-keyed ``A`` with keys exactly ``0..nrow-1``, each once.

    Missing keys get all-zero sparse rows, rows sharing a key are summed, and keys outside
    ``0..nrow-1`` are dropped.  The returned collection is partitioned differently than
    ``A.collection`` when anything had to be fixed.

    Returns
    -------
    collection, bool
        The rows, and whether they differ from ``A.collection``.

    """
    if not A.can_have_missing_rows:
        return A.collection, False
    nrow = safe_to_nonneg_int(A.nrow)
    ncol = A.ncol
    rows = A.cache().collection
    key_counts = Counter(int(k) for k in call("collect", A, call("keys", A, rows)))
    duplicated = {k for k, n in key_counts.items() if n > 1}
    missing = [k for k in range(nrow) if k not in key_counts]
    logger.debug(
        "Fixing int keys of %s: %d missing rows (int_fix_extra=%d), %d duplicated keys",
        A.name,
        len(missing),
        A.int_fix_extra,
        len(duplicated),
    )

    def keep(kv):
        key = int(kv[0])
        return 0 <= key < nrow and key not in duplicated

    fixed = [call("filter", A, rows, keep)]
    fixes = [(k, ss.csr_array((1, ncol))) for k in missing]
    if duplicated:

        def is_duplicated(kv):
            return int(kv[0]) in duplicated

        merged = {}
        dup_rows = call("collect", A, call("filter", A, rows, is_duplicated))
        for key, row in dup_rows:
            key = int(key)
            if not 0 <= key < nrow:
                continue
            row = as_dense_row(row, dtype=np.float64)
            acc = merged.setdefault(key, np.zeros(ncol))
            acc[: len(row)] += row
        fixes.extend(merged.items())
    if fixes:
        num_slices = max(1, min(len(fixes), rows.get_num_partitions()))
        fixed.append(A.context.parallelize(fixes, num_slices))
    return A.context.union(fixed), True


def exec_aew_scalar(expr):
    """Compute ``op(A, scalar)`` row by row.

    Rows stay sparse when the operation maps zero to zero; otherwise they become dense.
    """
    A = expr.A.checkpoint()
    op = expr.op
    scalar = expr.scalar
    ncol = A.ncol
    rows, was_fixed = fix_int_consistency(A)
    keeps_zero = op.keeps_zero(scalar)

    def apply_row(kv):
        key, row = kv
        if keeps_zero and not is_dense_row(row):
            row = as_sparse_row(row).astype(np.float64)
            row.data = op(row.data, scalar)
            return key, row
        values = np.zeros(ncol)
        values[: row_length(row)] = as_dense_row(row, dtype=np.float64)
        return key, op(values, scalar)

    result = call("map", A, rows, apply_row)
    return CheckpointedMatrix(
        result,
        A.nrow,
        ncol,
        key_kind=A._key_type or A.key_kind,
        partitioning_tag=new_partitioning_tag() if was_fixed else A.partitioning_tag,
        can_have_missing_rows=False,
    )
