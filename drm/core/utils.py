from operator import index

import numpy as np

from .. import config
from ..exceptions import DimensionOverflow


def max_collect_rows():
    """Largest number of rows an in-core matrix may have."""
    limit = config.get("collect.max_rows")
    if limit is None:
        return int(np.iinfo(np.intp).max)
    return index(limit)


def safe_to_nonneg_int(n):
    """Check that ``n`` can be used as the row count of an in-core matrix.

    Raises
    ------
    DimensionOverflow
        If ``n`` is negative or larger than ``max_collect_rows()``.

    """
    n = index(n)
    limit = max_collect_rows()
    if n < 0:
        raise DimensionOverflow(f"Row count must be non-negative; got {n}")
    if n > limit:
        raise DimensionOverflow(
            f"Row count {n} exceeds the addressable row limit of an in-core matrix ({limit})"
        )
    return n