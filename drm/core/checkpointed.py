import logging
import operator
import random
import threading

import numpy as np

from .. import config
from ..engine import as_collection, check_storage_level
from ..exceptions import UnsupportedKeyType
from ..keys import KeyKind, default_key_kind
from .base import DrmLike, call
from .incore import InCoreMatrix
from .rows import is_dense_row, row_length, row_nnz
from .utils import safe_to_nonneg_int
from .writable import key_converter

logger = logging.getLogger(__name__)


def new_partitioning_tag():
    return random.getrandbits(63)


def _key_stats(kv):
    try:
        key = operator.index(kv[0])
    except TypeError:
        raise UnsupportedKeyType(
            f"Row key {kv[0]!r} of type {type(kv[0]).__name__} is not an integer, but the "
            "matrix has key_kind=int; pass a `key_kind` matching the keys"
        ) from None
    return (key, 1, key)


def _combine_key_stats(x, y):
    return (max(x[0], y[0]), x[1] + y[1], x[2] + y[2])


def _row_length(kv):
    return row_length(kv[1])


def _row_nnz(kv):
    return row_nnz(kv[1])


class CheckpointedMatrix(DrmLike):
    """A distributed row matrix backed by an already executable collection of rows.

    The wrapped collection holds ``(key, row)`` pairs scattered across partitions.  The number
    of rows and columns may be given; otherwise they are computed on first access and
    remembered.  Computing either dimension pins the collection with :meth:`cache` first so
    that all statistics come from the same data.

    Parameters
    ----------
    collection : LocalCollection or pyspark.RDD
        Collection of ``(key, row)`` pairs with unique keys.
    nrow : int, optional
        Number of rows; computed lazily if negative.
    ncol : int, optional
        Number of columns; computed lazily if negative.
    key_kind : KeyKind, str, or type, optional
        Kind of the row keys.  Defaults to ``config["keys.default_kind"]``.
    storage_level : str, optional
        Storage tier used by :meth:`cache`.  Defaults to ``config["cache.storage_level"]``.
    partitioning_tag : int, optional
        Matrices with equal tags are identically partitioned.  A fresh random tag is used if
        not given.
    can_have_missing_rows : bool, default False
        For int-keyed matrices of known ``nrow``, whether keys may have gaps or duplicates.
    name : str, optional

    """

    __slots__ = (
        "collection",
        "key_kind",
        "_key_type",
        "partitioning_tag",
        "int_fix_extra",
        "_nrow",
        "_ncol",
        "_can_have_missing_rows",
        "_storage_level",
        "_cached",
        "_lock",
    )
    _name_prefix = "drm"

    def __init__(
        self,
        collection,
        nrow=-1,
        ncol=-1,
        *,
        key_kind=None,
        storage_level=None,
        partitioning_tag=None,
        can_have_missing_rows=False,
        name=None,
    ):
        super().__init__(name)
        self.collection = as_collection(collection)
        self._key_type = key_kind if isinstance(key_kind, type) else None
        self.key_kind = default_key_kind() if key_kind is None else KeyKind.lookup(key_kind)
        if storage_level is not None:
            storage_level = check_storage_level(storage_level)
        self._storage_level = storage_level
        if partitioning_tag is None:
            partitioning_tag = new_partitioning_tag()
        self.partitioning_tag = partitioning_tag
        self._nrow = operator.index(nrow)
        self._ncol = operator.index(ncol)
        self._can_have_missing_rows = bool(can_have_missing_rows)
        # Gap between the row count implied by the largest int key and the actual row count
        self.int_fix_extra = 0
        self._cached = False
        self._lock = threading.RLock()

    def __del__(self):
        # it's difficult/dangerous to record the call, b/c `self.name` may not exist
        if getattr(self, "_cached", False):
            self.collection.unpersist(False)

    def __repr__(self):
        nrow = "?" if self._nrow < 0 else self._nrow
        ncol = "?" if self._ncol < 0 else self._ncol
        cached = ", cached" if self._cached else ""
        return (
            f"CheckpointedMatrix({self.name}, shape=({nrow}, {ncol}), "
            f"key_kind={self.key_kind.value}{cached})"
        )

    @property
    def context(self):
        return self.collection.context

    @property
    def is_cached(self):
        return self._cached

    @property
    def nrow(self):
        """Number of rows.

        For int keys this is the largest key plus one, so rows may be missing; see
        :attr:`can_have_missing_rows`.  For other keys this is the number of rows.
        """
        if self._nrow < 0:
            with self._lock:
                if self._nrow < 0:
                    self._nrow = self._compute_nrow()
        return self._nrow

    @property
    def ncol(self):
        """Number of columns: the length of the longest row."""
        if self._ncol < 0:
            with self._lock:
                if self._ncol < 0:
                    self._ncol = self._compute_ncol()
        return self._ncol

    @property
    def can_have_missing_rows(self):
        """Whether int keys are not exactly ``0..nrow-1``, each once.

        This may compute ``nrow``.  It is always False for keys that are not ``KeyKind.INT``.
        """
        self.nrow
        return self._can_have_missing_rows and self.key_kind.is_positional

    @property
    def nnz(self):
        """Total number of non-zero elements."""
        rows = self.cache().collection
        return call("fold", self, call("map", self, rows, _row_nnz), 0, operator.add)

    def checkpoint(self):
        return self

    def cache(self):
        """Pin the row collection in the configured storage tier.

        Only the first call issues ``persist``; later calls do nothing.

        Returns
        -------
        self

        """
        with self._lock:
            if not self._cached:
                level = self._storage_level
                if level is None:
                    level = check_storage_level(config.get("cache.storage_level"))
                call("persist", self, self.collection, level)
                self._cached = True
                logger.debug("Cached %s at storage level %s", self.name, level)
        return self

    def uncache(self):
        """Release the pinned row collection, if any, without waiting for it to be freed.

        Returns
        -------
        self

        """
        with self._lock:
            if self._cached:
                call("unpersist", self, self.collection, False)
                self._cached = False
                logger.debug("Uncached %s", self.name)
        return self

    def collect(self):
        """Gather all rows into a single :class:`~drm.InCoreMatrix`.

        If keys are ``KeyKind.INT``, each row is placed at the index given by its key.
        Otherwise rows are placed sequentially in an unspecified order, and ``str(key)`` of
        each row is bound to its index in ``row_labels`` of the result.

        The result is dense only if every row is dense.  This gathers the whole matrix in
        local memory and briefly needs about twice the size of the distributed rows.

        Raises
        ------
        DimensionOverflow
            If ``nrow`` is too large for an in-core matrix.

        Returns
        -------
        InCoreMatrix

        """
        cols = self.ncol
        rows = safe_to_nonneg_int(self.nrow)
        data = call("collect", self, self.collection)
        dense = all(is_dense_row(row) for _, row in data)
        logger.debug(
            "Collecting %s into a %s in-core matrix of shape (%d, %d)",
            self.name,
            "dense" if dense else "sparse",
            rows,
            cols,
        )
        m = InCoreMatrix(rows, cols, dense=dense, dtype=np.float64)
        if self.key_kind.is_positional:
            for key, row in data:
                m[key] = row
        else:
            for i, (_, row) in enumerate(data):
                m[i] = row
            m.row_labels = {str(key): i for i, (key, _) in enumerate(data)}
        return m

    def write(self, store):
        """Save ``(tagged_key, row)`` cells of this matrix into a row-oriented store.

        Keys are converted to ``IntWritable``, ``LongWritable`` or ``Text`` according to the
        key kind; ``Writable`` keys are passed through.

        Parameters
        ----------
        store : object
            Any object with a ``save(cells)`` method accepting a collection of pairs, such as
            :class:`~drm.io.MemoryRowStore`.

        Raises
        ------
        UnsupportedKeyType
            If the keys have no known tagged form.

        """
        key_to_writable = key_converter(self.key_kind, self._key_type)

        def to_cell(kv):
            return key_to_writable(kv[0]), kv[1]

        store.save(call("map", self, self.collection, to_cell))
        return store

    def _compute_nrow(self):
        rows = self.cache().collection
        if not self.key_kind.is_positional:
            nrow = call("count", self, rows)
            logger.debug("Computed nrow=%d for %s", nrow, self.name)
            return nrow

        # Max key, row count and key sum in one pass over the pinned rows
        stats = call("map", self, rows, _key_stats)
        max_key, row_count, key_sum = call("fold", self, stats, (-1, 0, 0), _combine_key_stats)
        nrow = max_key + 1
        self._can_have_missing_rows = (
            nrow != row_count or key_sum != row_count * (row_count - 1) // 2
        )
        self.int_fix_extra = max(nrow - row_count, 0)
        logger.debug(
            "Computed nrow=%d for %s (%d rows, key sum %d)", nrow, self.name, row_count, key_sum
        )
        if self._can_have_missing_rows:
            logger.warning(
                "Int keys of %s are not exactly 0..%d: %d rows present with max key %d",
                self.name,
                nrow - 1,
                row_count,
                max_key,
            )
        return nrow

    def _compute_ncol(self):
        rows = self.cache().collection
        ncol = max(call("fold", self, call("map", self, rows, _row_length), -1, max), 0)
        logger.debug("Computed ncol=%d for %s", ncol, self.name)
        return ncol
