"""In-process partitioned collections.

``LocalCollection`` follows the subset of the Spark RDD interface that distributed row
matrices rely on.  Transformations are lazy and are re-evaluated by every action unless the
collection has been persisted, in which case the first action pins the computed partitions
and later actions read them back.
"""
import functools
import itertools
import logging

from .. import config

logger = logging.getLogger(__name__)

STORAGE_LEVELS = frozenset(
    {
        "memory_only",
        "memory_only_ser",
        "memory_and_disk",
        "memory_and_disk_ser",
        "disk_only",
        "off_heap",
    }
)


def check_storage_level(level):
    level = str(level).lower()
    if level not in STORAGE_LEVELS:
        raise ValueError(
            f"Bad storage level: {level!r}.  Must be one of: {', '.join(sorted(STORAGE_LEVELS))}"
        )
    return level


def _default_partitions(num_slices):
    if num_slices is None:
        num_slices = config.get("engine.default_partitions")
    num_slices = int(num_slices)
    if num_slices < 1:
        raise ValueError(f"Number of partitions must be positive; got {num_slices}")
    return num_slices


class LocalContext:
    """Creates local collections; plays the role of a ``SparkContext``."""

    _id_counter = itertools.count()

    def __repr__(self):
        return "LocalContext()"

    def parallelize(self, data, num_slices=None):
        """Split ``data`` into ``num_slices`` contiguous partitions."""
        data = list(data)
        num_slices = _default_partitions(num_slices)
        size, extra = divmod(len(data), num_slices)
        partitions = []
        start = 0
        for i in range(num_slices):
            stop = start + size + (i < extra)
            partitions.append(data[start:stop])
            start = stop
        return LocalCollection(self, source=partitions)

    def empty(self):
        return LocalCollection(self, source=[])

    def union(self, collections):
        first, *rest = collections
        for other in rest:
            first = first.union(other)
        return first


class LocalCollection:
    __slots__ = (
        "_context",
        "_parent",
        "_func",
        "_source",
        "_pinned",
        "storage_level",
        "compute_count",
        "id",
        "__weakref__",
    )

    def __init__(self, context, *, source=None, parent=None, func=None):
        self._context = context
        self._source = source
        self._parent = parent
        self._func = func
        self._pinned = None
        self.storage_level = None
        # Number of times the partitions were computed from the parent
        self.compute_count = 0
        self.id = next(LocalContext._id_counter)

    def __repr__(self):
        cached = f", storage_level={self.storage_level!r}" if self.is_cached else ""
        return f"LocalCollection(id={self.id}, partitions={self.get_num_partitions()}{cached})"

    @property
    def context(self):
        return self._context

    @property
    def is_cached(self):
        return self.storage_level is not None

    def get_num_partitions(self):
        if self._source is not None:
            return len(self._source)
        if type(self._parent) is tuple:
            return sum(p.get_num_partitions() for p in self._parent)
        return self._parent.get_num_partitions()

    def _partitions(self):
        if self._pinned is not None:
            return self._pinned
        if self._source is not None:
            partitions = self._source
        elif type(self._parent) is tuple:
            partitions = [part for p in self._parent for part in p._partitions()]
        else:
            partitions = [
                list(self._func(i, iter(part)))
                for i, part in enumerate(self._parent._partitions())
            ]
        self.compute_count += 1
        if self.is_cached:
            self._pinned = partitions
        return partitions

    # Transformations
    def map_partitions_with_index(self, f):
        return LocalCollection(self._context, parent=self, func=f)

    def map_partitions(self, f):
        return self.map_partitions_with_index(lambda _, it: f(it))

    def map(self, f):
        return self.map_partitions_with_index(lambda _, it: map(f, it))

    def filter(self, f):
        return self.map_partitions_with_index(lambda _, it: filter(f, it))

    def keys(self):
        return self.map(lambda kv: kv[0])

    def values(self):
        return self.map(lambda kv: kv[1])

    def union(self, other):
        return LocalCollection(self._context, parent=(self, other))

    # Actions
    def fold(self, zero, op):
        """Fold each partition starting from ``zero``, then fold the partial results."""
        partials = [functools.reduce(op, part, zero) for part in self._partitions()]
        return functools.reduce(op, partials, zero)

    def aggregate(self, zero, seq_op, comb_op):
        partials = [functools.reduce(seq_op, part, zero) for part in self._partitions()]
        return functools.reduce(comb_op, partials, zero)

    def count(self):
        return sum(len(part) for part in self._partitions())

    def sum(self):
        return self.fold(0, lambda x, y: x + y)

    def max(self):
        return functools.reduce(max, self.collect())

    def collect(self):
        return [item for part in self._partitions() for item in part]

    def glom(self):
        return [list(part) for part in self._partitions()]

    # Caching
    def persist(self, storage_level="memory_only"):
        storage_level = check_storage_level(storage_level)
        if self.storage_level is not None and self.storage_level != storage_level:
            raise ValueError(
                f"Cannot change storage level of a collection after it was already assigned: "
                f"{self.storage_level!r} -> {storage_level!r}"
            )
        self.storage_level = storage_level
        logger.debug("Persisting collection %s at %s", self.id, storage_level)
        return self

    cache = persist

    def unpersist(self, blocking=False):
        logger.debug("Unpersisting collection %s (blocking=%s)", self.id, blocking)
        self.storage_level = None
        self._pinned = None
        return self

    # Spark spellings
    mapPartitions = map_partitions
    mapPartitionsWithIndex = map_partitions_with_index
    getNumPartitions = get_num_partitions
