"""Adapter that lets a ``pyspark.RDD`` back a distributed row matrix."""
from ._local import check_storage_level


def _storage_level(name):
    from pyspark import StorageLevel

    # Python rows are always serialized; pyspark has no separate *_SER levels
    name = check_storage_level(name).upper().replace("_SER", "")
    return getattr(StorageLevel, name)


class SparkContextAdapter:
    __slots__ = ("sc",)

    def __init__(self, sc):
        self.sc = sc

    def __repr__(self):
        return f"SparkContextAdapter({self.sc!r})"

    def parallelize(self, data, num_slices=None):
        return SparkCollection(self.sc.parallelize(list(data), num_slices))

    def empty(self):
        return SparkCollection(self.sc.emptyRDD())

    def union(self, collections):
        return SparkCollection(self.sc.union([c.rdd for c in collections]))


class SparkCollection:
    __slots__ = ("rdd",)

    def __init__(self, rdd):
        self.rdd = rdd

    def __repr__(self):
        return f"SparkCollection({self.rdd!r})"

    @property
    def context(self):
        return SparkContextAdapter(self.rdd.context)

    @property
    def is_cached(self):
        return self.rdd.is_cached

    @property
    def id(self):
        return self.rdd.id()

    def get_num_partitions(self):
        return self.rdd.getNumPartitions()

    def map_partitions_with_index(self, f):
        return SparkCollection(self.rdd.mapPartitionsWithIndex(f))

    def map_partitions(self, f):
        return SparkCollection(self.rdd.mapPartitions(f))

    def map(self, f):
        return SparkCollection(self.rdd.map(f))

    def filter(self, f):
        return SparkCollection(self.rdd.filter(f))

    def keys(self):
        return SparkCollection(self.rdd.keys())

    def values(self):
        return SparkCollection(self.rdd.values())

    def union(self, other):
        return SparkCollection(self.rdd.union(other.rdd))

    def fold(self, zero, op):
        return self.rdd.fold(zero, op)

    def aggregate(self, zero, seq_op, comb_op):
        return self.rdd.aggregate(zero, seq_op, comb_op)

    def count(self):
        return self.rdd.count()

    def sum(self):
        return self.rdd.sum()

    def max(self):
        return self.rdd.max()

    def collect(self):
        return self.rdd.collect()

    def glom(self):
        return self.rdd.glom().collect()

    def persist(self, storage_level="memory_only"):
        self.rdd.persist(_storage_level(storage_level))
        return self

    def unpersist(self, blocking=False):
        self.rdd.unpersist(blocking=blocking)
        return self
