from ._local import STORAGE_LEVELS, LocalCollection, LocalContext, check_storage_level
from ._spark import SparkCollection, SparkContextAdapter

_default_context = None


def default_context():
    global _default_context
    if _default_context is None:
        _default_context = LocalContext()
    return _default_context


def parallelize(data, num_slices=None):
    """Distribute ``data`` into a ``LocalCollection`` using the default context."""
    return default_context().parallelize(data, num_slices)


def as_collection(obj):
    """Return a partitioned collection usable as the rows of a matrix.

    Local and already-adapted collections are returned unchanged; a ``pyspark.RDD`` is wrapped
    in a ``SparkCollection``.
    """
    if isinstance(obj, (LocalCollection, SparkCollection)):
        return obj
    try:
        from pyspark import RDD
    except ImportError:  # pragma: no cover (import)
        RDD = None
    if RDD is not None and isinstance(obj, RDD):
        return SparkCollection(obj)
    raise TypeError(
        f"Expected a LocalCollection or a pyspark RDD of (key, row) pairs; got {type(obj)}"
    )
