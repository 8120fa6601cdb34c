class DrmException(Exception):
    pass


class InvalidOperation(DrmException, ValueError):
    """The elementwise operation tag is not one of the known scalar operations."""


class DimensionOverflow(DrmException, ValueError):
    """The row count of a matrix can not be addressed by an in-core matrix.

    This is raised by :meth:`~drm.CheckpointedMatrix.collect` before any data is gathered.
    """


class UnsupportedKeyType(DrmException, ValueError):
    """There is no known serializable form for the row key type of a matrix."""
