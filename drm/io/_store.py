from ..core.writable import Writable


class MemoryRowStore:
    """Row-oriented store that keeps saved ``(tagged_key, row)`` cells in memory.

    >>> store = A.write(MemoryRowStore())
    >>> store.cells[0]
    (IntWritable(0), array([1., 2.]))

    """

    __slots__ = ("cells",)

    def __init__(self):
        self.cells = []

    def __repr__(self):
        return f"MemoryRowStore({len(self.cells)} cells)"

    def __len__(self):
        return len(self.cells)

    def save(self, cells):
        for key, row in cells.collect():
            if not isinstance(key, Writable):
                raise TypeError(f"Store keys must be Writable; got {type(key)}")
            self.cells.append((key, row))

    def to_dict(self):
        """Map each tagged key to its row; later cells win for repeated keys."""
        return dict(self.cells)
