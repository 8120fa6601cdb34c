from . import base
from .base import _recorder


def drmstr(arg):
    """Convert arg to a string as an argument in a recorded engine call."""
    if arg is None:
        return "None"
    name = getattr(arg, "name", None)
    if name is not None:
        return name
    if callable(arg):
        return getattr(arg, "__name__", "<function>")
    return repr(arg)


class Recorder:
    """Record the partitioned-collection operations issued by matrices.

    The recorder can use ``.start()`` and ``.stop()`` to enable/disable recording,
    or it can be used as a context manager.

    For example,

    >>> with Recorder() as rec:
    ...     A.cache()
    >>> rec.data[0]
    "persist(A, 'memory_only');"

    Currently, only one recorder will record at a time within a context.
    """

    __slots__ = "data", "_token", "max_rows", "_prev_recorder", "__weakref__"

    def __init__(self, *, start=True, max_rows=20):
        self.data = []
        self._token = None
        self._prev_recorder = None
        self.max_rows = max_rows
        if start:
            self.start()

    def record(self, method_name, owner, args, *, exc=None):
        val = f'{method_name}({", ".join(drmstr(x) for x in (owner, *args))});'
        if exc is not None:
            val += f" # ERROR: {type(exc).__name__}"
        self.data.append(val)
        base._prev_recorder = self

    def start(self):
        if self._token is None:
            self._prev_recorder = _recorder.get(base._prev_recorder)
            self._token = _recorder.set(self)
        base._prev_recorder = self

    def stop(self):
        if self._token is not None:
            _recorder.reset(self._token)
            self._token = None
        if base._prev_recorder is self or base._prev_recorder is None:
            base._prev_recorder = _recorder.get(self._prev_recorder)
        self._prev_recorder = None

    def clear(self):
        self.data.clear()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, type_, value, traceback):
        self.stop()

    def __iter__(self):
        yield from self.data

    def __len__(self):
        return len(self.data)

    def count(self, method_name):
        """Number of recorded calls to ``method_name``."""
        prefix = f"{method_name}("
        return sum(1 for line in self.data if line.startswith(prefix))

    @property
    def is_recording(self):
        return self._token is not None and _recorder.get(base._prev_recorder) is self

    def _get_repr_lines(self, indent=""):
        lines = []
        if self.max_rows is not None and len(self.data) > self.max_rows:
            lines.extend(f"{indent}{line}" for line in self.data[: self.max_rows // 2])
            lines.append("")
            lines.append(
                f"{indent}# {len(self.data) - self.max_rows} rows not shown; "
                "set `recorder.max_rows` attribute to show more (or less)"
            )
            lines.append("")
            lines.extend(f"{indent}{line}" for line in self.data[-((self.max_rows + 1) // 2) :])
        else:
            lines.extend(f"{indent}{line}" for line in self.data)
        return lines

    def _repr_markdown_(self):
        lines = self._get_repr_lines()
        status = "recording" if self.is_recording else "not recording"
        return f"**drm.Recorder** ({status})\n\n```python\n" + "\n".join(lines) + "\n```"

    def __repr__(self):
        lines = [f'drm.Recorder ({"" if self.is_recording else "not "}recording)']
        lines.append("-" * len(lines[0]))
        lines.extend(self._get_repr_lines(indent="  "))
        return "\n".join(lines)

