from importlib import import_module as _import_module


def get_config():
    from pathlib import Path

    import donfig
    import yaml

    config = donfig.Config("drm")
    path = Path(__file__).parent / "drm.yaml"
    with path.open() as f:
        defaults = yaml.safe_load(f)
    config.update_defaults(defaults)
    return config


config = get_config()
del get_config

_SPECIAL_ATTRS = {
    "AewScalar",
    "CheckpointedMatrix",
    "InCoreMatrix",
    "Recorder",
    "core",
    "engine",
    "exceptions",
    "io",
    "keys",
    "ops",
}
_CLASS_MODULES = {
    "AewScalar": "expr",
    "CheckpointedMatrix": "checkpointed",
    "InCoreMatrix": "incore",
    "Recorder": "recorder",
}


def __getattr__(name):
    """Load classes and submodules on first use."""
    if name in _SPECIAL_ATTRS:
        if name not in globals():
            _load(name)
        return globals()[name]
    if name == "__version__":
        from importlib.metadata import version

        try:
            return globals().setdefault("__version__", version("python-drm"))
        except Exception as exc:  # pragma: no cover (safety)
            raise AttributeError(
                "`drm.__version__` not available. This may mean python-drm was "
                "incorrectly installed or not installed at all. For local development, you may "
                "want to do an editable install via `python -m pip install -e path/to/drm`."
            ) from exc
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    names = globals().keys() | _SPECIAL_ATTRS
    names.add("__version__")
    return list(names)


def _load(name):
    if name in _CLASS_MODULES:
        module = _import_module(f".core.{_CLASS_MODULES[name]}", __name__)
        globals()[name] = getattr(module, name)
    else:
        # Everything else is a module
        globals()[name] = _import_module(f".{name}", __name__)


__all__ = [key for key in __dir__() if not key.startswith("_")]
