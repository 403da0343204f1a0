"""Native stores and the file store registry."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from .base import FileStore, NativeStore
from .memory import MemoryStore

_REGISTRY: dict[str, type[FileStore]] = {}


def register_store(store: type[FileStore]) -> type[FileStore]:
    """Register a file store class and return it for decorator use."""
    for suf in store.suffixes:
        _REGISTRY[suf] = store
    return store


def open_store(path: Path | str, **kwargs: Any) -> FileStore:
    path = Path(path)
    store_cls = _REGISTRY.get(path.suffix.lower())
    if store_cls is None:
        raise ValueError(f"No store for {path.suffix!r}")
    return store_cls(path, **kwargs)


# register default stores
from .plist_store import PlistStore  # noqa: E402
from .yaml_store import YamlStore  # noqa: E402

__all__ = [
    "FileStore",
    "MemoryStore",
    "NativeStore",
    "PlistStore",
    "YamlStore",
    "open_store",
    "register_store",
]
