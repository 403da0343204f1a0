"""MemoryStore: dict-backed store for tests and short-lived processes."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from ..archive import Archiver
from .base import NativeStore


class MemoryStore(NativeStore):
    """In-memory store.  Data is lost on process exit."""

    def __init__(
        self,
        initial: Mapping[str, Any] | None = None,
        *,
        archiver: Archiver | None = None,
    ) -> None:
        super().__init__(archiver=archiver)
        self._data: dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def __repr__(self) -> str:
        return f"MemoryStore({len(self._data)} keys)"

    def get_object(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    def _write(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
