from __future__ import annotations

import logging
from typing import Any, TypeVar

from .key import Key
from .paths import defaults_file
from .stores import NativeStore, open_store

logger = logging.getLogger("pydefaults")

T = TypeVar("T")


def _name(key: Key[Any] | str) -> str:
    return key.name if isinstance(key, Key) else key


class Defaults:
    """Typed access to a :class:`NativeStore`.

    ``defaults[key]`` never raises for missing or unreadable data; it falls
    back to the key's default, then the serializer's, then ``None``.
    """

    def __init__(self, store: NativeStore) -> None:
        self.store = store

    def __repr__(self) -> str:
        return f"Defaults({self.store!r})"

    @classmethod
    def standard(cls, suite: str = "pydefaults", fmt: str = "plist") -> Defaults:
        """Open the per-user defaults file for *suite*."""
        path = defaults_file(suite, fmt)
        logger.debug("opening defaults suite %s at %s", suite, path)
        return cls(open_store(path))

    def get(self, key: Key[T]) -> T | None:
        """Return the stored value without default fallback."""
        return key.serializer.get(key.name, self.store)

    def __getitem__(self, key: Key[T]) -> T | None:
        value = self.get(key)
        if value is None:
            return key.fallback()
        return value

    def __setitem__(self, key: Key[T], value: T | None) -> None:
        key.serializer.save(key.name, value, self.store)

    def __delitem__(self, key: Key[Any] | str) -> None:
        self.remove(key)

    def __contains__(self, key: Key[Any] | str) -> bool:
        return self.has_key(key)

    def has_key(self, key: Key[Any] | str) -> bool:
        return self.store.has_key(_name(key))

    def remove(self, key: Key[Any] | str) -> None:
        self.store.remove(_name(key))

    def remove_all(self) -> None:
        logger.debug("removing all keys from %r", self.store)
        self.store.remove_all()
