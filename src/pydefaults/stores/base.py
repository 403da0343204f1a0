from __future__ import annotations

import contextlib
import copy
import datetime as dt
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from threading import RLock
from typing import Any
from urllib.parse import SplitResult, urlsplit

from ..archive import Archiver, PickleArchiver
from ..errors import ArchiveError, StoreLoadError, StoreWriteError, UnsupportedValueError

logger = logging.getLogger("pydefaults.stores")

_TRUE_STRINGS = {"yes", "true", "y", "t"}


class NativeStore(ABC):
    """Abstract flat key-value store holding native values.

    Native kinds are ``str``, ``int``, ``float``, ``bool``, ``bytes``,
    ``datetime.datetime`` and lists/dicts of those.  Subclasses provide raw
    access; the typed accessors are shared.
    """

    def __init__(self, *, archiver: Archiver | None = None) -> None:
        self.archiver = archiver or PickleArchiver()

    @abstractmethod
    def get_object(self, key: str) -> Any | None:
        """Return the raw native value at *key*, or ``None`` if absent."""

    @abstractmethod
    def _write(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete *key*.  No-op if it does not exist."""

    @abstractmethod
    def keys(self) -> list[str]:
        pass

    # ----------------------------------------------------------- writing
    def set(self, key: str, value: Any) -> None:
        """Store *value* at *key*; ``None`` removes the slot."""
        if value is None:
            self.remove(key)
            return
        self._write(key, self._to_native(value))

    def _to_native(self, value: Any) -> Any:
        if isinstance(value, SplitResult):
            return self.archiver.archive(value)
        # subclasses (enum members and the like) are stored as the plain type
        if isinstance(value, bool):
            return bool(value)
        if isinstance(value, str):
            return str.__str__(value)
        if isinstance(value, int):
            return int(value)
        if isinstance(value, float):
            return float(value)
        if isinstance(value, dt.datetime):
            return value
        if isinstance(value, bytes | bytearray | memoryview):
            return bytes(value)
        if isinstance(value, list | tuple):
            return [self._to_native(item) for item in value]
        if isinstance(value, Mapping) and all(isinstance(k, str) for k in value):
            return {k: self._to_native(v) for k, v in value.items()}
        raise UnsupportedValueError(
            f"{type(value).__name__} has no native representation"
        )

    # ----------------------------------------------------------- reading
    def get_string(self, key: str) -> str | None:
        value = self.get_object(key)
        if isinstance(value, str):
            return value
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return None

    def get_number(self, key: str) -> int | float | None:
        """Return the number at *key*.  Strings are never parsed."""
        value = self.get_object(key)
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int | float):
            return value
        return None

    def get_bool(self, key: str) -> bool:
        """Lenient boolean read: absence is ``False`` and text is parsed."""
        value = self.get_object(key)
        if isinstance(value, int | float):
            return bool(value)
        if isinstance(value, str):
            text = value.strip().lower()
            if text in _TRUE_STRINGS:
                return True
            try:
                return int(text) != 0
            except ValueError:
                return False
        return False

    def get_data(self, key: str) -> bytes | None:
        value = self.get_object(key)
        return value if isinstance(value, bytes) else None

    def get_array(self, key: str) -> list[Any] | None:
        value = self.get_object(key)
        return value if isinstance(value, list) else None

    def get_dictionary(self, key: str) -> dict[str, Any] | None:
        value = self.get_object(key)
        return value if isinstance(value, dict) else None

    def get_url(self, key: str) -> SplitResult | None:
        """Return a locator from an archived blob or a path/URL string."""
        value = self.get_object(key)
        if isinstance(value, bytes):
            try:
                url = self.archiver.unarchive(value)
            except ArchiveError as exc:
                logger.debug("cannot unarchive url at %s: %s", key, exc)
                return None
            return url if isinstance(url, SplitResult) else None
        if isinstance(value, str) and value:
            parsed = urlsplit(value)
            if parsed.scheme and "://" in value:
                return parsed
            return urlsplit(Path(value).expanduser().absolute().as_uri())
        return None

    # ------------------------------------------------------------- misc
    def has_key(self, key: str) -> bool:
        return self.get_object(key) is not None

    def remove_all(self) -> None:
        for key in list(self.keys()):
            self.remove(key)

    def dictionary_representation(self) -> dict[str, Any]:
        return {key: self.get_object(key) for key in self.keys()}


class FileStore(NativeStore):
    """Store persisting its whole mapping to one file.

    The file is read on first access and rewritten atomically after every
    change.  Call :meth:`reload` to pick up changes made by other processes.
    """

    suffixes: tuple[str, ...] = ()

    def __init__(self, path: Path | str, *, archiver: Archiver | None = None) -> None:
        super().__init__(archiver=archiver)
        self.path = Path(path)
        self._lock = RLock()
        self._cache: dict[str, Any] | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"

    @abstractmethod
    def _load(self, raw: bytes) -> Any:
        pass

    @abstractmethod
    def _dump(self, data: Mapping[str, Any]) -> bytes:
        pass

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        raw = self.path.read_bytes()
        if raw.strip() == b"":
            return {}
        try:
            data = self._load(raw)
        except StoreLoadError:
            raise
        except Exception as exc:
            logger.warning("Failed to read store %s: %s", self.path, exc)
            raise StoreLoadError(str(exc)) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("Failed to read store %s: root is not a mapping", self.path)
            raise StoreLoadError(f"Root of {self.path.name} must be a mapping")
        return data

    def _data(self) -> dict[str, Any]:
        with self._lock:
            if self._cache is None:
                self._cache = self._read()
            return self._cache

    def _flush(self) -> None:
        data = self._data()
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            payload = self._dump(data)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(payload)
            tmp.replace(self.path)
        except Exception as exc:  # IO errors, unrepresentable values, ...
            self._cache = None
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            logger.warning("Failed to write store %s: %s", self.path, exc)
            raise StoreWriteError(f"cannot write {self.path}: {exc}") from exc

    def reload(self) -> None:
        with self._lock:
            self._cache = None

    def get_object(self, key: str) -> Any | None:
        with self._lock:
            return copy.deepcopy(self._data().get(key))

    def _write(self, key: str, value: Any) -> None:
        with self._lock:
            self._data()[key] = value
            self._flush()

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._data()
            if key not in data:
                return
            del data[key]
            self._flush()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data())

    def remove_all(self) -> None:
        with self._lock:
            data = self._data()
            if not data:
                return
            data.clear()
            self._flush()
