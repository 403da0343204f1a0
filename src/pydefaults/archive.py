"""Object-graph archiving for types that have no native representation.

Classes opt in by subclassing :class:`Archivable`.  Instances are turned into
a blob by an :class:`Archiver` (pickle by default) and stored through the
store's binary slot.  Archives written by an older or incompatible class
definition read back as ``None``.

Pickle executes code while loading; only open stores from trusted locations.
"""

from __future__ import annotations

import logging
import pickle
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from .errors import ArchiveError, UnsupportedValueError
from .serializers import MISSING, ArrayEncoding

if TYPE_CHECKING:
    from .stores.base import NativeStore

logger = logging.getLogger("pydefaults.archive")

A = TypeVar("A", bound="Archivable")


class Archivable:
    """Base class marking a type as storable through an archiver."""

    __slots__ = ()


class Archiver(Protocol):
    """Protocol for object-graph archivers."""

    def archive(self, obj: Any) -> bytes:
        """Return *obj* serialised into a blob."""

    def unarchive(self, blob: bytes) -> Any:
        """Rebuild an object from *blob* or raise :class:`ArchiveError`."""


class PickleArchiver:
    """Archiver backed by :mod:`pickle`."""

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self.protocol = protocol

    def archive(self, obj: Any) -> bytes:
        try:
            return pickle.dumps(obj, protocol=self.protocol)
        except Exception as exc:  # unpicklable attribute, local class, ...
            raise ArchiveError(f"cannot archive {type(obj).__name__}: {exc}") from exc

    def unarchive(self, blob: bytes) -> Any:
        try:
            return pickle.loads(blob)
        except Exception as exc:  # truncated data, missing class, changed layout
            raise ArchiveError(str(exc)) from exc


class ArchivableSerializer(Generic[A]):
    """Serializer for one :class:`Archivable` subclass.

    ``archiver`` defaults to the archiver of the store being accessed.
    """

    array_encoding: ArrayEncoding = "archive"
    default_value: Any = MISSING
    default_array_value: Any = MISSING

    def __init__(self, cls: type[A], archiver: Archiver | None = None) -> None:
        if not (isinstance(cls, type) and issubclass(cls, Archivable)):
            raise TypeError(f"{cls!r} is not an Archivable subclass")
        self.cls = cls
        self.archiver = archiver

    def __repr__(self) -> str:
        return f"ArchivableSerializer({self.cls.__name__})"

    def get(self, key: str, store: NativeStore) -> A | None:
        blob = store.get_data(key)
        if blob is None:
            return None
        try:
            obj = (self.archiver or store.archiver).unarchive(blob)
        except ArchiveError as exc:
            logger.debug("cannot unarchive %s at %s: %s", self.cls.__name__, key, exc)
            return None
        if not isinstance(obj, self.cls):
            logger.debug("archive at %s holds %s, not %s", key, type(obj).__name__, self.cls.__name__)
            return None
        return obj

    def save(self, key: str, value: A | None, store: NativeStore) -> None:
        if value is None:
            store.remove(key)
            return
        if not isinstance(value, self.cls):
            raise UnsupportedValueError(
                f"expected {self.cls.__name__}, got {type(value).__name__}"
            )
        store.set(key, (self.archiver or store.archiver).archive(value))

    def from_native(self, raw: Any) -> A | None:
        return None

    def accepts(self, value: Any) -> bool:
        return isinstance(value, self.cls)
