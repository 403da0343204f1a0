"""Per-type strategies converting typed values to and from a native store.

A *serializer* knows how to read and write one Python type through the typed
accessors of :class:`~pydefaults.stores.base.NativeStore`.  Serializers are
plain objects chosen by whoever declares a :class:`~pydefaults.key.Key`; there
is no lookup by runtime type.

Every serializer honours the same contract:

* ``get`` returns ``None`` when the slot is absent, holds a value of another
  native kind, or cannot be decoded.  These cases are indistinguishable.
* ``save`` with ``None`` removes the slot.
* ``array_encoding`` classifies how lists of the type are persisted, see
  :class:`ArraySerializer`.
"""

from __future__ import annotations

import datetime as dt
import logging
import math
from typing import TYPE_CHECKING, Any, Generic, Literal, Protocol, TypeVar
from urllib.parse import SplitResult

from .errors import ArchiveError, UnsupportedValueError

if TYPE_CHECKING:
    from .stores.base import NativeStore

logger = logging.getLogger("pydefaults")

T = TypeVar("T")

ArrayEncoding = Literal["native", "archive", "structured"]


class _Missing:
    """Marker for "no declared default"."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class Serializer(Protocol[T]):
    """Strategy for storing values of one type."""

    array_encoding: ArrayEncoding
    default_value: Any
    default_array_value: Any

    def get(self, key: str, store: NativeStore) -> T | None:
        """Return the value stored at *key* or ``None``."""

    def save(self, key: str, value: T | None, store: NativeStore) -> None:
        """Store *value* at *key*; ``None`` removes the slot."""

    def from_native(self, raw: Any) -> T | None:
        """Strictly cast one native array item, ``None`` on mismatch."""

    def accepts(self, value: Any) -> bool:
        """Return ``True`` if *value* is an instance of the served type."""


class _NativeSerializer(Generic[T]):
    """Shared behaviour for types the store can hold directly."""

    array_encoding: ArrayEncoding = "native"
    default_value: Any = MISSING
    default_array_value: Any = MISSING
    type_name = "value"

    def get(self, key: str, store: NativeStore) -> T | None:
        raise NotImplementedError

    def to_native(self, value: Any) -> Any:
        raise NotImplementedError

    def from_native(self, raw: Any) -> T | None:
        raise NotImplementedError

    def accepts(self, value: Any) -> bool:
        return self.from_native(value) is not None

    def save(self, key: str, value: T | None, store: NativeStore) -> None:
        if value is None:
            store.remove(key)
            return
        store.set(key, self.to_native(value))

    def _reject(self, value: Any) -> UnsupportedValueError:
        return UnsupportedValueError(
            f"expected {self.type_name}, got {type(value).__name__}"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class StringSerializer(_NativeSerializer[str]):
    type_name = "str"
    default_value = ""
    default_array_value: list[str] = []

    def get(self, key: str, store: NativeStore) -> str | None:
        return store.get_string(key)

    def to_native(self, value: Any) -> str:
        if not isinstance(value, str):
            raise self._reject(value)
        return str.__str__(value)

    def from_native(self, raw: Any) -> str | None:
        return raw if isinstance(raw, str) else None


class IntSerializer(_NativeSerializer[int]):
    type_name = "int"
    default_value = 0
    default_array_value: list[int] = []

    def get(self, key: str, store: NativeStore) -> int | None:
        number = store.get_number(key)
        if number is None:
            return None
        if isinstance(number, float) and not math.isfinite(number):
            return None
        return int(number)

    def to_native(self, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise self._reject(value)
        return int(value)

    def from_native(self, raw: Any) -> int | None:
        if isinstance(raw, bool):
            return None
        if isinstance(raw, int):
            return raw
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        return None


class FloatSerializer(_NativeSerializer[float]):
    type_name = "float"
    default_value = 0.0
    default_array_value: list[float] = []

    def get(self, key: str, store: NativeStore) -> float | None:
        number = store.get_number(key)
        if number is None:
            return None
        try:
            return float(number)
        except OverflowError:
            return None

    def to_native(self, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise self._reject(value)
        try:
            return float(value)
        except OverflowError as exc:
            raise UnsupportedValueError(f"{value!r} does not fit in a float") from exc

    def from_native(self, raw: Any) -> float | None:
        if isinstance(raw, bool) or not isinstance(raw, int | float):
            return None
        return float(raw)


class BoolSerializer(_NativeSerializer[bool]):
    """Booleans read through the numeric accessor.

    ``get_bool`` on the store treats absence as ``False`` and parses strings
    such as ``"yes"``; neither may leak into typed reads.
    """

    type_name = "bool"
    default_value = False
    default_array_value: list[bool] = []

    def get(self, key: str, store: NativeStore) -> bool | None:
        number = store.get_number(key)
        return None if number is None else bool(number)

    def to_native(self, value: Any) -> bool:
        if not isinstance(value, bool):
            raise self._reject(value)
        return value

    def from_native(self, raw: Any) -> bool | None:
        return raw if isinstance(raw, bool) else None


class DataSerializer(_NativeSerializer[bytes]):
    type_name = "bytes"
    default_value = b""
    default_array_value: list[bytes] = []

    def get(self, key: str, store: NativeStore) -> bytes | None:
        return store.get_data(key)

    def to_native(self, value: Any) -> bytes:
        if not isinstance(value, bytes | bytearray | memoryview):
            raise self._reject(value)
        return bytes(value)

    def from_native(self, raw: Any) -> bytes | None:
        return raw if isinstance(raw, bytes) else None


class DateSerializer(_NativeSerializer[dt.datetime]):
    type_name = "datetime"

    def get(self, key: str, store: NativeStore) -> dt.datetime | None:
        return self.from_native(store.get_object(key))

    def to_native(self, value: Any) -> dt.datetime:
        if not isinstance(value, dt.datetime):
            raise self._reject(value)
        return value

    def from_native(self, raw: Any) -> dt.datetime | None:
        return raw if isinstance(raw, dt.datetime) else None


class URLSerializer(_NativeSerializer[SplitResult]):
    """Resource locators, stored through the store's archiver.

    Lists of locators cannot go through the native array path, so they are
    archived as a whole.
    """

    type_name = "SplitResult"
    array_encoding: ArrayEncoding = "archive"
    archiver = None

    def get(self, key: str, store: NativeStore) -> SplitResult | None:
        return store.get_url(key)

    def to_native(self, value: Any) -> SplitResult:
        if not isinstance(value, SplitResult):
            raise self._reject(value)
        return value

    def from_native(self, raw: Any) -> SplitResult | None:
        return raw if isinstance(raw, SplitResult) else None


class ArraySerializer(Generic[T]):
    """Lift an element serializer to ``list[T]`` stored in a single slot.

    The element's ``array_encoding`` is read once, here:

    ``"native"``
        the list is written with the store's native array support and each
        item is cast back with ``element.from_native`` on read.
    ``"archive"``
        the whole list is archived into a blob; the native array setter is
        never used.
    ``"structured"``
        the whole list goes through the element's structured codec.
    """

    def __init__(self, element: Serializer[T]) -> None:
        self.element = element
        self.array_encoding: ArrayEncoding = element.array_encoding
        self.default_value = element.default_array_value
        self.default_array_value = MISSING if element.default_array_value is MISSING else []
        self.archiver = getattr(element, "archiver", None)
        if self.array_encoding == "structured":
            self.codec = element.codec  # type: ignore[attr-defined]
            self.annotation = list[element.annotation]  # type: ignore[attr-defined]

    def __repr__(self) -> str:
        return f"ArraySerializer({self.element!r})"

    # ------------------------------------------------------------- reading
    def get(self, key: str, store: NativeStore) -> list[T] | None:
        if self.array_encoding == "archive":
            return self._get_archived(key, store)
        if self.array_encoding == "structured":
            return self._get_structured(key, store)
        return self.from_native(store.get_array(key))

    def _get_archived(self, key: str, store: NativeStore) -> list[T] | None:
        blob = store.get_data(key)
        if blob is None:
            return None
        archiver = self.archiver or store.archiver
        try:
            value = archiver.unarchive(blob)
        except ArchiveError as exc:
            logger.debug("cannot unarchive list at %s: %s", key, exc)
            return None
        return value if self.accepts(value) else None

    def _get_structured(self, key: str, store: NativeStore) -> list[T] | None:
        blob = store.get_data(key)
        if blob is None:
            return None
        try:
            return self.codec.decode(blob, self.annotation)
        except (ValueError, TypeError) as exc:
            logger.debug("cannot decode list at %s: %s", key, exc)
            return None

    def from_native(self, raw: Any) -> list[T] | None:
        if not isinstance(raw, list):
            return None
        items = [self.element.from_native(item) for item in raw]
        if any(item is None for item in items):
            return None
        return items  # type: ignore[return-value]

    def accepts(self, value: Any) -> bool:
        return isinstance(value, list) and all(self.element.accepts(v) for v in value)

    # ------------------------------------------------------------- writing
    def save(self, key: str, value: list[T] | None, store: NativeStore) -> None:
        if value is None:
            store.remove(key)
            return
        value = list(value)
        if self.array_encoding == "archive":
            if not self.accepts(value):
                raise UnsupportedValueError(f"list items must be accepted by {self.element!r}")
            archiver = self.archiver or store.archiver
            store.set(key, archiver.archive(value))
        elif self.array_encoding == "structured":
            store.set(key, self.codec.encode(value, self.annotation))
        else:
            store.set(key, self.to_native(value))

    def to_native(self, value: Any) -> list[Any]:
        if not isinstance(value, list | tuple):
            raise UnsupportedValueError(f"expected list, got {type(value).__name__}")
        return [self.element.to_native(item) for item in value]  # type: ignore[attr-defined]


STRING = StringSerializer()
INT = IntSerializer()
FLOAT = FloatSerializer()
BOOL = BoolSerializer()
DATA = DataSerializer()
DATE = DateSerializer()
URL = URLSerializer()
