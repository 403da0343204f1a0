"""Structured values stored as encoded blobs.

Dataclasses, pydantic models and other types pydantic can validate are
encoded to JSON bytes and kept in the store's binary slot.  This path is
opt-in: use :func:`decodable`/:func:`save_encodable` directly or back a key
with :class:`CodableSerializer`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from pydantic import TypeAdapter

from .serializers import MISSING, ArrayEncoding

if TYPE_CHECKING:
    from .stores.base import NativeStore

logger = logging.getLogger("pydefaults.codable")

T = TypeVar("T")


class Codec(Protocol):
    """Protocol for structured encoders.

    ``decode`` raises :class:`ValueError` or :class:`TypeError` when *blob*
    does not describe a value of *annotation*.
    """

    def encode(self, value: Any, annotation: Any) -> bytes:
        ...

    def decode(self, blob: bytes, annotation: Any) -> Any:
        ...


class PydanticCodec:
    """JSON codec built on :class:`pydantic.TypeAdapter`."""

    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def _adapter(self, annotation: Any) -> TypeAdapter[Any]:
        adapter = self._adapters.get(annotation)
        if adapter is None:
            adapter = TypeAdapter(annotation)
            self._adapters[annotation] = adapter
        return adapter

    def encode(self, value: Any, annotation: Any) -> bytes:
        return self._adapter(annotation).dump_json(value)

    def decode(self, blob: bytes, annotation: Any) -> Any:
        return self._adapter(annotation).validate_json(blob)


default_codec = PydanticCodec()


def decodable(
    key: str, store: NativeStore, cls: type[T], *, codec: Codec | None = None
) -> T | None:
    """Return the value of type *cls* encoded at *key*, or ``None``."""

    blob = store.get_data(key)
    if blob is None:
        return None
    try:
        return (codec or default_codec).decode(blob, cls)
    except (ValueError, TypeError) as exc:
        logger.debug("cannot decode %s at %s: %s", getattr(cls, "__name__", cls), key, exc)
        return None


def save_encodable(
    key: str,
    value: Any,
    store: NativeStore,
    *,
    cls: Any = None,
    codec: Codec | None = None,
) -> None:
    """Encode *value* into *key*; ``None`` removes the slot."""

    if value is None:
        store.remove(key)
        return
    annotation = cls if cls is not None else type(value)
    store.set(key, (codec or default_codec).encode(value, annotation))


class CodableSerializer(Generic[T]):
    """Serializer for a structured type encoded through a :class:`Codec`."""

    array_encoding: ArrayEncoding = "structured"
    default_value: Any = MISSING
    default_array_value: Any = MISSING

    def __init__(self, cls: type[T], codec: Codec | None = None) -> None:
        self.cls = cls
        self.annotation = cls
        self.codec = codec or default_codec

    def __repr__(self) -> str:
        return f"CodableSerializer({getattr(self.cls, '__name__', self.cls)})"

    def get(self, key: str, store: NativeStore) -> T | None:
        return decodable(key, store, self.cls, codec=self.codec)

    def save(self, key: str, value: T | None, store: NativeStore) -> None:
        save_encodable(key, value, store, cls=self.cls, codec=self.codec)

    def from_native(self, raw: Any) -> T | None:
        return None

    def accepts(self, value: Any) -> bool:
        return isinstance(value, self.cls)
