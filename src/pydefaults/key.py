from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .serializers import MISSING, ArraySerializer, Serializer

T = TypeVar("T")


@dataclass(frozen=True)
class Key(Generic[T]):
    """A typed slot in a store.

    ``serializer`` fixes how values of the key are read and written.
    ``default`` overrides the serializer's declared default value.
    """

    name: str
    serializer: Serializer[T]
    default: Any = MISSING

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"invalid key name: {self.name!r}")

    @classmethod
    def array(cls, name: str, element: Serializer[Any], default: Any = MISSING) -> Key[list[Any]]:
        return cls(name, ArraySerializer(element), default)

    def fallback(self) -> T | None:
        """Return the value used when the slot holds nothing readable."""
        if self.default is not MISSING:
            return copy.deepcopy(self.default)
        declared = self.serializer.default_value
        if declared is MISSING:
            return None
        return copy.deepcopy(declared)
