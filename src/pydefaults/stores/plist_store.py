from __future__ import annotations

import datetime as dt
import plistlib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..archive import Archiver
from . import register_store
from .base import FileStore


@register_store
class PlistStore(FileStore):
    """Property list file store.

    Datetimes are kept as naive UTC, as the plist format has no time zones;
    aware values are converted on write.  XML plists drop sub-second
    precision.
    """

    suffixes = (".plist",)

    def __init__(
        self,
        path: Path | str,
        *,
        fmt: plistlib.PlistFormat = plistlib.FMT_BINARY,
        archiver: Archiver | None = None,
    ) -> None:
        super().__init__(path, archiver=archiver)
        self.fmt = fmt

    def _to_native(self, value: Any) -> Any:
        if isinstance(value, dt.datetime) and value.tzinfo is not None:
            return value.astimezone(dt.timezone.utc).replace(tzinfo=None)
        return super()._to_native(value)

    def _load(self, raw: bytes) -> Any:
        return plistlib.loads(raw)

    def _dump(self, data: Mapping[str, Any]) -> bytes:
        return plistlib.dumps(dict(data), fmt=self.fmt, sort_keys=True)
