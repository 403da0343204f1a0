from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..errors import StoreLoadError
from . import register_store
from .base import FileStore


@register_store
class YamlStore(FileStore):
    """YAML file store.  Blobs are written as ``!!binary``."""

    suffixes = (".yaml", ".yml")

    def _require_yaml(self):
        try:
            import yaml  # type: ignore
        except ModuleNotFoundError as exc:
            raise StoreLoadError("PyYAML is required for YAML stores") from exc
        return yaml

    def _load(self, raw: bytes) -> Any:
        yaml = self._require_yaml()
        return yaml.safe_load(raw.decode("utf-8"))

    def _dump(self, data: Mapping[str, Any]) -> bytes:
        yaml = self._require_yaml()
        text = yaml.safe_dump(dict(data), sort_keys=True, allow_unicode=True)
        return text.encode("utf-8")
