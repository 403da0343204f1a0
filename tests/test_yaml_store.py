from __future__ import annotations

import datetime as dt
from enum import Enum, IntEnum
from pathlib import Path

import pytest

from pydefaults import INT, STRING, YamlStore, open_store
from pydefaults.errors import StoreLoadError, StoreWriteError

yaml = pytest.importorskip("yaml")


def test_round_trip(tmp_path: Path):
    path = tmp_path / "prefs.yaml"
    store = YamlStore(path)
    data = {
        "name": "Sigil",
        "version": "1.0",
        "count": 3,
        "flag": True,
        "blob": b"\x00\x01",
        "when": dt.datetime(2024, 5, 1, 8, 0, 0, 250),
        "nested": {"a": [1, 2]},
    }
    for key, value in data.items():
        store.set(key, value)
    assert YamlStore(path).dictionary_representation() == data


def test_strings_stay_strings(tmp_path: Path):
    path = tmp_path / "prefs.yml"
    store = YamlStore(path)
    store.set("flag", "true")
    store.set("date", "2024-01-01")
    reopened = YamlStore(path)
    assert reopened.get_object("flag") == "true"
    assert reopened.get_object("date") == "2024-01-01"


def test_empty_file(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert YamlStore(path).keys() == []


def test_invalid_yaml(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("[invalid", encoding="utf-8")
    with pytest.raises(StoreLoadError):
        YamlStore(path).keys()


def test_root_must_be_mapping(tmp_path: Path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(StoreLoadError):
        YamlStore(path).keys()


def test_hand_edited_file(tmp_path: Path):
    path = tmp_path / "prefs.yaml"
    path.write_text("launch_count: 7\nflag: yes\n", encoding="utf-8")
    store = open_store(path)
    assert isinstance(store, YamlStore)
    assert INT.get("launch_count", store) == 7


class Color(str, Enum):
    RED = "red"


class Level(IntEnum):
    HIGH = 3


class FlakyYamlStore(YamlStore):
    """Fails to serialise on the first write only."""

    fail_next = True

    def _dump(self, data):
        if self.fail_next:
            self.fail_next = False
            raise yaml.representer.RepresenterError("cannot represent an object")
        return super()._dump(data)


def test_enum_members_stored_as_plain_values(tmp_path: Path):
    path = tmp_path / "prefs.yaml"
    store = YamlStore(path)
    STRING.save("color", Color.RED, store)
    INT.save("level", Level.HIGH, store)
    reopened = YamlStore(path)
    assert type(reopened.get_object("color")) is str
    assert reopened.get_object("color") == "red"
    assert type(reopened.get_object("level")) is int
    assert INT.get("level", reopened) == 3


def test_failed_write_does_not_poison_store(tmp_path: Path):
    path = tmp_path / "prefs.yaml"
    store = FlakyYamlStore(path)
    with pytest.raises(StoreWriteError):
        store.set("first", 1)
    assert not path.with_suffix(".yaml.tmp").exists()
    store.set("second", 2)
    assert YamlStore(path).dictionary_representation() == {"second": 2}
