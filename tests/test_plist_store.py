from __future__ import annotations

import datetime as dt
import plistlib
from pathlib import Path

import pytest

from pydefaults import PlistStore, open_store
from pydefaults.errors import StoreLoadError, StoreWriteError


def test_round_trip_across_instances(tmp_path: Path):
    path = tmp_path / "prefs.plist"
    store = PlistStore(path)
    store.set("name", "Sigil")
    store.set("count", 3)
    store.set("ratio", 0.5)
    store.set("flag", False)
    store.set("blob", b"\x00\xff")
    store.set("when", dt.datetime(2024, 2, 29, 23, 59, 59))
    store.set("list", ["a", 1])
    reopened = PlistStore(path)
    assert reopened.dictionary_representation() == store.dictionary_representation()
    assert reopened.get_object("when") == dt.datetime(2024, 2, 29, 23, 59, 59)


def test_remove_persists(tmp_path: Path):
    path = tmp_path / "prefs.plist"
    store = PlistStore(path)
    store.set("a", 1)
    store.remove("a")
    assert PlistStore(path).keys() == []


def test_missing_and_empty_file(tmp_path: Path):
    assert PlistStore(tmp_path / "none.plist").keys() == []
    path = tmp_path / "empty.plist"
    path.write_bytes(b"")
    assert PlistStore(path).keys() == []


def test_invalid_file(tmp_path: Path):
    path = tmp_path / "bad.plist"
    path.write_bytes(b"<plist><dict><key>")
    with pytest.raises(StoreLoadError):
        PlistStore(path).get_object("a")


def test_root_must_be_mapping(tmp_path: Path):
    path = tmp_path / "list.plist"
    path.write_bytes(plistlib.dumps(["a"]))
    with pytest.raises(StoreLoadError):
        PlistStore(path).keys()


def test_aware_datetimes_stored_as_utc(tmp_path: Path):
    store = PlistStore(tmp_path / "p.plist")
    cet = dt.timezone(dt.timedelta(hours=1))
    store.set("when", dt.datetime(2024, 1, 1, 12, 0, tzinfo=cet))
    assert PlistStore(store.path).get_object("when") == dt.datetime(2024, 1, 1, 11, 0)


def test_xml_format(tmp_path: Path):
    path = tmp_path / "p.plist"
    store = PlistStore(path, fmt=plistlib.FMT_XML)
    store.set("name", "x")
    assert path.read_bytes().startswith(b"<?xml")
    assert PlistStore(path).get_string("name") == "x"


def test_failed_write_keeps_disk_state(tmp_path: Path):
    path = tmp_path / "p.plist"
    store = PlistStore(path)
    store.set("ok", 1)
    with pytest.raises(StoreWriteError):
        store.set("huge", 2**80)
    assert store.keys() == ["ok"]


def test_reload_sees_external_changes(tmp_path: Path):
    path = tmp_path / "p.plist"
    store = PlistStore(path)
    store.set("a", 1)
    PlistStore(path).set("a", 2)
    assert store.get_number("a") == 1
    store.reload()
    assert store.get_number("a") == 2


def test_open_store_by_suffix(tmp_path: Path):
    assert isinstance(open_store(tmp_path / "x.PLIST"), PlistStore)
    with pytest.raises(ValueError):
        open_store(tmp_path / "x.ini")


def test_failed_replace_removes_temp_file(tmp_path: Path, monkeypatch):
    path = tmp_path / "p.plist"
    store = PlistStore(path)

    def refuse(self, target):
        raise PermissionError("read-only target")

    monkeypatch.setattr(Path, "replace", refuse)
    with pytest.raises(StoreWriteError):
        store.set("a", 1)
    assert list(tmp_path.iterdir()) == []
