from __future__ import annotations

import datetime as dt

import pytest

from pydefaults import MemoryStore
from pydefaults.errors import UnsupportedValueError


def test_set_none_removes():
    store = MemoryStore({"a": 1})
    store.set("a", None)
    assert store.get_object("a") is None
    store.remove("a")  # already absent


def test_rejects_non_native_values():
    store = MemoryStore()
    with pytest.raises(UnsupportedValueError):
        store.set("k", object())
    with pytest.raises(UnsupportedValueError):
        store.set("k", [1, None])
    with pytest.raises(UnsupportedValueError):
        store.set("k", {1: "x"})
    with pytest.raises(UnsupportedValueError):
        store.set("k", dt.date(2024, 1, 1))


def test_containers_are_normalised():
    store = MemoryStore()
    store.set("k", ("a", bytearray(b"b"), {"n": (1, 2)}))
    assert store.get_object("k") == ["a", b"b", {"n": [1, 2]}]


def test_reads_return_copies():
    store = MemoryStore({"k": [1, 2]})
    store.get_array("k").append(3)
    assert store.get_array("k") == [1, 2]


def test_typed_accessors():
    store = MemoryStore(
        {"s": "text", "i": 3, "f": 1.5, "b": True, "d": b"xy", "a": [1], "m": {"x": 1}}
    )
    assert store.get_string("s") == "text"
    assert store.get_string("i") == "3"
    assert store.get_string("b") is None
    assert store.get_number("f") == 1.5
    assert store.get_number("b") == 1
    assert store.get_number("s") is None
    assert store.get_data("d") == b"xy"
    assert store.get_data("s") is None
    assert store.get_array("a") == [1]
    assert store.get_array("m") is None
    assert store.get_dictionary("m") == {"x": 1}
    assert store.get_dictionary("a") is None


@pytest.mark.parametrize(
    "raw, expected",
    [("YES", True), ("true", True), ("1", True), ("0", False), ("no", False), (2, True), (0.0, False)],
)
def test_lenient_bool(raw, expected):
    assert MemoryStore({"k": raw}).get_bool("k") is expected


def test_url_accessor_ignores_other_blobs():
    store = MemoryStore({"blob": b"junk", "empty": ""})
    assert store.get_url("blob") is None
    assert store.get_url("empty") is None
    assert store.get_url("missing") is None


def test_keys_and_representation():
    store = MemoryStore({"a": 1, "b": "two"})
    assert sorted(store.keys()) == ["a", "b"]
    assert store.dictionary_representation() == {"a": 1, "b": "two"}
    assert store.has_key("a")
    store.remove_all()
    assert store.keys() == []
