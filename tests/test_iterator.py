"""Iterating over store entries."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from docdb import DocDb, DocDbItem, NeverDump
from docdb.models.enums import SerializationMethod


class Rectangle(BaseModel):
    width: int
    length: int


def test_iterate_entries(db_path: Path, method: SerializationMethod) -> None:
    db = DocDb(db_path, NeverDump(), method)
    db.set("num", "override")
    db.set("float", 3.14)
    db.set("struct", Rectangle(width=2, length=3))

    seen = {}
    for item in db.iter():
        assert isinstance(item, DocDbItem)
        match item.key:
            case "num":
                seen[item.key] = item.get_value(str)
            case "float":
                seen[item.key] = item.get_value(float)
            case "struct":
                seen[item.key] = item.get_value(Rectangle)

    assert seen == {
        "num": "override",
        "float": 3.14,
        "struct": Rectangle(width=2, length=3),
    }


def test_item_decode_failure_is_absent(db_path: Path) -> None:
    db = DocDb(db_path, NeverDump())
    db.set("float", 3.14)

    (item,) = list(db)
    assert item.key == "float"
    assert item.get_value(str) is None
    assert item.value == b"3.14"


def test_mutation_during_iteration(db_path: Path) -> None:
    db = DocDb(db_path, NeverDump())
    for i in range(3):
        db.set(f"key{i}", i)

    keys = []
    for item in db:
        keys.append(item.key)
        db.remove(item.key)
        db.set(f"new-{item.key}", 0)

    assert sorted(keys) == ["key0", "key1", "key2"]
    assert db.all_keys() == {"new-key0", "new-key1", "new-key2"}


def test_empty_store(db_path: Path) -> None:
    assert list(DocDb(db_path, NeverDump())) == []
