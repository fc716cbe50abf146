"""Flat file persistence tests."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from book.errors import PersistenceWarning
from book.schemas import ContactSnapshot
from book.stores.flat_file_store import FlatFileStore, parse_line


def snap(record_id: int, name: str, phone: str, category: str) -> ContactSnapshot:
    return ContactSnapshot(id=record_id, name=name, phone=phone, category=category)


def test_save_writes_one_line_per_record(tmp_path: Path) -> None:
    path = tmp_path / "contacts.txt"
    store = FlatFileStore(path)
    store.save([snap(2, "B", "2222222222", "y"), snap(1, "A", "1111111111", "x")])
    assert path.read_text(encoding="utf-8").splitlines() == [
        "B,2222222222,y",
        "A,1111111111,x",
    ]


def test_save_overwrites_and_leaves_no_temp_files(tmp_path: Path) -> None:
    path = tmp_path / "contacts.txt"
    path.write_text("stale,0000000000,old\n", encoding="utf-8")
    store = FlatFileStore(path)
    store.save([snap(1, "A", "1111111111", "x")])
    assert path.read_text(encoding="utf-8").splitlines() == ["A,1111111111,x"]
    assert [p.name for p in tmp_path.iterdir()] == ["contacts.txt"]


def test_save_creates_parent_directory(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "contacts.txt"
    FlatFileStore(path).save([])
    assert path.exists()
    assert path.read_text(encoding="utf-8") == ""


def test_save_to_unwritable_destination_warns(tmp_path: Path) -> None:
    target = tmp_path / "contacts.txt"
    target.mkdir()
    with pytest.raises(PersistenceWarning):
        FlatFileStore(target).save([snap(1, "A", "1111111111", "x")])
    assert list(tmp_path.iterdir()) == [target]


def test_load_missing_file_warns(tmp_path: Path) -> None:
    with pytest.raises(PersistenceWarning, match="not found"):
        FlatFileStore(tmp_path / "absent.txt").load()


def test_load_splits_on_first_two_commas(tmp_path: Path) -> None:
    path = tmp_path / "contacts.txt"
    path.write_text("A,1111111111,x\nB,2222222222,work, home\nshort\n", encoding="utf-8")
    assert FlatFileStore(path).load() == [
        ("A", "1111111111", "x"),
        ("B", "2222222222", "work, home"),
        ("short", "", ""),
    ]


def test_parse_line_pads_missing_fields() -> None:
    assert parse_line("") == ("", "", "")
    assert parse_line("A,123") == ("A", "123", "")


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
@pytest.mark.parametrize("mode", [0o644, 0o640, 0o600])
def test_save_keeps_existing_file_mode(tmp_path: Path, mode: int) -> None:
    path = tmp_path / "contacts.txt"
    path.write_text("", encoding="utf-8")
    os.chmod(path, mode)
    FlatFileStore(path).save([snap(1, "A", "1111111111", "x")])
    assert stat.S_IMODE(path.stat().st_mode) == mode


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_new_file_follows_umask(tmp_path: Path) -> None:
    umask = os.umask(0o022)
    try:
        path = tmp_path / "contacts.txt"
        FlatFileStore(path).save([snap(1, "A", "1111111111", "x")])
    finally:
        os.umask(umask)
    assert stat.S_IMODE(path.stat().st_mode) == 0o644
