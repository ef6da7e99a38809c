"""Unit tests for single-entry file operations."""

from __future__ import annotations

from pathlib import Path

import pytest

from filemason.core.errors import InvalidTargetError, NotFoundError
from filemason.core.log_bus import LogRecord, get_log_bus
from filemason.core.logging import VerbosityLevel, set_verbosity
from filemason.file_io import ops


class TestDelete:
    def test_delete_missing_file_is_not_an_error(self, tmp_path: Path) -> None:
        target = tmp_path / "gone.txt"

        ops.delete_file(target)
        ops.delete_file(target)

        assert not target.exists()

    def test_delete_missing_file_logs_at_debug(self, tmp_path: Path) -> None:
        records: list[LogRecord] = []
        get_log_bus().subscribe("DEBUG", records.append)
        set_verbosity(VerbosityLevel.DEBUG)

        ops.delete_file(tmp_path / "gone.txt")

        assert any("non-existing file" in r.plain for r in records)

    def test_delete_file_twice_after_create(self, tmp_path: Path) -> None:
        target = tmp_path / "f.txt"
        target.write_text("x")

        ops.delete_file(target)
        ops.delete_file(target)

        assert not target.exists()

    def test_delete_file_rejects_directory(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidTargetError):
            ops.delete_file(tmp_path)

    def test_delete_missing_directory_is_not_an_error(self, tmp_path: Path) -> None:
        ops.delete_directory(tmp_path / "nope", recursive=True)

    def test_delete_directory_rejects_file(self, tmp_path: Path) -> None:
        f = tmp_path / "f.txt"
        f.write_text("x")

        with pytest.raises(InvalidTargetError):
            ops.delete_directory(f)

    def test_non_recursive_delete_of_non_empty_directory_fails(self, tmp_path: Path) -> None:
        d = tmp_path / "d"
        d.mkdir()
        (d / "f.txt").write_text("x")

        with pytest.raises(OSError):
            ops.delete_directory(d)
        assert d.exists()

    def test_recursive_delete(self, sample_tree: Path) -> None:
        ops.delete_directory(sample_tree, recursive=True)

        assert not sample_tree.exists()


class TestInfoAndDirectories:
    def test_get_info_missing(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError):
            ops.get_info(tmp_path / "missing")

    def test_get_info_file(self, tmp_path: Path) -> None:
        f = tmp_path / "f.txt"
        f.write_bytes(b"12345")

        info = ops.get_info(f)

        assert info.path == f.absolute()
        assert info.name == "f.txt"
        assert info.size == 5
        assert not info.is_dir

    def test_create_directory_with_parents_is_idempotent(self, tmp_path: Path) -> None:
        d = tmp_path / "a" / "b" / "c"

        ops.create_directory(d)
        info = ops.create_directory(d)

        assert info.is_dir
        assert info.size == 0

    def test_create_directory_blocked_by_file(self, tmp_path: Path) -> None:
        f = tmp_path / "f"
        f.write_text("x")

        with pytest.raises(InvalidTargetError):
            ops.create_directory(f)

    def test_list_dir_sorted(self, sample_tree: Path) -> None:
        names = [e.name for e in ops.list_dir(sample_tree)]

        assert names == ["a.txt", "b.bin", "docs", "empty"]

    def test_list_dir_recursive_pattern(self, sample_tree: Path) -> None:
        names = [e.name for e in ops.list_dir(sample_tree, "*.txt", recursive=True)]

        assert sorted(names) == ["a.txt", "deep.txt"]

    def test_list_dir_rejects_file(self, sample_tree: Path) -> None:
        with pytest.raises(InvalidTargetError):
            ops.list_dir(sample_tree / "a.txt")


class TestTemporaryLocations:
    def test_temporary_directories_are_fresh(self, tmp_path: Path) -> None:
        a = ops.get_temporary_directory(tmp_path / "stg")
        b = ops.get_temporary_directory(tmp_path / "stg")

        assert a != b
        assert a.is_dir() and b.is_dir()
        assert list(a.iterdir()) == []
        assert a.parent == tmp_path / "stg"

    def test_temporary_file_is_created_empty(self) -> None:
        p = ops.get_temporary_file_path()
        try:
            assert p.is_file()
            assert p.stat().st_size == 0
        finally:
            p.unlink()


class TestTextIO:
    def test_write_without_overwrite_keeps_existing(self, tmp_path: Path) -> None:
        f = tmp_path / "f.txt"
        f.write_text("original", encoding="utf-8")

        info = ops.write_text(f, "new", overwrite=False)

        assert f.read_text(encoding="utf-8") == "original"
        assert info.size == len("original")

    def test_write_and_read_text_with_encoding(self, tmp_path: Path) -> None:
        f = tmp_path / "f.txt"

        ops.write_text(f, "žluťoučký", encoding="utf-16")

        assert ops.read_text(f, encoding="utf-16") == "žluťoučký"

    def test_append_text_starts_new_line(self, tmp_path: Path) -> None:
        f = tmp_path / "f.txt"
        ops.write_text(f, "first")

        ops.append_text(f, "second")

        assert ops.read_lines(f) == ["first", "second"]

    def test_write_and_append_lines(self, tmp_path: Path) -> None:
        f = tmp_path / "f.txt"
        ops.write_lines(f, ["a", "b"])
        ops.append_lines(f, ["c"])

        assert ops.read_lines(f) == ["a", "b", "", "c"]

    def test_bytes_round_trip(self, tmp_path: Path) -> None:
        f = tmp_path / "f.bin"
        data = bytes(range(256))

        ops.write_bytes(f, data)

        assert ops.read_bytes(f) == data

    def test_write_to_directory_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidTargetError):
            ops.write_text(tmp_path, "x")
