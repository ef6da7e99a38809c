"""Tests for the filemason command line."""

from __future__ import annotations

import hashlib
import zipfile
from pathlib import Path

import pytest

from filemason.cli import build_parser, main
from filemason.core.logging import VerbosityLevel, get_verbosity


@pytest.fixture()
def run(tmp_path: Path):
    """Run the CLI with an isolated user config file."""

    def _run(*argv: str) -> int:
        return main(["--config", str(tmp_path / "cli_config.yaml"), *argv])

    return _run


def test_parser_requires_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_propose_prints_free_path(run, sample_tree: Path, capsys) -> None:
    assert run("-q", "propose", str(sample_tree / "a.txt")) == 0

    assert capsys.readouterr().out.strip() == str(sample_tree / "a (2).txt")


def test_log_lines_go_to_stderr(run, sample_tree: Path, capsys) -> None:
    assert run("propose", str(sample_tree / "a.txt")) == 0

    captured = capsys.readouterr()
    assert captured.out == f"{sample_tree / 'a (2).txt'}\n"
    assert "status=succeeded" in captured.err


def test_propose_directory(run, sample_tree: Path, capsys) -> None:
    assert run("-q", "propose", "--dir", str(sample_tree / "docs")) == 0

    assert capsys.readouterr().out.strip() == str(sample_tree / "docs (2)")


def test_copy_directory_and_file(run, sample_tree: Path, tmp_path: Path) -> None:
    assert run("-q", "copy", str(sample_tree), str(tmp_path / "tree")) == 0
    assert run("-q", "copy", str(sample_tree / "a.txt"), str(tmp_path / "a.txt")) == 0

    assert (tmp_path / "tree" / "docs" / "nested" / "deep.txt").is_file()
    assert (tmp_path / "a.txt").read_text(encoding="utf-8") == "alpha"


def test_copy_collision_exits_with_error(run, sample_tree: Path, tmp_path: Path, capsys) -> None:
    (tmp_path / "a.txt").write_text("existing")

    assert run("copy", str(sample_tree / "a.txt"), str(tmp_path / "a.txt")) == 1

    err = capsys.readouterr().err
    assert "Destination already exists" in err
    assert "Suggestion:" in err


def test_move(run, sample_tree: Path, tmp_path: Path) -> None:
    assert run("-q", "move", str(sample_tree), str(tmp_path / "moved")) == 0

    assert not sample_tree.exists()
    assert (tmp_path / "moved" / "a.txt").is_file()


def test_pack_and_unpack(run, sample_tree: Path, tmp_path: Path) -> None:
    archive = tmp_path / "out.zip"

    assert run("-q", "pack", "--compression", "no_compression", str(archive), str(sample_tree)) == 0
    with zipfile.ZipFile(archive) as zf:
        assert "src/a.txt" in zf.namelist()
        assert {i.compress_type for i in zf.infolist()} == {zipfile.ZIP_STORED}

    assert run("-q", "unpack", str(archive), str(tmp_path / "dest")) == 0
    assert (tmp_path / "dest" / "src" / "b.bin").read_bytes() == bytes(range(256))


def test_max_depth_option(run, sample_tree: Path, tmp_path: Path, capsys) -> None:
    assert run("--max-depth", "1", "copy", str(sample_tree), str(tmp_path / "d")) == 1

    assert "depth limit" in capsys.readouterr().err


def test_hash(run, sample_tree: Path, capsys) -> None:
    assert run("-q", "hash", "--algo", "md5", str(sample_tree / "a.txt")) == 0

    expected = hashlib.md5(b"alpha").hexdigest()
    assert capsys.readouterr().out.startswith(f"{expected}  ")


def test_config_lists_sources(run, capsys, monkeypatch) -> None:
    monkeypatch.setenv("FILEMASON_FILE_IO_TEXT_ENCODING", "ascii")

    assert run("-v", "config") == 0

    out = capsys.readouterr().out
    assert "file_io.text_encoding = 'ascii'  (env)" in out
    assert "logging.level = 'verbose'  (cli)" in out
    assert "file_io.tree.max_depth = 0  (default)" in out


def test_verbosity_flags_apply(run, sample_tree: Path) -> None:
    run("-d", "propose", str(sample_tree / "x.txt"))

    assert get_verbosity() == VerbosityLevel.DEBUG


def test_invalid_config_file(tmp_path: Path, capsys) -> None:
    bad = tmp_path / "bad.yaml"
    bad.write_text("logging: [oops\n")

    assert main(["--config", str(bad), "config"]) == 1
    assert "Failed to load config" in capsys.readouterr().err
