"""Conflict-free path proposals.

Given a desired file or directory location, propose a path that does not
collide with an existing entry. Collisions are resolved with a numeric suffix
that starts at 2:

    report.txt -> report (2).txt -> report (3).txt -> ...

A bare "(1)" suffix is never produced. Existing callers depend on this
numbering, so it must not change.

The check-then-use pattern is racy against concurrent external changes; the
returned path is only guaranteed free at the instant it is returned.
"""

from __future__ import annotations

import os
from pathlib import Path

from filemason.core.logging import get_logger

from .types import PathLike

_logger = get_logger(__name__)

REPLACEMENT_CHAR = "-"

if os.name == "nt":
    _CONTROL_CHARS = "".join(chr(i) for i in range(32))
    INVALID_FILE_NAME_CHARS = frozenset('<>:"/\\|?*' + _CONTROL_CHARS)
    # separators and drive colons are allowed in a full path
    INVALID_PATH_CHARS = frozenset('<>"|' + _CONTROL_CHARS)
else:
    INVALID_FILE_NAME_CHARS = frozenset("\0/")
    INVALID_PATH_CHARS = frozenset("\0")


def _replace_chars(value: str, invalid: frozenset[str]) -> str:
    return "".join(REPLACEMENT_CHAR if c in invalid else c for c in value)


def sanitize_file_name(name: str) -> str:
    """Replace characters that are illegal in a file name with '-'."""
    return _replace_chars(name, INVALID_FILE_NAME_CHARS)


def sanitize_path(path: PathLike) -> Path:
    """Replace characters that are illegal in a path with '-'."""
    return Path(_replace_chars(os.fspath(path), INVALID_PATH_CHARS))


def _exists(path: Path) -> bool:
    # lexists: a dangling link still occupies the name.
    return os.path.lexists(path)


def _split_candidate(base_path: PathLike, name: str | None, sanitize: bool) -> tuple[Path, str]:
    if name is None:
        full = Path(base_path)
        parent, name = full.parent, full.name
    else:
        parent = Path(base_path)
    if not name:
        raise ValueError("A file or directory name is required")
    if not sanitize:
        return parent, name
    return sanitize_path(parent), sanitize_file_name(name)


def _propose(parent: Path, name: str, *, with_extension: bool) -> Path:
    candidate = parent / name
    if not _exists(candidate):
        return candidate

    if with_extension:
        stem, suffix = Path(name).stem, Path(name).suffix
    else:
        stem, suffix = name, ""

    counter = 2
    while True:
        candidate = parent / f"{stem} ({counter}){suffix}"
        if not _exists(candidate):
            _logger.debug(f"file_io.propose name={name!r} resolved={candidate.name!r}")
            return candidate
        counter += 1


def propose_file_path(
    base_path: PathLike, file_name: str | None = None, *, sanitize: bool = True
) -> Path:
    """Propose a non-existing path for a file.

    Args:
        base_path: Directory to place the file in, or the full desired path
            when file_name is omitted.
        file_name: Desired file name, extension included.
        sanitize: Replace characters the platform rejects before checking.
            Pass False for names read back from the filesystem.

    Returns:
        base_path/file_name if free, else base_path/"{stem} ({n}){suffix}"
        with the smallest n >= 2 that is free.
    """
    parent, name = _split_candidate(base_path, file_name, sanitize)
    return _propose(parent, name, with_extension=True)


def propose_directory_path(
    base_path: PathLike, name: str | None = None, *, sanitize: bool = True
) -> Path:
    """Propose a non-existing path for a directory.

    Same as propose_file_path() but without an extension component:
    "photos" -> "photos (2)", and "v1.2" -> "v1.2 (2)".
    """
    parent, dir_name = _split_candidate(base_path, name, sanitize)
    return _propose(parent, dir_name, with_extension=False)
