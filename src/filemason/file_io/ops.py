"""Single-entry filesystem operations.

Thin wrappers over the platform primitives used by the tree copier and the
archive stager: existence checks, directory creation/deletion, byte-exact
copies, temporary locations and whole-file text/binary I/O.

Deleting something that is already gone is not an error: the miss is logged
at debug level and the call returns normally.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Iterable
from pathlib import Path

from filemason.core.errors import InvalidTargetError, NotFoundError
from filemason.core.logging import get_logger

from .types import EntryInfo, PathLike, TextEncoding

_logger = get_logger(__name__)

TEMP_PREFIX = "filemason-"


def exists(path: PathLike) -> bool:
    return Path(path).exists()


def is_dir(path: PathLike) -> bool:
    return Path(path).is_dir()


def get_info(path: PathLike) -> EntryInfo:
    p = Path(path)
    if not p.exists():
        raise NotFoundError(f"Not found: {p}")
    return EntryInfo.from_path(p)


def create_directory(path: PathLike) -> EntryInfo:
    """Create a directory (and parents). Existing directories are kept."""
    p = Path(path)
    if p.exists() and not p.is_dir():
        raise InvalidTargetError(f"Cannot create directory, a file is in the way: {p}")
    p.mkdir(parents=True, exist_ok=True)
    return EntryInfo.from_path(p)


def delete_file(path: PathLike) -> None:
    p = Path(path)
    if p.is_dir():
        raise InvalidTargetError(f"Is a directory: {p}")
    try:
        p.unlink()
    except FileNotFoundError:
        _logger.debug(f"Attempted to delete a non-existing file: {p}")


def delete_directory(path: PathLike, *, recursive: bool = False) -> None:
    """Delete a directory.

    Without recursive=True only an empty directory can be removed; the
    OSError raised for a non-empty one propagates.
    """
    p = Path(path)
    if not p.exists():
        _logger.debug(f"Attempted to delete a non-existing directory: {p}")
        return
    if not p.is_dir():
        raise InvalidTargetError(f"Not a directory: {p}")

    try:
        if recursive:
            shutil.rmtree(p)
        else:
            p.rmdir()
    except FileNotFoundError:
        _logger.debug(f"Directory vanished before it could be deleted: {p}")


def copy_raw_file(src: PathLike, dst: PathLike) -> None:
    """Byte-exact copy of one file. Permissions and timestamps are not copied."""
    shutil.copyfile(src, dst)


def list_dir(path: PathLike, pattern: str = "*", *, recursive: bool = False) -> list[EntryInfo]:
    """List entries of a directory matching a glob pattern.

    Ordering is stable: lexicographic by path.
    """
    base = Path(path)
    if not base.exists():
        raise NotFoundError(f"Not found: {base}")
    if not base.is_dir():
        raise InvalidTargetError(f"Not a directory: {base}")

    items = base.rglob(pattern) if recursive else base.glob(pattern)
    return [EntryInfo.from_path(p) for p in sorted(items)]


def get_temporary_directory(parent: PathLike | None = None) -> Path:
    """Create and return a uniquely named, empty temporary directory."""
    if parent is not None:
        Path(parent).mkdir(parents=True, exist_ok=True)
    return Path(tempfile.mkdtemp(prefix=TEMP_PREFIX, dir=parent))


def get_temporary_file_path() -> Path:
    """Create an empty, uniquely named temporary file and return its path."""
    fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX)
    os.close(fd)
    return Path(name)


def read_text(path: PathLike, *, encoding: TextEncoding | str = TextEncoding.UTF8) -> str:
    with open(path, encoding=str(encoding), newline="") as f:
        return f.read()


def read_lines(path: PathLike, *, encoding: TextEncoding | str = TextEncoding.UTF8) -> list[str]:
    """Read all lines without their line terminators."""
    with open(path, encoding=str(encoding)) as f:
        return f.read().splitlines()


def read_bytes(path: PathLike) -> bytes:
    return Path(path).read_bytes()


def _skip_write(p: Path, overwrite: bool) -> bool:
    if p.is_dir():
        raise InvalidTargetError(f"Is a directory: {p}")
    if p.exists() and not overwrite:
        _logger.verbose(f"Not overwriting existing file: {p}")
        return True
    return False


def write_text(
    path: PathLike,
    content: str,
    *,
    encoding: TextEncoding | str = TextEncoding.UTF8,
    overwrite: bool = True,
) -> EntryInfo:
    """Write text to a file.

    When the file exists and overwrite is false the file is left untouched and
    its current metadata is returned.
    """
    p = Path(path)
    if not _skip_write(p, overwrite):
        with open(p, "w", encoding=str(encoding), newline="") as f:
            f.write(content)
    return EntryInfo.from_path(p)


def write_lines(
    path: PathLike,
    lines: Iterable[str],
    *,
    encoding: TextEncoding | str = TextEncoding.UTF8,
    overwrite: bool = True,
) -> EntryInfo:
    """Write lines, each followed by the platform line separator."""
    p = Path(path)
    if not _skip_write(p, overwrite):
        with open(p, "w", encoding=str(encoding)) as f:
            for line in lines:
                f.write(line)
                f.write("\n")
    return EntryInfo.from_path(p)


def write_bytes(path: PathLike, data: bytes, *, overwrite: bool = True) -> EntryInfo:
    p = Path(path)
    if not _skip_write(p, overwrite):
        p.write_bytes(data)
    return EntryInfo.from_path(p)


def append_text(
    path: PathLike, content: str, *, encoding: TextEncoding | str = TextEncoding.UTF8
) -> EntryInfo:
    """Append content on a new line (a line break is written first)."""
    p = Path(path)
    with open(p, "a", encoding=str(encoding)) as f:
        f.write("\n")
        f.write(content)
    return EntryInfo.from_path(p)


def append_lines(
    path: PathLike, lines: Iterable[str], *, encoding: TextEncoding | str = TextEncoding.UTF8
) -> EntryInfo:
    p = Path(path)
    with open(p, "a", encoding=str(encoding)) as f:
        f.write("\n")
        for line in lines:
            f.write(line)
            f.write("\n")
    return EntryInfo.from_path(p)
