"""Zip compression of a whole directory and extraction back to one.

Entry names are relative to the compressed directory (its own folder name is
not included), use '/' separators and are written in sorted order. Empty
directories are stored as explicit directory entries so they survive a
round trip.
"""

from __future__ import annotations

import os
import shutil
import zipfile
from pathlib import Path, PurePosixPath

from filemason.core.errors import (
    AlreadyExistsError,
    ArchiveError,
    InvalidTargetError,
    NotFoundError,
)
from filemason.core.logging import get_logger

from ..types import CompressionLevel, PathLike

_logger = get_logger(__name__)


def compress_directory(
    source_dir: PathLike,
    archive_path: PathLike,
    *,
    level: CompressionLevel | str = CompressionLevel.OPTIMAL,
) -> tuple[int, int]:
    """Write every file and empty directory under source_dir into a new zip.

    The archive file is created exclusively; an existing file at archive_path
    raises AlreadyExistsError.

    Returns:
        (files_written, total_uncompressed_bytes)
    """
    src = Path(source_dir)
    dst = Path(archive_path)
    if not src.is_dir():
        raise NotFoundError(f"Source directory not found: {src}")

    compress_type, compresslevel = CompressionLevel(level).zip_params()

    files = 0
    total = 0
    try:
        with zipfile.ZipFile(
            dst, "x", compression=compress_type, compresslevel=compresslevel
        ) as zf:
            for p in sorted(src.rglob("*")):
                arcname = p.relative_to(src).as_posix()
                if p.is_dir():
                    if not any(p.iterdir()):
                        zf.write(p, arcname)
                    continue
                zf.write(p, arcname)
                files += 1
                total += p.stat().st_size
    except FileExistsError:
        raise AlreadyExistsError(str(dst)) from None
    except BaseException:
        # Do not leave a truncated archive behind.
        dst.unlink(missing_ok=True)
        raise
    return files, total


def _entry_target(dest: Path, info: zipfile.ZipInfo) -> Path:
    name = info.filename.replace("\\", "/")
    rel = PurePosixPath(name)
    if rel.is_absolute() or ".." in rel.parts:
        raise ArchiveError(f"Archive entry escapes destination: {info.filename}")
    target = (dest / Path(*rel.parts)).resolve()
    try:
        target.relative_to(dest.resolve())
    except ValueError:
        raise ArchiveError(f"Archive entry escapes destination: {info.filename}") from None
    return target


def extract_directory(
    archive_path: PathLike,
    dest_dir: PathLike,
    *,
    overwrite: bool = False,
) -> tuple[int, int]:
    """Extract a zip into dest_dir, creating dest_dir when missing.

    All entries are checked before anything is written: without overwrite an
    existing file at any entry's location raises AlreadyExistsError, and a
    file entry landing on an existing directory raises InvalidTargetError.

    Returns:
        (files_extracted, total_uncompressed_bytes)
    """
    src = Path(archive_path)
    dest = Path(dest_dir)
    if not src.is_file():
        raise NotFoundError(f"Archive not found: {src}")

    try:
        zf = zipfile.ZipFile(src, "r")
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"Not a valid zip archive: {src}") from e

    with zf:
        plan: list[tuple[zipfile.ZipInfo, Path]] = []
        for info in zf.infolist():
            target = _entry_target(dest, info)
            if not info.is_dir():
                if target.is_dir():
                    raise InvalidTargetError(
                        f"Archive file entry collides with a directory: {target}"
                    )
                if target.exists() and not overwrite:
                    raise AlreadyExistsError(str(target))
            plan.append((info, target))

        dest.mkdir(parents=True, exist_ok=True)
        files = 0
        total = 0
        for info, target in plan:
            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info, "r") as src_f, open(target, "wb") as dst_f:
                shutil.copyfileobj(src_f, dst_f)
            files += 1
            total += int(info.file_size)

    _logger.debug(f"extract_directory archive={os.fspath(src)!r} files={files} bytes={total}")
    return files, total
