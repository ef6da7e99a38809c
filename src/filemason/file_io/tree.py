"""Recursive copy and move of files and directory trees.

Copying a directory walks it level by level with an explicit stack of pending
(source, destination, depth) pairs rather than call-stack recursion, so a depth
limit can be enforced deterministically. Symbolic links are followed like
regular entries; a link cycle is only stopped by max_depth (or by the
platform's path-length limit when no max_depth is given).

A move is a copy followed by deletion of the source. It is exposed as two
phases (prepare_move_*() then PendingMove.complete()) so callers can observe
or act on the copied-but-not-yet-deleted state. Nothing is rolled back: a
failure mid-copy leaves already-copied entries in place, and a failure before
complete() leaves both source and destination.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from filemason.core.errors import (
    AlreadyExistsError,
    DepthLimitExceededError,
    InvalidTargetError,
    NotFoundError,
)
from filemason.core.logging import get_logger

from . import ops
from .paths import propose_directory_path, propose_file_path
from .types import EntryInfo, PathLike

_logger = get_logger(__name__)


def copy_file(
    source: PathLike,
    dest: PathLike,
    *,
    overwrite: bool = False,
    mkdir_parents: bool = True,
) -> EntryInfo:
    """Copy one file byte-for-byte.

    Raises:
        NotFoundError: source does not exist.
        InvalidTargetError: source is a directory, or dest is an existing
            directory (never silently redirected into it), or source and dest
            are the same file.
        AlreadyExistsError: dest exists and overwrite is false.

    With overwrite=True an existing dest is deleted before copying. This is
    not an atomic replace: a crash between the two steps leaves no file.
    """
    src_path = Path(source)
    dst_path = Path(dest)

    if not src_path.exists():
        raise NotFoundError(f"Not found: {src_path}")
    if src_path.is_dir():
        raise InvalidTargetError(f"Source is a directory: {src_path}")
    if dst_path.is_dir():
        raise InvalidTargetError(f"Destination is a directory: {dst_path}")
    if dst_path.exists() and os.path.samefile(src_path, dst_path):
        raise InvalidTargetError(f"Source and destination are the same file: {src_path}")

    if ops.exists(dst_path):
        if not overwrite:
            raise AlreadyExistsError(str(dst_path))
        ops.delete_file(dst_path)

    if mkdir_parents:
        dst_path.parent.mkdir(parents=True, exist_ok=True)

    ops.copy_raw_file(src_path, dst_path)
    return EntryInfo.from_path(dst_path)


def copy_directory(
    source_dir: PathLike,
    dest_dir: PathLike,
    *,
    overwrite: bool = False,
    max_depth: int | None = None,
) -> EntryInfo:
    """Copy the contents of source_dir into dest_dir.

    For each child of a directory:
    - overwrite=True: the destination is dest/child.name; existing files are
      replaced and existing directories are merged into.
    - overwrite=False: the destination name comes from propose_file_path() /
      propose_directory_path() against dest, so nothing existing is touched.

    The same overwrite flag applies at every level. dest_dir is created when
    missing. max_depth counts directory levels below source_dir (its direct
    subdirectories are depth 1); None or 0 means unbounded.
    A dest_dir equal to or inside source_dir is rejected with
    InvalidTargetError before anything is written.

    Returns:
        Metadata for dest_dir.
    """
    src_root = Path(source_dir)
    dst_root = Path(dest_dir)

    if not src_root.exists():
        raise NotFoundError(f"Not found: {src_root}")
    if not src_root.is_dir():
        raise InvalidTargetError(f"Not a directory: {src_root}")
    src_real, dst_real = src_root.resolve(), dst_root.resolve()
    if dst_real == src_real or src_real in dst_real.parents:
        raise InvalidTargetError(f"Destination lies inside the source tree: {dst_root}")

    ops.create_directory(dst_root)

    files = 0
    dirs = 0
    pending: list[tuple[Path, Path, int]] = [(src_root, dst_root, 0)]
    while pending:
        src, dst, depth = pending.pop()
        for child in sorted(src.iterdir(), key=lambda p: p.name):
            if child.is_dir():
                if max_depth and depth + 1 > max_depth:
                    raise DepthLimitExceededError(str(child), max_depth)
                target = (
                    dst / child.name
                    if overwrite
                    else propose_directory_path(dst, child.name, sanitize=False)
                )
                ops.create_directory(target)
                pending.append((child, target, depth + 1))
                dirs += 1
            else:
                target = (
                    dst / child.name
                    if overwrite
                    else propose_file_path(dst, child.name, sanitize=False)
                )
                copy_file(child, target, overwrite=overwrite, mkdir_parents=False)
                files += 1

    _logger.verbose(
        f"file_io.copy_directory src={str(src_root)!r} dst={str(dst_root)!r} "
        f"files={files} dirs={dirs} overwrite={overwrite}"
    )
    return EntryInfo.from_path(dst_root)


@dataclass
class PendingMove:
    """A move whose copy phase has finished but whose source still exists."""

    source: Path
    destination: Path
    result: EntryInfo
    completed: bool = False

    @property
    def is_dir(self) -> bool:
        return self.result.is_dir

    def complete(self) -> EntryInfo:
        """Delete the source, finishing the move. Calling it twice is a no-op."""
        if not self.completed:
            if self.is_dir:
                ops.delete_directory(self.source, recursive=True)
            else:
                ops.delete_file(self.source)
            self.completed = True
        return self.result


def prepare_move_file(source: PathLike, dest: PathLike, *, overwrite: bool = False) -> PendingMove:
    """Copy phase of move_file(); see copy_file() for errors."""
    result = copy_file(source, dest, overwrite=overwrite)
    return PendingMove(source=Path(source), destination=Path(dest), result=result)


def prepare_move_directory(
    source_dir: PathLike,
    dest_dir: PathLike,
    *,
    overwrite: bool = False,
    max_depth: int | None = None,
) -> PendingMove:
    """Copy phase of move_directory(); see copy_directory() for errors."""
    result = copy_directory(source_dir, dest_dir, overwrite=overwrite, max_depth=max_depth)
    return PendingMove(source=Path(source_dir), destination=Path(dest_dir), result=result)


def move_file(source: PathLike, dest: PathLike, *, overwrite: bool = False) -> EntryInfo:
    """Copy source to dest, then delete source."""
    return prepare_move_file(source, dest, overwrite=overwrite).complete()


def move_directory(
    source_dir: PathLike,
    dest_dir: PathLike,
    *,
    overwrite: bool = False,
    max_depth: int | None = None,
) -> EntryInfo:
    """Copy a directory tree to dest_dir, then delete the source tree."""
    pending = prepare_move_directory(source_dir, dest_dir, overwrite=overwrite, max_depth=max_depth)
    return pending.complete()
