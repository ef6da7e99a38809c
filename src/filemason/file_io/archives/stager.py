"""Zip archives built from a mixture of files and directories.

create_archive() assembles its inputs in an ephemeral staging directory:

    staging/
        <dir source basename>/...   (full tree copy)
        <file source basename>

then compresses the staging directory (entries relative to the staging root)
and removes it. The staging directory is owned by a single call and is deleted
on every exit path.

The temporary-directory capability is injected so that tests (and callers with
special disk layouts) can control where staging happens.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from pathlib import Path

from filemason.core.errors import (
    AlreadyExistsError,
    ArchiveError,
    FileError,
    InvalidTargetError,
    NotFoundError,
)
from filemason.core.logging import get_logger

from .. import ops
from ..tree import copy_directory, copy_file
from ..types import CompressionLevel, EntryInfo, PathLike
from .compressor import compress_directory, extract_directory

_logger = get_logger(__name__)

TempDirFactory = Callable[[], Path]


class ArchiveStager:
    """Build and extract zip archives."""

    def __init__(
        self,
        temp_dir_factory: TempDirFactory | None = None,
        *,
        compression: CompressionLevel | str = CompressionLevel.OPTIMAL,
        max_depth: int | None = None,
    ) -> None:
        self._temp_dir_factory = temp_dir_factory or ops.get_temporary_directory
        self._compression = CompressionLevel(compression)
        self._max_depth = max_depth

    def create_archive(
        self,
        destination: PathLike,
        sources: Sequence[PathLike],
        *,
        overwrite: bool = False,
    ) -> EntryInfo:
        """Zip the given files and directories into destination.

        Each source lands at the archive root under its own base name; a
        directory keeps its full tree. Sources are staged in order with
        overwrite always on, so a later source replaces an earlier file of the
        same name. The caller's overwrite flag only governs destination.

        Raises:
            NotFoundError: a source does not exist.
            AlreadyExistsError: destination exists and overwrite is false.
            InvalidTargetError: destination is a directory.
            ArchiveError: any other failure while staging or compressing.
        """
        dst = Path(destination)
        staging = self._temp_dir_factory()
        _logger.debug(f"create_archive staging={os.fspath(staging)!r} sources={len(sources)}")
        failed = True
        try:
            for source in sources:
                src = Path(source).absolute()
                if src.is_dir():
                    copy_directory(
                        src, staging / src.name, overwrite=True, max_depth=self._max_depth
                    )
                elif src.exists():
                    copy_file(src, staging / src.name, overwrite=True)
                else:
                    raise NotFoundError(f"Archive source not found: {src}")

            if dst.is_dir():
                raise InvalidTargetError(f"Archive destination is a directory: {dst}")
            if overwrite:
                ops.delete_file(dst)
            elif dst.exists():
                raise AlreadyExistsError(str(dst))

            files, total = compress_directory(staging, dst, level=self._compression)
            failed = False
        except FileError:
            raise
        except Exception as e:
            raise ArchiveError(f"Failed to create archive {dst}: {e}") from e
        finally:
            self._discard_staging(staging, failed=failed)

        _logger.verbose(f"create_archive path={str(dst)!r} files={files} bytes={total}")
        return EntryInfo.from_path(dst)

    def extract_archive(
        self,
        archive_path: PathLike,
        destination_dir: PathLike,
        *,
        overwrite: bool = False,
    ) -> EntryInfo:
        """Extract archive_path into destination_dir (created when missing).

        No staging is involved; entries are written to their final location.
        """
        try:
            files, total = extract_directory(archive_path, destination_dir, overwrite=overwrite)
        except FileError:
            raise
        except Exception as e:
            raise ArchiveError(f"Failed to extract archive {archive_path}: {e}") from e

        _logger.verbose(
            f"extract_archive path={os.fspath(archive_path)!r} files={files} bytes={total}"
        )
        return EntryInfo.from_path(destination_dir)

    @staticmethod
    def _discard_staging(staging: Path, *, failed: bool) -> None:
        """Remove staging; when the build already failed, only log a cleanup error."""
        try:
            ops.delete_directory(staging, recursive=True)
        except (OSError, FileError) as e:
            if not failed:
                raise ArchiveError(f"Failed to remove staging directory {staging}: {e}") from e
            _logger.warning(
                f"create_archive staging={os.fspath(staging)!r} cleanup failed: "
                f"{type(e).__name__}: {e}"
            )
