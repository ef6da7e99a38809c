"""File manager facade.

One object exposing path proposals, single-file I/O, hashing, base64, tree
copy/move and archives. Every call is observed: an operation.start and an
operation.end envelope are published on the event bus and a summary line is
logged when the call ends.
"""

from __future__ import annotations

import os
import time
import traceback
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from enum import StrEnum
from pathlib import Path
from typing import Any

from filemason.core.config import ConfigResolver, coerce_int
from filemason.core.diagnostics import build_envelope
from filemason.core.errors import ConfigError
from filemason.core.events import get_event_bus
from filemason.core.logging import get_logger

from . import checksums, ops, paths, tree
from . import encoding as b64
from .archives import ArchiveStager
from .streams import BufferedLineReader
from .types import CompressionLevel, EntryInfo, HashAlgorithm, PathLike, TextEncoding

_logger = get_logger(__name__)


def _short_traceback(*, max_lines: int = 20) -> str:
    tb_lines = traceback.format_exc().strip().splitlines()
    return "\n".join(tb_lines[-max_lines:])


def _safe_publish(event: str, payload: dict[str, Any]) -> None:
    try:
        get_event_bus().publish(event, payload)
    except Exception as e:
        # Diagnostics emission must never break the operation itself.
        _logger.debug(f"event publish failed: {type(e).__name__}: {e}")


def _publish_end(operation: str, data: dict[str, Any]) -> None:
    _safe_publish(
        "operation.end",
        build_envelope(event="operation.end", component="file_io", operation=operation, data=data),
    )


@contextmanager
def _observe_operation(*, operation: str, base: dict[str, Any]) -> Iterator[dict[str, Any]]:
    start = time.perf_counter()
    _safe_publish(
        "operation.start",
        build_envelope(
            event="operation.start", component="file_io", operation=operation, data=dict(base)
        ),
    )

    summary: dict[str, Any] = {}
    try:
        yield summary
    except Exception as e:
        duration_ms = int((time.perf_counter() - start) * 1000)
        end_data = dict(base)
        end_data.update(
            {
                "status": "failed",
                "duration_ms": duration_ms,
                "error_type": type(e).__name__,
                "error_message": str(e),
                "traceback": _short_traceback(),
            }
        )
        _publish_end(operation, end_data)
        _logger.warning(
            f"{operation} status=failed duration_ms={duration_ms} "
            f"path={base.get('path')!r} error={type(e).__name__}"
        )
        raise
    else:
        duration_ms = int((time.perf_counter() - start) * 1000)
        end_data = dict(base)
        end_data.update(summary)
        end_data.update({"status": "succeeded", "duration_ms": duration_ms})
        _publish_end(operation, end_data)

        # Summary logs are emitted on end only.
        parts = ["status=succeeded", f"duration_ms={duration_ms}", f"path={base.get('path')!r}"]
        if "dst" in end_data:
            parts.append(f"dst={end_data['dst']!r}")
        for k in ("result_path", "items_count", "bytes", "overwrite"):
            if k in end_data:
                parts.append(f"{k}={end_data[k]!r}")
        _logger.info(f"{operation} " + " ".join(parts))


def _resolve_enum(
    resolver: ConfigResolver, key: str, enum_cls: type[StrEnum], default: StrEnum
) -> Any:
    value = resolver.resolve_or(key, default)
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ConfigError(
            f"Invalid '{key}': {value!r}. Allowed values: {allowed}"
        ) from None


class FileManager:
    """Filesystem operations with operation-level observability.

    Args:
        text_encoding: Default encoding for text reads and writes.
        max_depth: Directory-level limit for tree copies (None or 0 = unbounded).
        compression: Compression preset for created archives.
        temp_root: Parent for staging directories (None = system temp dir).
        max_base64_bytes: Payload limit for base64 helpers (<= 0 disables it).
    """

    def __init__(
        self,
        *,
        text_encoding: TextEncoding | str = TextEncoding.UTF8,
        max_depth: int | None = None,
        compression: CompressionLevel | str = CompressionLevel.OPTIMAL,
        temp_root: PathLike | None = None,
        max_base64_bytes: int = b64.DEFAULT_MAX_BYTES,
    ) -> None:
        self.text_encoding = TextEncoding(text_encoding)
        self.max_depth = max_depth or None
        self.compression = CompressionLevel(compression)
        self.temp_root = Path(temp_root).expanduser() if temp_root else None
        self.max_base64_bytes = max_base64_bytes
        self._stager = ArchiveStager(
            self.get_temporary_directory,
            compression=self.compression,
            max_depth=self.max_depth,
        )

    @classmethod
    def from_resolver(cls, resolver: ConfigResolver) -> FileManager:
        """Build a FileManager from ConfigResolver.

        Configuration keys:
        - file_io.text_encoding
        - file_io.tree.max_depth
        - file_io.archives.compression
        - file_io.staging.temp_root
        - file_io.encoding.max_base64_bytes
        """
        text_encoding = _resolve_enum(
            resolver, "file_io.text_encoding", TextEncoding, TextEncoding.UTF8
        )
        compression = _resolve_enum(
            resolver, "file_io.archives.compression", CompressionLevel, CompressionLevel.OPTIMAL
        )
        max_depth = coerce_int(
            "file_io.tree.max_depth", resolver.resolve_or("file_io.tree.max_depth", 0)
        )
        if max_depth < 0:
            raise ConfigError(f"Config key 'file_io.tree.max_depth' must be >= 0, got {max_depth}")
        max_bytes = coerce_int(
            "file_io.encoding.max_base64_bytes",
            resolver.resolve_or("file_io.encoding.max_base64_bytes", b64.DEFAULT_MAX_BYTES),
        )
        temp_root = resolver.resolve_or("file_io.staging.temp_root", "")

        return cls(
            text_encoding=text_encoding,
            max_depth=max_depth,
            compression=compression,
            temp_root=str(temp_root) if temp_root else None,
            max_base64_bytes=max_bytes,
        )

    def _encoding(self, value: TextEncoding | str | None) -> TextEncoding:
        return self.text_encoding if value is None else TextEncoding(value)

    # --- paths -------------------------------------------------------------

    def propose_file_path(self, base_path: PathLike, file_name: str | None = None) -> Path:
        base = {"path": os.fspath(base_path), "name": file_name}
        with _observe_operation(operation="file_io.propose_file_path", base=base) as summary:
            result = paths.propose_file_path(base_path, file_name)
            summary["result_path"] = str(result)
            return result

    def propose_directory_path(self, base_path: PathLike, name: str | None = None) -> Path:
        base = {"path": os.fspath(base_path), "name": name}
        with _observe_operation(operation="file_io.propose_directory_path", base=base) as summary:
            result = paths.propose_directory_path(base_path, name)
            summary["result_path"] = str(result)
            return result

    # --- single entries ----------------------------------------------------

    def exists(self, path: PathLike) -> bool:
        with _observe_operation(operation="file_io.exists", base={"path": os.fspath(path)}):
            return ops.exists(path)

    def get_info(self, path: PathLike) -> EntryInfo:
        with _observe_operation(operation="file_io.get_info", base={"path": os.fspath(path)}):
            return ops.get_info(path)

    def create_directory(self, path: PathLike) -> EntryInfo:
        with _observe_operation(
            operation="file_io.create_directory", base={"path": os.fspath(path)}
        ):
            return ops.create_directory(path)

    def delete_file(self, path: PathLike) -> None:
        with _observe_operation(operation="file_io.delete_file", base={"path": os.fspath(path)}):
            ops.delete_file(path)

    def delete_directory(self, path: PathLike, *, recursive: bool = False) -> None:
        base = {"path": os.fspath(path), "recursive": bool(recursive)}
        with _observe_operation(operation="file_io.delete_directory", base=base):
            ops.delete_directory(path, recursive=recursive)

    def list_dir(
        self, path: PathLike, pattern: str = "*", *, recursive: bool = False
    ) -> list[EntryInfo]:
        base = {"path": os.fspath(path), "pattern": pattern, "recursive": bool(recursive)}
        with _observe_operation(operation="file_io.list_dir", base=base) as summary:
            entries = ops.list_dir(path, pattern, recursive=recursive)
            summary["items_count"] = len(entries)
            return entries

    def get_temporary_directory(self) -> Path:
        """Create a fresh staging-capable directory under temp_root."""
        return ops.get_temporary_directory(self.temp_root)

    def get_temporary_file_path(self) -> Path:
        return ops.get_temporary_file_path()

    # --- text and binary I/O -----------------------------------------------

    def read_text(self, path: PathLike, *, encoding: TextEncoding | str | None = None) -> str:
        with _observe_operation(operation="file_io.read_text", base={"path": os.fspath(path)}):
            return ops.read_text(path, encoding=self._encoding(encoding))

    def read_lines(
        self, path: PathLike, *, encoding: TextEncoding | str | None = None
    ) -> list[str]:
        with _observe_operation(
            operation="file_io.read_lines", base={"path": os.fspath(path)}
        ) as summary:
            lines = ops.read_lines(path, encoding=self._encoding(encoding))
            summary["items_count"] = len(lines)
            return lines

    def read_bytes(self, path: PathLike) -> bytes:
        with _observe_operation(
            operation="file_io.read_bytes", base={"path": os.fspath(path)}
        ) as summary:
            data = ops.read_bytes(path)
            summary["bytes"] = len(data)
            return data

    def open_lines(
        self, path: PathLike, *, encoding: TextEncoding | str | None = None
    ) -> BufferedLineReader:
        """Return a line reader; use it as a context manager."""
        return BufferedLineReader(path, encoding=self._encoding(encoding))

    def write_text(
        self,
        path: PathLike,
        content: str,
        *,
        encoding: TextEncoding | str | None = None,
        overwrite: bool = True,
    ) -> EntryInfo:
        base = {"path": os.fspath(path), "overwrite": bool(overwrite)}
        with _observe_operation(operation="file_io.write_text", base=base):
            return ops.write_text(
                path, content, encoding=self._encoding(encoding), overwrite=overwrite
            )

    def write_lines(
        self,
        path: PathLike,
        lines: Iterable[str],
        *,
        encoding: TextEncoding | str | None = None,
        overwrite: bool = True,
    ) -> EntryInfo:
        base = {"path": os.fspath(path), "overwrite": bool(overwrite)}
        with _observe_operation(operation="file_io.write_lines", base=base):
            return ops.write_lines(
                path, lines, encoding=self._encoding(encoding), overwrite=overwrite
            )

    def write_bytes(self, path: PathLike, data: bytes, *, overwrite: bool = True) -> EntryInfo:
        base = {"path": os.fspath(path), "overwrite": bool(overwrite)}
        with _observe_operation(operation="file_io.write_bytes", base=base) as summary:
            summary["bytes"] = len(data)
            return ops.write_bytes(path, data, overwrite=overwrite)

    def append_text(
        self, path: PathLike, content: str, *, encoding: TextEncoding | str | None = None
    ) -> EntryInfo:
        with _observe_operation(operation="file_io.append_text", base={"path": os.fspath(path)}):
            return ops.append_text(path, content, encoding=self._encoding(encoding))

    def append_lines(
        self, path: PathLike, lines: Iterable[str], *, encoding: TextEncoding | str | None = None
    ) -> EntryInfo:
        with _observe_operation(operation="file_io.append_lines", base={"path": os.fspath(path)}):
            return ops.append_lines(path, lines, encoding=self._encoding(encoding))

    # --- hashing and base64 ------------------------------------------------

    def hash_text(
        self,
        value: str,
        algo: HashAlgorithm | str = HashAlgorithm.SHA256,
        *,
        encoding: TextEncoding | str | None = None,
    ) -> str:
        base = {"path": None, "algo": str(algo)}
        with _observe_operation(operation="file_io.hash_text", base=base):
            return checksums.hash_text(value, algo, encoding=self._encoding(encoding))

    def hash_file(self, path: PathLike, algo: HashAlgorithm | str = HashAlgorithm.SHA256) -> str:
        base = {"path": os.fspath(path), "algo": str(algo)}
        with _observe_operation(operation="file_io.hash_file", base=base):
            return checksums.hash_file(path, algo)

    def encode_text_base64(
        self, value: str, *, encoding: TextEncoding | str | None = None
    ) -> str:
        with _observe_operation(operation="file_io.encode_text_base64", base={"path": None}):
            return b64.encode_text_base64(
                value, encoding=self._encoding(encoding), max_bytes=self.max_base64_bytes
            )

    def decode_text_base64(
        self, value: str, *, encoding: TextEncoding | str | None = None
    ) -> str:
        with _observe_operation(operation="file_io.decode_text_base64", base={"path": None}):
            return b64.decode_text_base64(
                value, encoding=self._encoding(encoding), max_bytes=self.max_base64_bytes
            )

    def encode_file_base64(self, path: PathLike) -> str:
        with _observe_operation(
            operation="file_io.encode_file_base64", base={"path": os.fspath(path)}
        ):
            return b64.encode_file_base64(path, max_bytes=self.max_base64_bytes)

    def decode_base64(self, value: str) -> bytes:
        with _observe_operation(operation="file_io.decode_base64", base={"path": None}) as summary:
            data = b64.decode_base64(value, max_bytes=self.max_base64_bytes)
            summary["bytes"] = len(data)
            return data

    # --- trees -------------------------------------------------------------

    def copy_file(
        self, source: PathLike, dest: PathLike, *, overwrite: bool = False
    ) -> EntryInfo:
        base = {"path": os.fspath(source), "dst": os.fspath(dest), "overwrite": bool(overwrite)}
        with _observe_operation(operation="file_io.copy_file", base=base) as summary:
            info = tree.copy_file(source, dest, overwrite=overwrite)
            summary["bytes"] = info.size
            return info

    def copy_directory(
        self, source_dir: PathLike, dest_dir: PathLike, *, overwrite: bool = False
    ) -> EntryInfo:
        base = {
            "path": os.fspath(source_dir),
            "dst": os.fspath(dest_dir),
            "overwrite": bool(overwrite),
            "max_depth": self.max_depth,
        }
        with _observe_operation(operation="file_io.copy_directory", base=base):
            return tree.copy_directory(
                source_dir, dest_dir, overwrite=overwrite, max_depth=self.max_depth
            )

    def move_file(self, source: PathLike, dest: PathLike, *, overwrite: bool = False) -> EntryInfo:
        base = {"path": os.fspath(source), "dst": os.fspath(dest), "overwrite": bool(overwrite)}
        with _observe_operation(operation="file_io.move_file", base=base):
            return tree.move_file(source, dest, overwrite=overwrite)

    def move_directory(
        self, source_dir: PathLike, dest_dir: PathLike, *, overwrite: bool = False
    ) -> EntryInfo:
        base = {
            "path": os.fspath(source_dir),
            "dst": os.fspath(dest_dir),
            "overwrite": bool(overwrite),
            "max_depth": self.max_depth,
        }
        with _observe_operation(operation="file_io.move_directory", base=base):
            return tree.move_directory(
                source_dir, dest_dir, overwrite=overwrite, max_depth=self.max_depth
            )

    def prepare_move_file(
        self, source: PathLike, dest: PathLike, *, overwrite: bool = False
    ) -> tree.PendingMove:
        """Copy phase of a file move; call complete() on the result to finish."""
        base = {"path": os.fspath(source), "dst": os.fspath(dest), "overwrite": bool(overwrite)}
        with _observe_operation(operation="file_io.prepare_move_file", base=base):
            return tree.prepare_move_file(source, dest, overwrite=overwrite)

    def prepare_move_directory(
        self, source_dir: PathLike, dest_dir: PathLike, *, overwrite: bool = False
    ) -> tree.PendingMove:
        base = {
            "path": os.fspath(source_dir),
            "dst": os.fspath(dest_dir),
            "overwrite": bool(overwrite),
            "max_depth": self.max_depth,
        }
        with _observe_operation(operation="file_io.prepare_move_directory", base=base):
            return tree.prepare_move_directory(
                source_dir, dest_dir, overwrite=overwrite, max_depth=self.max_depth
            )

    # --- archives ----------------------------------------------------------

    def create_archive(
        self, destination: PathLike, sources: Sequence[PathLike], *, overwrite: bool = False
    ) -> EntryInfo:
        base = {
            "path": os.fspath(destination),
            "sources": [os.fspath(s) for s in sources],
            "overwrite": bool(overwrite),
            "compression": self.compression.value,
        }
        with _observe_operation(operation="file_io.create_archive", base=base) as summary:
            info = self._stager.create_archive(destination, sources, overwrite=overwrite)
            summary["bytes"] = info.size
            return info

    def extract_archive(
        self, archive_path: PathLike, destination_dir: PathLike, *, overwrite: bool = False
    ) -> EntryInfo:
        base = {
            "path": os.fspath(archive_path),
            "dst": os.fspath(destination_dir),
            "overwrite": bool(overwrite),
        }
        with _observe_operation(operation="file_io.extract_archive", base=base):
            return self._stager.extract_archive(
                archive_path, destination_dir, overwrite=overwrite
            )
