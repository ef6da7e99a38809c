"""Base64 helpers with a payload size limit."""

from __future__ import annotations

import base64
import binascii
from pathlib import Path

from filemason.core.errors import (
    FileError,
    InvalidTargetError,
    NotFoundError,
    SizeLimitExceededError,
)

from .types import PathLike, TextEncoding

DEFAULT_MAX_BYTES = 64 * 1024 * 1024


def _check_size(size: int, max_bytes: int) -> None:
    if max_bytes > 0 and size > max_bytes:
        raise SizeLimitExceededError(size, max_bytes)


def encode_text_base64(
    value: str,
    *,
    encoding: TextEncoding | str = TextEncoding.UTF8,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> str:
    data = value.encode(str(encoding))
    _check_size(len(data), max_bytes)
    return base64.b64encode(data).decode("ascii")


def encode_file_base64(path: PathLike, *, max_bytes: int = DEFAULT_MAX_BYTES) -> str:
    """Base64-encode the raw bytes of a file (a BOM, if any, is kept)."""
    p = Path(path)
    if not p.exists():
        raise NotFoundError(f"Not found: {p}")
    if p.is_dir():
        raise InvalidTargetError(f"Is a directory: {p}")
    _check_size(p.stat().st_size, max_bytes)
    return base64.b64encode(p.read_bytes()).decode("ascii")


def decode_base64(value: str, *, max_bytes: int = DEFAULT_MAX_BYTES) -> bytes:
    # Every 4 input characters carry at most 3 bytes.
    _check_size(len(value) // 4 * 3, max_bytes)
    try:
        return base64.b64decode(value, validate=True)
    except binascii.Error as e:
        raise FileError(f"Invalid base64 payload: {e}") from e


def decode_text_base64(
    value: str,
    *,
    encoding: TextEncoding | str = TextEncoding.UTF8,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> str:
    raw = decode_base64(value, max_bytes=max_bytes)
    try:
        return raw.decode(str(encoding))
    except UnicodeDecodeError as e:
        raise FileError(f"Base64 payload is not valid {encoding} text: {e}") from e
