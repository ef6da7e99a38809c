"""Checksum helpers for file_io."""

from __future__ import annotations

import hashlib
from pathlib import Path

from filemason.core.errors import InvalidTargetError, NotFoundError

from .types import HashAlgorithm, PathLike, TextEncoding

CHUNK_SIZE = 1024 * 1024


def hash_text(
    value: str,
    algo: HashAlgorithm | str = HashAlgorithm.SHA256,
    *,
    encoding: TextEncoding | str = TextEncoding.UTF8,
) -> str:
    """Hash the encoded bytes of a string and return a lowercase hex digest."""
    return hashlib.new(HashAlgorithm(algo).value, value.encode(str(encoding))).hexdigest()


def hash_file(path: PathLike, algo: HashAlgorithm | str = HashAlgorithm.SHA256) -> str:
    """Compute a file checksum and return a lowercase hex digest."""
    p = Path(path)
    if not p.exists():
        raise NotFoundError(f"Not found: {p}")
    if p.is_dir():
        raise InvalidTargetError(f"Is a directory: {p}")

    h = hashlib.new(HashAlgorithm(algo).value)
    with open(p, "rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            h.update(chunk)
    return h.hexdigest()
