"""Types for the file_io package."""

from __future__ import annotations

import os
import zipfile
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

PathLike = str | os.PathLike[str]


class TextEncoding(StrEnum):
    """Text encodings accepted by read/write helpers."""

    UTF8 = "utf-8"
    UTF8_SIG = "utf-8-sig"
    UTF16 = "utf-16"
    UTF16_LE = "utf-16-le"
    UTF16_BE = "utf-16-be"
    UTF32 = "utf-32"
    ASCII = "ascii"
    LATIN1 = "latin-1"


class HashAlgorithm(StrEnum):
    MD5 = "md5"
    SHA256 = "sha256"
    SHA512 = "sha512"


class CompressionLevel(StrEnum):
    """Zip compression presets."""

    OPTIMAL = "optimal"
    FASTEST = "fastest"
    NO_COMPRESSION = "no_compression"
    SMALLEST_SIZE = "smallest_size"

    def zip_params(self) -> tuple[int, int | None]:
        """Return (compress_type, compresslevel) for zipfile."""
        return _ZIP_PARAMS[self]


_ZIP_PARAMS: dict[CompressionLevel, tuple[int, int | None]] = {
    CompressionLevel.OPTIMAL: (zipfile.ZIP_DEFLATED, 6),
    CompressionLevel.FASTEST: (zipfile.ZIP_DEFLATED, 1),
    CompressionLevel.NO_COMPRESSION: (zipfile.ZIP_STORED, None),
    CompressionLevel.SMALLEST_SIZE: (zipfile.ZIP_DEFLATED, 9),
}


@dataclass(frozen=True)
class EntryInfo:
    """Metadata for a file or directory, read at the moment of the call."""

    path: Path
    is_dir: bool
    size: int
    mtime: float

    @property
    def name(self) -> str:
        return self.path.name

    @classmethod
    def from_path(cls, path: PathLike) -> EntryInfo:
        p = Path(path).absolute()
        st = p.stat()
        is_dir = p.is_dir()
        return cls(
            path=p,
            is_dir=is_dir,
            size=0 if is_dir else int(st.st_size),
            mtime=float(st.st_mtime),
        )
