"""filemason - filesystem tree manipulation.

Conflict-free path allocation, recursive directory copy/move and zip
staging/extraction for mixed file-and-directory inputs.
"""

__version__ = "1.0.0"

from filemason.file_io import (
    ArchiveStager,
    CompressionLevel,
    EntryInfo,
    FileManager,
    HashAlgorithm,
    PendingMove,
    TextEncoding,
)

__all__ = [
    "ArchiveStager",
    "CompressionLevel",
    "EntryInfo",
    "FileManager",
    "HashAlgorithm",
    "PendingMove",
    "TextEncoding",
    "__version__",
]
