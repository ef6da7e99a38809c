"""file_io package: path proposals, tree copy/move and archive staging."""

from .archives import ArchiveStager, compress_directory, extract_directory
from .checksums import hash_file, hash_text
from .encoding import decode_base64, decode_text_base64, encode_file_base64, encode_text_base64
from .paths import propose_directory_path, propose_file_path, sanitize_file_name, sanitize_path
from .service import FileManager
from .streams import BufferedLineReader
from .tree import (
    PendingMove,
    copy_directory,
    copy_file,
    move_directory,
    move_file,
    prepare_move_directory,
    prepare_move_file,
)
from .types import CompressionLevel, EntryInfo, HashAlgorithm, TextEncoding

__all__ = [
    "ArchiveStager",
    "BufferedLineReader",
    "CompressionLevel",
    "EntryInfo",
    "FileManager",
    "HashAlgorithm",
    "PendingMove",
    "TextEncoding",
    "compress_directory",
    "copy_directory",
    "copy_file",
    "decode_base64",
    "decode_text_base64",
    "encode_file_base64",
    "encode_text_base64",
    "extract_directory",
    "hash_file",
    "hash_text",
    "move_directory",
    "move_file",
    "prepare_move_directory",
    "prepare_move_file",
    "propose_directory_path",
    "propose_file_path",
    "sanitize_file_name",
    "sanitize_path",
]
