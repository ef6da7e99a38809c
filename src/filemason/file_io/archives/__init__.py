"""Zip archive staging and extraction."""

from .compressor import compress_directory, extract_directory
from .stager import ArchiveStager

__all__ = [
    "ArchiveStager",
    "compress_directory",
    "extract_directory",
]
