"""Unit tests for hashing and base64 helpers."""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from filemason.core.errors import (
    FileError,
    InvalidTargetError,
    NotFoundError,
    SizeLimitExceededError,
)
from filemason.file_io.checksums import CHUNK_SIZE, hash_file, hash_text
from filemason.file_io.encoding import (
    decode_base64,
    decode_text_base64,
    encode_file_base64,
    encode_text_base64,
)
from filemason.file_io.types import HashAlgorithm

FOX = "The quick brown fox jumps over the lazy dog"


class TestHashing:
    def test_known_digests(self) -> None:
        assert hash_text(FOX, HashAlgorithm.MD5) == "9e107d9d372bb6826bd81d3542a419d6"
        assert (
            hash_text(FOX)
            == "d7a8fbb307d7809469ca9abcb0082e4f8d5651e46d3cdb762d02d0bf37c9e592"
        )

    def test_algorithm_by_name(self) -> None:
        assert hash_text(FOX, "sha512") == hashlib.sha512(FOX.encode()).hexdigest()

    def test_unknown_algorithm(self) -> None:
        with pytest.raises(ValueError):
            hash_text(FOX, "crc32")

    def test_text_encoding_changes_digest(self) -> None:
        assert hash_text("é", encoding="utf-8") != hash_text("é", encoding="latin-1")

    def test_file_digest_matches_text_digest(self, tmp_path: Path) -> None:
        f = tmp_path / "fox.txt"
        f.write_bytes(FOX.encode("utf-8"))

        assert hash_file(f, HashAlgorithm.MD5) == hash_text(FOX, HashAlgorithm.MD5)

    def test_file_larger_than_one_chunk(self, tmp_path: Path) -> None:
        data = b"x" * (CHUNK_SIZE * 2 + 7)
        f = tmp_path / "big.bin"
        f.write_bytes(data)

        assert hash_file(f) == hashlib.sha256(data).hexdigest()

    def test_missing_and_directory(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError):
            hash_file(tmp_path / "missing")
        with pytest.raises(InvalidTargetError):
            hash_file(tmp_path)


class TestBase64:
    def test_text_round_trip(self) -> None:
        encoded = encode_text_base64("Ahoj, světe")

        assert decode_text_base64(encoded) == "Ahoj, světe"

    def test_known_value(self) -> None:
        assert encode_text_base64("hello") == "aGVsbG8="
        assert decode_base64("aGVsbG8=") == b"hello"

    def test_file_keeps_raw_bytes(self, tmp_path: Path) -> None:
        f = tmp_path / "bom.txt"
        f.write_bytes(b"\xef\xbb\xbfhi")

        assert decode_base64(encode_file_base64(f)) == b"\xef\xbb\xbfhi"

    def test_encode_limit(self) -> None:
        with pytest.raises(SizeLimitExceededError) as excinfo:
            encode_text_base64("abcd", max_bytes=3)

        assert excinfo.value.size == 4
        assert excinfo.value.limit == 3

    def test_file_limit_checked_before_reading(self, tmp_path: Path) -> None:
        f = tmp_path / "f.bin"
        f.write_bytes(b"0123456789")

        with pytest.raises(SizeLimitExceededError):
            encode_file_base64(f, max_bytes=9)

    def test_decode_limit(self) -> None:
        with pytest.raises(SizeLimitExceededError):
            decode_base64("aGVsbG8gd29ybGQ=", max_bytes=4)

    def test_zero_limit_disables_check(self) -> None:
        assert encode_text_base64("abcd", max_bytes=0) == "YWJjZA=="

    def test_invalid_payload(self) -> None:
        with pytest.raises(FileError):
            decode_base64("not base64!")

    def test_payload_not_valid_in_encoding(self) -> None:
        # "/w==" decodes to the single byte 0xff.
        with pytest.raises(FileError, match="not valid utf-8 text") as excinfo:
            decode_text_base64("/w==", encoding="utf-8")

        assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)

    def test_encode_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError):
            encode_file_base64(tmp_path / "missing")
