"""Error hierarchy with friendly messages."""

from __future__ import annotations


class FileMasonError(Exception):
    """Base exception for all filemason errors."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ConfigError(FileMasonError):
    """Configuration error."""

    pass


class FileError(FileMasonError):
    """File operation error."""

    pass


class NotFoundError(FileError):
    """Raised when a source file or directory does not exist."""


class AlreadyExistsError(FileError):
    """Raised when a destination already exists and overwrite is disabled."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Destination already exists: {path}",
            "Pass overwrite=True or pick a free name with propose_file_path()",
        )
        self.path = path


class InvalidTargetError(FileError):
    """Raised when a path has the wrong type for the operation or overlaps its source."""


class SizeLimitExceededError(FileError):
    """Raised when a payload is larger than the configured limit."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"Payload of {size} bytes exceeds the limit of {limit} bytes",
            "Raise file_io.encoding.max_base64_bytes or stream the file instead",
        )
        self.size = size
        self.limit = limit


class DepthLimitExceededError(FileError):
    """Raised when a tree copy descends deeper than its max_depth."""

    def __init__(self, path: str, max_depth: int) -> None:
        super().__init__(
            f"Directory depth limit ({max_depth}) exceeded at '{path}'",
            "Check the source tree for symbolic-link cycles",
        )
        self.path = path
        self.max_depth = max_depth


class ArchiveError(FileError):
    """Archive creation or extraction failed."""

    pass
