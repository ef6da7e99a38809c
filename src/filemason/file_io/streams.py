"""Line-at-a-time text reading."""

from __future__ import annotations

from collections.abc import Iterator
from types import TracebackType

from .types import PathLike, TextEncoding


class BufferedLineReader:
    """Read a text file one line at a time, tracking the line number.

    Usage:
        with BufferedLineReader(path) as reader:
            while (line := reader.read_line()) is not None:
                handle(reader.current_line_number, line)
    """

    def __init__(self, path: PathLike, *, encoding: TextEncoding | str = TextEncoding.UTF8) -> None:
        self._f = open(path, encoding=str(encoding))
        self.current_line: str | None = None
        self.current_line_number = 0

    def read_line(self) -> str | None:
        """Return the next line without its terminator, or None at end of file."""
        raw = self._f.readline()
        if not raw:
            self.current_line = None
            return None
        self.current_line = raw.rstrip("\r\n")
        self.current_line_number += 1
        return self.current_line

    def __iter__(self) -> Iterator[str]:
        while (line := self.read_line()) is not None:
            yield line

    def close(self) -> None:
        self._f.close()

    def __enter__(self) -> BufferedLineReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
