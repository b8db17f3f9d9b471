from __future__ import annotations

from typing import Protocol

import pyarrow as pa

from .sources import ArrowBufferSource, ByteArraySource, StringSource
from .types import EQUAL, NEWLINE, OCTOTHORPE, SPACE, Line


class ByteSource(Protocol):
    """Cursor interface the parser needs from an input representation.

    The cursor only moves forward and never past the end of the input.
    """

    @property
    def readable_bytes(self) -> int: ...

    def peek(self) -> int | None: ...

    def advance(self, count: int = 1) -> None: ...

    def distance_to(self, byte: int) -> int | None: ...

    def read_text(self, length: int) -> str | None: ...


class LineParser:
    """Turns a `ByteSource` into `Line` records.

    Parsing never raises on content. Anything that can't be parsed (a key
    without `=`, an empty key, a comment without a trailing newline, bytes
    that don't decode) ends the parse, and the lines read so far are returned.
    """

    def __init__(self, source: ByteSource) -> None:
        self.source = source

    def parse(self) -> list[Line]:
        lines: list[Line] = []
        while (line := self.parse_next()) is not None:
            lines.append(line)
        return lines

    def parse_next(self) -> Line | None:
        while True:
            self._skip_spaces()
            peek = self.source.peek()
            if peek is None:
                return None

            if peek == OCTOTHORPE:
                comment_length = self.source.distance_to(NEWLINE)
                if comment_length is None:
                    return None
                self.source.advance(comment_length + 1)
            elif peek == NEWLINE:
                self.source.advance()
            else:
                return self._parse_line()

    def _skip_spaces(self) -> None:
        while self.source.peek() == SPACE:
            self.source.advance()

    def _parse_line(self) -> Line | None:
        key_length = self.source.distance_to(EQUAL)
        if not key_length:
            return None
        key = self.source.read_text(key_length)
        if key is None:
            return None
        self.source.advance()  # =

        value = self._parse_value()
        if value is None:
            return None
        return Line(key=key, value=value)

    def _parse_value(self) -> str | None:
        value_length = self.source.distance_to(NEWLINE)
        if value_length is None:
            value_length = self.source.readable_bytes
        value = self.source.read_text(value_length)
        if value is None or len(value) < 2:
            return value

        first, last = value[0], value[-1]
        if first == last == '"':
            # Double quotes expand `\n`, nothing else.
            return value[1:-1].replace("\\n", "\n")
        if first == last == "'":
            return value[1:-1]
        return value


def parse_bytes(data: bytes | bytearray | memoryview, *, encoding: str = "utf-8") -> list[Line]:
    return LineParser(ByteArraySource(data, encoding=encoding)).parse()


def parse_string(text: str, *, encoding: str = "utf-8") -> list[Line]:
    return LineParser(StringSource(text, encoding=encoding)).parse()


def parse_buffer(buffer: pa.Buffer, *, encoding: str = "utf-8") -> list[Line]:
    return LineParser(ArrowBufferSource(buffer, encoding=encoding)).parse()


def parse(data: str | bytes | bytearray | memoryview | pa.Buffer, *, encoding: str = "utf-8") -> list[Line]:
    """Parse dotenv content held in memory.

    Dispatches on the input type: `str`, any bytes-like object, or a
    `pyarrow.Buffer`. All three paths produce the same lines for the same
    content.
    """

    if isinstance(data, str):
        return parse_string(data, encoding=encoding)
    if isinstance(data, pa.Buffer):
        return parse_buffer(data, encoding=encoding)
    if isinstance(data, (bytes, bytearray, memoryview)):
        return parse_bytes(data, encoding=encoding)
    raise TypeError(f"unsupported dotenv source type: {type(data)}")
