from __future__ import annotations

import codecs

import numpy as np
import pyarrow as pa

# Window size for `ArrowBufferSource.distance_to`, so short lines don't scan the whole buffer.
_SCAN_CHUNK = 64 * 1024

_STRUCTURAL = "=#\n "


def is_ascii_compatible(encoding: str) -> bool:
    """Whether `encoding` writes the structural characters `=`, `#`, newline and space as single ASCII bytes."""

    codecs.lookup(encoding)
    try:
        return _STRUCTURAL.encode(encoding) == _STRUCTURAL.encode("ascii")
    except UnicodeEncodeError:
        return False


def _check_encoding(encoding: str) -> None:
    if not is_ascii_compatible(encoding):
        raise ValueError(f"encoding {encoding!r} is not ASCII-compatible; decode the text first and parse it as utf-8")


class ByteArraySource:
    """Cursor over a fully materialized byte sequence."""

    def __init__(self, data: bytes | bytearray | memoryview, *, encoding: str = "utf-8") -> None:
        _check_encoding(encoding)
        self.data = bytes(data)
        self.encoding = encoding
        self.reader_index = 0

    @property
    def readable_bytes(self) -> int:
        return len(self.data) - self.reader_index

    def peek(self) -> int | None:
        if self.reader_index >= len(self.data):
            return None
        return self.data[self.reader_index]

    def advance(self, count: int = 1) -> None:
        self.reader_index = min(self.reader_index + count, len(self.data))

    def distance_to(self, byte: int) -> int | None:
        idx = self.data.find(byte, self.reader_index)
        if idx < 0:
            return None
        return idx - self.reader_index

    def read_text(self, length: int) -> str | None:
        end = self.reader_index + length
        if length < 0 or end > len(self.data):
            return None
        try:
            text = self.data[self.reader_index : end].decode(self.encoding)
        except UnicodeDecodeError:
            return None
        self.reader_index = end
        return text


class StringSource(ByteArraySource):
    """Encodes `text` once, then behaves exactly like `ByteArraySource`."""

    def __init__(self, text: str, *, encoding: str = "utf-8") -> None:
        super().__init__(text.encode(encoding), encoding=encoding)


class ArrowBufferSource:
    """Cursor over a `pyarrow.Buffer`.

    The readable window is `buffer[reader_index:]` and shrinks as bytes are
    consumed. Scans run on a zero-copy numpy view of that window, so looking
    ahead never moves the cursor.
    """

    def __init__(self, buffer: pa.Buffer | bytes | bytearray, *, encoding: str = "utf-8") -> None:
        _check_encoding(encoding)
        if not isinstance(buffer, pa.Buffer):
            buffer = pa.py_buffer(buffer)
        self.buffer = buffer
        self.encoding = encoding
        self.reader_index = 0
        if buffer.size:
            self._view = np.frombuffer(buffer, dtype=np.uint8)
        else:
            self._view = np.empty(0, dtype=np.uint8)

    @classmethod
    def from_stream(cls, stream: pa.NativeFile, *, encoding: str = "utf-8") -> "ArrowBufferSource":
        """Drain the rest of an Arrow input stream into memory."""

        return cls(stream.read_buffer(), encoding=encoding)

    @property
    def readable_bytes(self) -> int:
        return self.buffer.size - self.reader_index

    def peek(self) -> int | None:
        if self.readable_bytes <= 0:
            return None
        return int(self._view[self.reader_index])

    def advance(self, count: int = 1) -> None:
        self.reader_index = min(self.reader_index + count, self.buffer.size)

    def distance_to(self, byte: int) -> int | None:
        window = self._view[self.reader_index :]
        for start in range(0, len(window), _SCAN_CHUNK):
            hits = np.flatnonzero(window[start : start + _SCAN_CHUNK] == byte)
            if hits.size:
                return start + int(hits[0])
        return None

    def read_text(self, length: int) -> str | None:
        if length < 0 or length > self.readable_bytes:
            return None
        raw = self.buffer.slice(self.reader_index, length).to_pybytes()
        try:
            text = raw.decode(self.encoding)
        except UnicodeDecodeError:
            return None
        self.reader_index += length
        return text
