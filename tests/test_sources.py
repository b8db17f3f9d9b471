from __future__ import annotations

import pyarrow as pa
import pytest

import envline.sources
from envline import ArrowBufferSource, ByteArraySource, Line, LineParser, StringSource, parse_buffer, parse_string
from envline.sources import is_ascii_compatible


def test_byte_array_source_cursor_ops():
    src = ByteArraySource(b"AB=cd\n")
    assert src.peek() == ord("A")
    assert src.distance_to(ord("=")) == 2
    assert src.distance_to(ord("\n")) == 5
    assert src.distance_to(ord("#")) is None
    # Scanning does not move the cursor.
    assert src.reader_index == 0

    assert src.read_text(2) == "AB"
    assert src.reader_index == 2
    assert src.distance_to(ord("=")) == 0

    src.advance()
    assert src.readable_bytes == 3


def test_advance_never_passes_the_end():
    src = ByteArraySource(b"abc")
    src.advance(10)
    assert src.reader_index == 3
    assert src.peek() is None
    assert src.readable_bytes == 0


def test_read_text_out_of_range_does_not_consume():
    src = ByteArraySource(b"abc")
    assert src.read_text(4) is None
    assert src.reader_index == 0


def test_read_text_decode_failure_does_not_consume():
    src = ByteArraySource(b"\xffabc")
    assert src.read_text(2) is None
    assert src.reader_index == 0


def test_unknown_encoding_is_rejected():
    with pytest.raises(LookupError):
        ByteArraySource(b"", encoding="no-such-codec")
    with pytest.raises(LookupError):
        ArrowBufferSource(b"", encoding="no-such-codec")


def test_string_source_encodes_text():
    src = StringSource("É=1")
    assert src.data == "É=1".encode("utf-8")
    assert src.distance_to(ord("=")) == 2


def test_arrow_source_window_shrinks():
    src = ArrowBufferSource(pa.py_buffer(b"KEY=value\n"))
    assert src.readable_bytes == 10
    assert src.distance_to(ord("\n")) == 9

    assert src.read_text(3) == "KEY"
    assert src.readable_bytes == 7
    assert src.distance_to(ord("\n")) == 6

    src.advance(100)
    assert src.readable_bytes == 0
    assert src.peek() is None
    assert src.distance_to(ord("\n")) is None


def test_arrow_source_accepts_plain_bytes():
    src = ArrowBufferSource(b"A=1\n")
    assert isinstance(src.buffer, pa.Buffer)
    assert LineParser(src).parse() == [Line("A", "1")]


def test_arrow_source_scans_across_chunks(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(envline.sources, "_SCAN_CHUNK", 4)
    src = ArrowBufferSource(b"0123456789\n")
    assert src.distance_to(ord("\n")) == 10
    assert src.distance_to(ord("3")) == 3
    assert src.distance_to(ord("4")) == 4
    src.advance(5)
    assert src.distance_to(ord("\n")) == 5


def test_arrow_source_long_line():
    value = "x" * 200_000
    assert parse_buffer(pa.py_buffer(f"BIG={value}\nNEXT=1\n".encode())) == [
        Line("BIG", value),
        Line("NEXT", "1"),
    ]


def test_arrow_source_empty_buffer():
    assert parse_buffer(pa.py_buffer(b"")) == []


def test_arrow_source_from_stream():
    reader = pa.BufferReader(pa.py_buffer(b"SKIP\nA=1\n"))
    reader.read(5)
    src = ArrowBufferSource.from_stream(reader)
    assert LineParser(src).parse() == [Line("A", "1")]


def test_all_sources_agree(env_test_bytes: bytes, expected_lines: list[Line]):
    out = pa.BufferOutputStream()
    out.write(env_test_bytes)

    parsed = [
        LineParser(ByteArraySource(env_test_bytes)).parse(),
        LineParser(StringSource(env_test_bytes.decode("utf-8"))).parse(),
        LineParser(ArrowBufferSource(out.getvalue())).parse(),
    ]
    for lines in parsed:
        assert lines == expected_lines


@pytest.mark.parametrize(
    "text",
    [
        "FOO=bar\nBAR=baz",
        "# only comment",
        "A=1\n=2\nB=3\n",
        "A=\"x\\ny\"\nB='x\\ny'\n",
        "   \n\n  K = v \n# c\n",
    ],
)
def test_all_sources_agree_on_edge_cases(text: str):
    data = text.encode("utf-8")
    expected = LineParser(ByteArraySource(data)).parse()
    assert LineParser(StringSource(text)).parse() == expected
    assert LineParser(ArrowBufferSource(pa.py_buffer(data))).parse() == expected


def test_sources_agree_on_decode_failure():
    data = b"A=1\nB=\xff\nC=3\n"
    assert LineParser(ByteArraySource(data)).parse() == [Line("A", "1")]
    assert LineParser(ArrowBufferSource(data)).parse() == [Line("A", "1")]


@pytest.mark.parametrize("encoding", ["utf-16", "utf-16-le", "utf-32", "cp500"])
def test_sources_reject_wide_or_non_ascii_encodings(encoding: str):
    data = "A=1\n".encode(encoding)
    with pytest.raises(ValueError, match="ASCII-compatible"):
        ByteArraySource(data, encoding=encoding)
    with pytest.raises(ValueError, match="ASCII-compatible"):
        ArrowBufferSource(data, encoding=encoding)
    with pytest.raises(ValueError, match="ASCII-compatible"):
        parse_string("A=1\n", encoding=encoding)


def test_is_ascii_compatible():
    assert is_ascii_compatible("utf-8")
    assert is_ascii_compatible("latin-1")
    assert is_ascii_compatible("cp1252")
    assert not is_ascii_compatible("utf-16")
    assert not is_ascii_compatible("utf-32-be")
