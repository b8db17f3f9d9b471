"""envline: dotenv parsing and environment loading.

The parser works on bytes already in memory. File access, worker pools and
environment mutation live in `envline.files` and `envline.dotenv`.
"""

from .config import LoadConfig
from .dotenv import DotEnv, apply_lines, load, load_from_config, load_with_suffix, read, read_async
from .files import FileUnreadable
from .parser import LineParser, parse, parse_buffer, parse_bytes, parse_string
from .sources import ArrowBufferSource, ByteArraySource, StringSource
from .types import Entry, Line

__all__ = [
    "Line",
    "Entry",
    "LineParser",
    "ByteArraySource",
    "StringSource",
    "ArrowBufferSource",
    "parse",
    "parse_bytes",
    "parse_string",
    "parse_buffer",
    "DotEnv",
    "LoadConfig",
    "FileUnreadable",
    "apply_lines",
    "read",
    "read_async",
    "load",
    "load_with_suffix",
    "load_from_config",
]
