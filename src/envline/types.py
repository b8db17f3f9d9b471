from __future__ import annotations

from dataclasses import dataclass

# Structural bytes of the dotenv grammar. Always ASCII, whatever the content encoding.
NEWLINE = 0x0A
SPACE = 0x20
OCTOTHORPE = 0x23
EQUAL = 0x3D


@dataclass(frozen=True, slots=True)
class Line:
    """A single `KEY=VALUE` pair from a dotenv file."""

    key: str
    value: str

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


Entry = Line
