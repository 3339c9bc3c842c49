from __future__ import annotations

from collections.abc import Iterable

_DIGITS = "0123456789"


class CellParseError(ValueError):
    """Raised when a cell list contains something other than cell tokens."""


def _scan_ref(text: str, pos: int) -> int:
    """Scan one `r<int>c<int>` at `pos`, returning the index just past it."""
    for marker in ("r", "c"):
        if pos >= len(text) or text[pos] != marker:
            raise CellParseError(f"expected {marker!r} at offset {pos} in {text!r}")
        pos += 1
        start = pos
        while pos < len(text) and text[pos] in _DIGITS:
            pos += 1
        if pos == start:
            raise CellParseError(f"expected digits at offset {start} in {text!r}")
    return pos


def parse_cells(text: str) -> list[str]:
    """
    Split a concatenated cell list into cell tokens.

    `r1c1r2c3-r4c5` -> ["r1c1", "r2c3-r4c5"]; a range stays a single token.
    Anything that is not a cell token raises CellParseError.
    """
    tokens: list[str] = []
    pos = 0
    while pos < len(text):
        start = pos
        pos = _scan_ref(text, pos)
        if pos < len(text) and text[pos] == "-":
            pos = _scan_ref(text, pos + 1)
        tokens.append(text[start:pos])
    return tokens


def format_cells(cells: Iterable[str]) -> str:
    return "".join(cells)
