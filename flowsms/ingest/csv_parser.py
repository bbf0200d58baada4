"""
Spreadsheet CSV ingestion primitives.

Google Sheets exports are parsed with a deliberately small quote-toggle
scanner rather than the ``csv`` module: sheet cells are single-line, and a
``"`` anywhere in a line flips the inside-quotes state (the quote itself is
dropped).  Every downstream feed parser maps cells by **fixed column
index**, so these helpers never look at header names.

    rows = parse_csv(text)
    for row in data_rows(rows):
        plot_no = cell(row, 0)
        area = parse_number(cell(row, 2))
"""

from __future__ import annotations

import math
import re
from typing import Iterable, Iterator

# Leading float prefix, as accepted by a lenient "parse what you can" read:
# "12.5 m" -> 12.5, "1e3x" -> 1000.0, ".5" -> 0.5
_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^[+-]?\d")

# Characters stripped before numeric parsing: thousands separators,
# percent signs and stray quote marks left by the sheet export.
_NUMERIC_NOISE = str.maketrans("", "", ',%"')

# Cells meaning "not applicable" rather than zero
_BLANK_MARKERS = frozenset({"", "-"})


# ── Row splitting ────────────────────────────────────────────────────────


def split_csv_row(line: str) -> list[str]:
    """Split one CSV line into trimmed fields.

    A ``"`` toggles the inside-quotes flag and is not emitted; a ``,``
    separates fields only while outside quotes.
    """
    values: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    values.append("".join(current).strip())
    return values


def parse_csv(text: str) -> list[list[str]]:
    """Split CSV text into rows of trimmed fields (header row included)."""
    if not text:
        return []
    return [split_csv_row(line) for line in text.split("\n")]


def data_rows(rows: Iterable[list[str]]) -> Iterator[list[str]]:
    """Yield every row after the header."""
    iterator = iter(rows)
    next(iterator, None)
    yield from iterator


def cell(row: list[str], index: int) -> str:
    """Positional cell read; missing trailing cells read as ``""``."""
    if index < len(row):
        return row[index] or ""
    return ""


# ── Numeric parsing ──────────────────────────────────────────────────────


def _clean_numeric(value) -> str:
    if value is None:
        return ""
    return str(value).translate(_NUMERIC_NOISE).strip()


def parse_nullable_number(value) -> float | None:
    """Parse a sheet number, or ``None`` when the cell is blank, ``-`` or not numeric.

    ``"1,234"`` → 1234.0, ``"56%"`` → 56.0, ``"12 units"`` → 12.0
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    cleaned = _clean_numeric(value)
    if cleaned in _BLANK_MARKERS:
        return None
    match = _FLOAT_PREFIX.match(cleaned)
    if not match:
        return None
    return float(match.group(0))


def parse_number(value) -> float:
    """Parse a sheet number, defaulting to ``0`` for blank/``-``/unparseable cells."""
    parsed = parse_nullable_number(value)
    return parsed if parsed is not None else 0.0


def has_serial_number(value) -> bool:
    """True when the cell starts with an integer (``"12"``, ``"7a"``, ``" 3"``)."""
    if not value:
        return False
    return bool(_INT_PREFIX.match(str(value).strip()))


# ── Positional layouts ───────────────────────────────────────────────────

TEXT = "text"
NUMBER = "number"
NULLABLE = "nullable"

_READERS = {
    TEXT: cell,
    NUMBER: lambda row, index: parse_number(cell(row, index)),
    NULLABLE: lambda row, index: parse_nullable_number(cell(row, index)),
}


def read_cell(row: list[str], index: int, kind: str = TEXT):
    """Read one cell as ``text``, ``number`` (0 default) or ``nullable`` number."""
    try:
        reader = _READERS[kind]
    except KeyError:
        raise ValueError(f"Unknown column kind: {kind!r}") from None
    return reader(row, index)


def map_row(row: list[str], layout) -> dict:
    """Map a row through a layout of ``(index, field, kind)`` entries."""
    return {field: read_cell(row, index, kind) for index, field, kind in layout}


def round_half_up(value: float) -> int:
    """Round halves upward (2.5 -> 3, -2.5 -> -2), unlike banker's ``round``."""
    return math.floor(value + 0.5)
