"""
Generic helpers for locating labelled rows in a sheet grid and reading values
at fixed offsets from them.

A grid is a list of rows, each row a list of cell strings. Blank cells are
empty strings and rows may have different lengths.
"""
import re
from typing import Dict, Iterable, List, Optional, Sequence

from tournament.models import SCORE_SENTINEL

STANDINGS_LABELS = ('GP', 'PTS')

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')
_NUMBER = re.compile(r'^[+-]?\d+(\.\d+)?$')


def cell_text(row: Optional[Sequence], col: int) -> str:
    """Return the trimmed text of a cell, or '' for a missing cell."""
    if row is None or col < 0 or col >= len(row):
        return ''
    value = row[col]
    if value is None:
        return ''
    return str(value).strip()


def get_row(grid: List[List[str]], index: int) -> Optional[List[str]]:
    """Return the row at index, or None when the grid does not reach it."""
    if index < 0 or index >= len(grid):
        return None
    return grid[index]


def parse_int(value) -> int:
    """Parse the leading integer of a cell value. Anything unparseable is 0."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def parse_score(value):
    """Parse a score cell into an int, or the sentinel when blank or not numeric."""
    if value is None:
        return SCORE_SENTINEL
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    if not text or not _NUMBER.match(text):
        return SCORE_SENTINEL
    return int(float(text))


def row_has_labels(row: Optional[Sequence], labels: Iterable[str]) -> bool:
    """True if every label appears as an exact (trimmed) cell in the row."""
    if not row:
        return False
    cells = {cell_text(row, i) for i in range(len(row))}
    return all(label in cells for label in labels)


def find_header_row(grid: List[List[str]], labels: Iterable[str], first: int, last: int) -> Optional[int]:
    """Find the first row in the closed window [first, last] holding all labels."""
    labels = tuple(labels)
    for index in range(first, last + 1):
        row = get_row(grid, index)
        if row is None:
            continue
        if row_has_labels(row, labels):
            return index
    return None


def find_column(row: Sequence, label: str) -> Optional[int]:
    """Index of the first cell whose trimmed text equals label."""
    for index in range(len(row)):
        if cell_text(row, index) == label:
            return index
    return None


def has_standings_header(row: Optional[Sequence], width: int = 4) -> bool:
    """True if one of the first `width` cells is a standings header token."""
    return any(cell_text(row, i) in STANDINGS_LABELS for i in range(width))


def is_blank(row: Optional[Sequence], width: int = 4) -> bool:
    """True if the first `width` cells of the row are all empty."""
    return not any(cell_text(row, i) for i in range(width))


def read_fields(row: Sequence, anchor: int, offsets: Dict[str, int]) -> Dict[str, int]:
    """Read integer fields at fixed offsets from an anchor column."""
    return {name: parse_int(cell_text(row, anchor + offset)) for name, offset in offsets.items()}
