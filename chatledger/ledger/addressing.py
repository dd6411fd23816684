"""
A1 Cell Addressing

Column numbers use bijective base-26: 1 -> A, 26 -> Z, 27 -> AA, 702 -> ZZ.
"""

import re
from typing import Optional


_CELL = re.compile(r"^([A-Za-z]+)(\d+)$")


def column_letter(index: int) -> str:
    """Convert a 1-based column index to its letter form."""
    if index < 1:
        raise ValueError(f"Column index must be positive, got {index}")
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def column_index(letters: str) -> int:
    """Convert column letters back to a 1-based index."""
    if not letters or not letters.isalpha():
        raise ValueError(f"Invalid column letters: {letters!r}")
    index = 0
    for char in letters.upper():
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index


def cell_range(row_number: int, start_column: int, end_column: Optional[int] = None) -> str:
    """
    Single-row range expression, e.g. ``cell_range(19, 1, 2) == "A19:B19"``.

    With no end column the range covers one cell (``K5:K5``).
    """
    if row_number < 1:
        raise ValueError(f"Row number must be positive, got {row_number}")
    start = column_letter(start_column)
    end = column_letter(end_column if end_column is not None else start_column)
    return f"{start}{row_number}:{end}{row_number}"


def block_range(start_row: int, end_row: int, start_column: int, end_column: int) -> str:
    """Rectangular range expression, e.g. ``A16:B1000``."""
    return (
        f"{column_letter(start_column)}{start_row}:"
        f"{column_letter(end_column)}{end_row}"
    )


def parse_range(range_expr: str) -> tuple[int, int, int, int]:
    """
    Parse ``A16:B1000`` (or a single cell ``K5``) into
    (start_row, start_column, end_row, end_column), all 1-based.
    """
    parts = range_expr.split(":")
    if len(parts) not in (1, 2):
        raise ValueError(f"Invalid range: {range_expr!r}")
    cells = []
    for part in parts:
        match = _CELL.match(part.strip())
        if match is None:
            raise ValueError(f"Invalid cell reference: {part!r}")
        cells.append((int(match.group(2)), column_index(match.group(1))))
    (start_row, start_col), (end_row, end_col) = cells[0], cells[-1]
    return (
        min(start_row, end_row),
        min(start_col, end_col),
        max(start_row, end_row),
        max(start_col, end_col),
    )
