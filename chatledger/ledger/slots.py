"""
Outflow Slot Scanning

Billed and unbilled outflows live in pre-reserved row bands of the same
sheet. A new outflow goes into the first row of its band whose concept
and amount cells are both empty.
"""

from typing import Sequence


def _is_blank(row: Sequence, column_count: int) -> bool:
    for position in range(column_count):
        value = row[position] if position < len(row) else ""
        if str(value if value is not None else "").strip():
            return False
    return True


def first_empty_slot(grid: Sequence[Sequence], start_row: int, column_count: int = 2) -> int:
    """
    Row number of the first empty slot in a band read from start_row.

    When every scanned row is occupied the slot is the row just below the
    window. Trailing empty rows are omitted by the backend, so that is
    also the common case of a band with no gaps.
    """
    for offset, row in enumerate(grid):
        if _is_blank(row, column_count):
            return start_row + offset
    return start_row + len(grid)
