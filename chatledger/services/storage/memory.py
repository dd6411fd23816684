"""
In-Memory Ledger Store

A dict-of-grids implementation of LedgerStoreInterface used by the test
suite and by the console's demo mode. Range reads trim trailing empty
rows and cells the way the Sheets values API does, so slot scanning
behaves the same against both stores.
"""

from copy import deepcopy
from typing import Optional

from chatledger.ledger.addressing import parse_range
from chatledger.services.storage.interface import (
    Cell,
    Grid,
    LedgerStoreInterface,
    SheetNotFoundError,
)


def _is_empty(value: Cell) -> bool:
    return value is None or value == ""


def _trim_row(row: list[Cell]) -> list[Cell]:
    end = len(row)
    while end > 0 and _is_empty(row[end - 1]):
        end -= 1
    return row[:end]


class InMemoryLedgerStore(LedgerStoreInterface):
    """
    Sheets kept as lists of rows (row 1 = index 0).

    Sheets must exist before they are written to, as in a real
    spreadsheet. ``create_missing`` relaxes that for demo use.
    """

    def __init__(
        self,
        sheets: Optional[dict[str, Grid]] = None,
        create_missing: bool = False,
    ):
        self._sheets: dict[str, Grid] = {
            name: [list(row) for row in rows] for name, rows in (sheets or {}).items()
        }
        self._create_missing = create_missing

    def _sheet(self, sheet_name: str) -> Grid:
        if sheet_name not in self._sheets:
            if not self._create_missing:
                raise SheetNotFoundError(f"Sheet not found: {sheet_name}")
            self._sheets[sheet_name] = []
        return self._sheets[sheet_name]

    def snapshot(self, sheet_name: str) -> Grid:
        """Copy of a sheet's rows, for assertions and previews."""
        return deepcopy(self._sheet(sheet_name))

    async def list_sheet_names(self) -> list[str]:
        return list(self._sheets)

    async def read_range(self, sheet_name: str, range_expr: str) -> Grid:
        rows = self._sheet(sheet_name)
        start_row, start_col, end_row, end_col = parse_range(range_expr)

        grid = []
        for row_number in range(start_row, min(end_row, len(rows)) + 1):
            row = rows[row_number - 1]
            grid.append(_trim_row(list(row[start_col - 1:end_col])))

        while grid and not grid[-1]:
            grid.pop()
        return grid

    async def append_row(self, sheet_name: str, row: list[Cell]) -> None:
        rows = self._sheet(sheet_name)
        # Append lands after the last row holding any value
        last = len(rows)
        while last > 0 and not _trim_row(rows[last - 1]):
            last -= 1
        del rows[last:]
        rows.append(list(row))

    async def update_range(self, sheet_name: str, range_expr: str, values: Grid) -> None:
        rows = self._sheet(sheet_name)
        start_row, start_col, _, _ = parse_range(range_expr)

        for row_offset, new_values in enumerate(values):
            row_number = start_row + row_offset
            while len(rows) < row_number:
                rows.append([])
            row = rows[row_number - 1]
            needed = start_col - 1 + len(new_values)
            if len(row) < needed:
                row.extend([""] * (needed - len(row)))
            for col_offset, value in enumerate(new_values):
                row[start_col - 1 + col_offset] = value
