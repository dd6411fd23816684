"""
Sale Row Matching

Decides between updating an earlier sale row and appending a new one.
Client + description is the natural key of a sale: repeated messages for
the same sale overwrite its advance cell instead of adding rows.
"""

from typing import Optional, Sequence

from chatledger.ledger.layouts import SALES_HEADER_ROWS, SalesColumn


def _cell_text(row: Sequence, column: SalesColumn) -> str:
    try:
        value = row[column - 1]
    except IndexError:
        return ""
    return str(value if value is not None else "").strip().lower()


def find_matching_sale(
    data_rows: Sequence[Sequence],
    client: str,
    description: str,
) -> Optional[int]:
    """
    Index (0-based, into data_rows) of the first row with the same client
    and description, compared trimmed and case-insensitively.

    An empty description never matches.
    """
    description = description.strip().lower()
    if not description:
        return None
    client = client.strip().lower()

    for index, row in enumerate(data_rows):
        if (
            _cell_text(row, SalesColumn.CLIENT) == client
            and _cell_text(row, SalesColumn.DESCRIPTION) == description
        ):
            return index
    return None


def split_header(grid: Sequence[Sequence]) -> tuple[list, list]:
    """Split a sales grid read from row 1 into (header_row, data_rows)."""
    header = list(grid[0]) if grid else []
    return header, [list(row) for row in grid[SALES_HEADER_ROWS:]]


def data_index_to_row_number(index: int) -> int:
    """Sheet row number of a data row index (row 1 is the header)."""
    return index + SALES_HEADER_ROWS + 1
