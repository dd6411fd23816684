"""
Ledger Positioning Package

Where a value goes: which sheet, which row, which columns.
"""

from chatledger.ledger.addressing import (
    block_range,
    cell_range,
    column_index,
    column_letter,
    parse_range,
)
from chatledger.ledger.layouts import (
    ExpenseColumn,
    FlowColumn,
    SALES_HEADER,
    SalesColumn,
    build_expense_row,
    build_flow_row,
    build_sale_row,
    to_cell,
)
from chatledger.ledger.locator import LedgerLocator, select_sheet
from chatledger.ledger.matcher import (
    data_index_to_row_number,
    find_matching_sale,
    split_header,
)
from chatledger.ledger.slots import first_empty_slot

__all__ = [
    # Addressing
    "block_range",
    "cell_range",
    "column_index",
    "column_letter",
    "parse_range",
    # Layouts
    "ExpenseColumn",
    "FlowColumn",
    "SALES_HEADER",
    "SalesColumn",
    "build_expense_row",
    "build_flow_row",
    "build_sale_row",
    "to_cell",
    # Resolution
    "LedgerLocator",
    "select_sheet",
    "data_index_to_row_number",
    "find_matching_sale",
    "first_empty_slot",
    "split_header",
]
