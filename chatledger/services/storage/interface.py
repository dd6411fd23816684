"""
Abstract Ledger Store Interface

DESIGN DECISION: The ledger engine talks to a small abstract store.
This allows us to:
1. Use Google Sheets in production
2. Use in-memory storage for testing and demo mode
3. Keep the command logic decoupled from gspread

The interface mirrors the four spreadsheet calls the engine needs and
nothing more. Ranges are A1 expressions relative to the named sheet
(``A16:B1000``), never prefixed with the sheet name.
"""

from abc import ABC, abstractmethod
from typing import Any


Cell = Any
Grid = list[list[Cell]]


class LedgerStoreInterface(ABC):
    """
    Abstract interface for the tabular ledger backend.

    Every call either succeeds as a whole or raises StorageError.
    """

    @abstractmethod
    async def list_sheet_names(self) -> list[str]:
        """
        List sheet titles in the backend's order.

        Raises:
            StorageError: If the listing fails
        """
        pass

    @abstractmethod
    async def read_range(self, sheet_name: str, range_expr: str) -> Grid:
        """
        Read a rectangular range.

        Args:
            sheet_name: Sheet title
            range_expr: A1 range inside the sheet, e.g. ``A1:L10000``

        Returns:
            Rows of cell values. Trailing empty rows and trailing empty
            cells of each row are omitted, as the Sheets values API does.

        Raises:
            SheetNotFoundError: If the sheet does not exist
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def append_row(self, sheet_name: str, row: list[Cell]) -> None:
        """
        Append a row after the last non-empty row of the sheet.

        Raises:
            SheetNotFoundError: If the sheet does not exist
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def update_range(self, sheet_name: str, range_expr: str, values: Grid) -> None:
        """
        Overwrite the cells of a range with values.

        Raises:
            SheetNotFoundError: If the sheet does not exist
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SheetNotFoundError(StorageError):
    """Named sheet does not exist in the spreadsheet."""
    pass


class BackendUnavailableError(StorageError):
    """Could not reach or authorize against the storage backend."""
    pass


class BackendTimeoutError(BackendUnavailableError):
    """A storage call did not finish in time."""
    pass
