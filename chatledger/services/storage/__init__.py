"""
Storage Services Package

Provides the abstract ledger store and its implementations.
Google Sheets is the production backend; the in-memory store backs tests
and demo mode.
"""

from chatledger.services.storage.interface import (
    BackendTimeoutError,
    BackendUnavailableError,
    Cell,
    Grid,
    LedgerStoreInterface,
    SheetNotFoundError,
    StorageError,
)
from chatledger.services.storage.bounded import BoundedLedgerStore
from chatledger.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsLedgerStore,
)
from chatledger.services.storage.memory import InMemoryLedgerStore

__all__ = [
    # Interface
    "Cell",
    "Grid",
    "LedgerStoreInterface",
    # Exceptions
    "BackendTimeoutError",
    "BackendUnavailableError",
    "SheetNotFoundError",
    "StorageError",
    # Implementations
    "BoundedLedgerStore",
    "GoogleSheetsClient",
    "GoogleSheetsLedgerStore",
    "InMemoryLedgerStore",
]
