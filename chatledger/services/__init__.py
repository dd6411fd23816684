"""Services package."""

from chatledger.services.storage import (
    BackendTimeoutError,
    BackendUnavailableError,
    GoogleSheetsClient,
    GoogleSheetsLedgerStore,
    InMemoryLedgerStore,
    LedgerStoreInterface,
    SheetNotFoundError,
    StorageError,
)

__all__ = [
    # Storage services
    "BackendTimeoutError",
    "BackendUnavailableError",
    "GoogleSheetsClient",
    "GoogleSheetsLedgerStore",
    "InMemoryLedgerStore",
    "LedgerStoreInterface",
    "SheetNotFoundError",
    "StorageError",
]
