"""
Ledger Sheet Locator

Resolves which sheet an operation writes to.

- Sales: the month sheet, named "<MONTH> <YYYY>" (e.g. "OCTUBRE 2026").
  It is assumed to exist already.
- Personal expenses / outflows: a sheet found by prefix ("GASTOS",
  "ING-EGR"), falling back to "<PREFIX> <MMM> <YY>" (e.g. "GASTOS OCT 26").

PREFIX POLICY: when several sheets share a prefix, a sheet named exactly
like the dated fallback wins; otherwise the first prefix match in the
backend's listing order is used.
"""

from datetime import date
from typing import Callable, Optional, Sequence

from chatledger.config.settings import LedgerSettings
from chatledger.models.command import OperationKind
from chatledger.services.storage.interface import LedgerStoreInterface


def _normalize(name: str) -> str:
    return " ".join(name.split()).upper()


def select_sheet(names: Sequence[str], prefix: str, dated_name: str) -> Optional[str]:
    """
    Pick a sheet among names for a prefix.

    Returns the exact dated match if listed, else the first name that
    starts with prefix (case-insensitive), else None.
    """
    wanted = _normalize(dated_name)
    for name in names:
        if _normalize(name) == wanted:
            return name

    prefix = prefix.upper()
    for name in names:
        if name.upper().startswith(prefix):
            return name
    return None


class LedgerLocator:
    """
    Maps operation kinds to sheet names.

    ``today`` is injectable so month-based names are deterministic in tests.
    """

    def __init__(
        self,
        settings: LedgerSettings,
        store: LedgerStoreInterface,
        today: Callable[[], date] = date.today,
    ):
        self._settings = settings
        self._store = store
        self._today = today
        self._months = settings.month_names_list

    def month_sheet_name(self, on: Optional[date] = None) -> str:
        on = on or self._today()
        return f"{self._months[on.month - 1]} {on.year}"

    def dated_sheet_name(self, prefix: str, on: Optional[date] = None) -> str:
        on = on or self._today()
        abbreviation = self._months[on.month - 1][:3].upper()
        return f"{prefix} {abbreviation} {on.year % 100:02d}"

    async def find_sheet_by_prefix(self, prefix: str) -> Optional[str]:
        """One listing call, then a linear scan (see PREFIX POLICY)."""
        names = await self._store.list_sheet_names()
        return select_sheet(names, prefix, self.dated_sheet_name(prefix))

    async def resolve(self, kind: OperationKind) -> str:
        """
        Sheet name for an operation kind.

        Raises:
            ValueError: For UNRECOGNIZED, which never reaches the ledger
        """
        if kind == OperationKind.RECORD_SALE:
            return self.month_sheet_name()

        if kind == OperationKind.RECORD_PERSONAL_EXPENSE:
            prefix = self._settings.expense_sheet_prefix
        elif kind in (
            OperationKind.RECORD_BILLED_OUTFLOW,
            OperationKind.RECORD_UNBILLED_OUTFLOW,
        ):
            prefix = self._settings.flow_sheet_prefix
        else:
            raise ValueError(f"No ledger sheet for operation {kind.value}")

        found = await self.find_sheet_by_prefix(prefix)
        return found or self.dated_sheet_name(prefix)
