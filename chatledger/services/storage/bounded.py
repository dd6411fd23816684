"""
Time-Bounded Store Wrapper

Wraps any LedgerStoreInterface so that no single call can hang a message
forever. A call that runs past the limit raises BackendTimeoutError.
"""

import asyncio

from chatledger.services.storage.interface import (
    BackendTimeoutError,
    Cell,
    Grid,
    LedgerStoreInterface,
)


class BoundedLedgerStore(LedgerStoreInterface):
    """Applies asyncio.wait_for(timeout_seconds) to every call of an inner store."""

    def __init__(self, inner: LedgerStoreInterface, timeout_seconds: float):
        self._inner = inner
        self._timeout = timeout_seconds

    @property
    def inner(self) -> LedgerStoreInterface:
        return self._inner

    async def _bounded(self, description: str, awaitable):
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError:
            raise BackendTimeoutError(
                f"{description} did not finish within {self._timeout:g}s"
            )

    async def list_sheet_names(self) -> list[str]:
        return await self._bounded("list sheets", self._inner.list_sheet_names())

    async def read_range(self, sheet_name: str, range_expr: str) -> Grid:
        return await self._bounded(
            f"read {sheet_name}!{range_expr}",
            self._inner.read_range(sheet_name, range_expr),
        )

    async def append_row(self, sheet_name: str, row: list[Cell]) -> None:
        await self._bounded(
            f"append to {sheet_name}",
            self._inner.append_row(sheet_name, row),
        )

    async def update_range(self, sheet_name: str, range_expr: str, values: Grid) -> None:
        await self._bounded(
            f"update {sheet_name}!{range_expr}",
            self._inner.update_range(sheet_name, range_expr, values),
        )
