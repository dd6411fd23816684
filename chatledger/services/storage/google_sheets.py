"""
Google Sheets Storage Implementation

DESIGN DECISION: The ledger already lives in a Google Sheets spreadsheet
that people edit by hand, so the bot writes straight into it:
1. One sheet per month of sales, one per month of expenses/outflows
2. Values go in as USER_ENTERED so Sheets parses numbers and dates
3. Columns the bot does not own are never touched

TRADEOFFS:
- No transactions (writes are serialized per sheet by the orchestrator)
- Reads are retried, writes are not: a failed write is reported to the
  user rather than risking a duplicate row

gspread is synchronous; every call runs in a worker thread so one slow
request does not stall other chats.
"""

import asyncio
import base64
import binascii
import json
import threading
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from gspread.utils import ValueInputOption
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from chatledger.config.settings import GoogleSheetsSettings
from chatledger.services.storage.interface import (
    BackendUnavailableError,
    Cell,
    Grid,
    LedgerStoreInterface,
    SheetNotFoundError,
    StorageError,
)


SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

_read_retry = retry(
    retry=retry_if_exception_type(gspread.exceptions.APIError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and opens the configured spreadsheet.
    """

    def __init__(self, settings: GoogleSheetsSettings):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings
        # Worker threads share one lazily opened client and spreadsheet
        self._setup_lock = threading.RLock()

    def _load_credentials(self) -> Credentials:
        if self._settings.credentials_base64:
            try:
                info = json.loads(
                    base64.b64decode(self._settings.credentials_base64).decode("utf-8")
                )
            except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
                raise BackendUnavailableError(
                    f"GOOGLE_SHEETS_CREDENTIALS_BASE64 is not valid base64 JSON: {e}"
                )
            return Credentials.from_service_account_info(info, scopes=SCOPES)
        return Credentials.from_service_account_file(
            self._settings.credentials_path,
            scopes=SCOPES,
        )

    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication. Not retried
        here; callers retry the whole read around it.
        """
        with self._setup_lock:
            if self._client is None:
                try:
                    self._client = gspread.authorize(self._load_credentials())
                except FileNotFoundError:
                    raise BackendUnavailableError(
                        f"Google credentials file not found: {self._settings.credentials_path}"
                    )
                except (BackendUnavailableError, gspread.exceptions.APIError):
                    raise
                except Exception as e:
                    raise BackendUnavailableError(f"Failed to connect to Google Sheets: {e}")

            return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        with self._setup_lock:
            if self._spreadsheet is None:
                client = self.connect()
                try:
                    self._spreadsheet = client.open_by_key(
                        self._settings.spreadsheet_id
                    )
                except gspread.SpreadsheetNotFound:
                    raise BackendUnavailableError(
                        f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                    )
            return self._spreadsheet

    def get_worksheet(self, title: str) -> gspread.Worksheet:
        try:
            return self.get_spreadsheet().worksheet(title)
        except gspread.WorksheetNotFound:
            raise SheetNotFoundError(f"Sheet not found: {title}")

    @_read_retry
    def _open_spreadsheet(self) -> gspread.Spreadsheet:
        return self.get_spreadsheet()

    def verify_access(self) -> str:
        """
        Authorize and open the spreadsheet once, returning its title.

        Called at startup; failure here should stop the process.
        """
        try:
            return self._open_spreadsheet().title
        except StorageError:
            raise
        except Exception as e:
            raise BackendUnavailableError(f"Google Sheets authorization failed: {e}")


class GoogleSheetsLedgerStore(LedgerStoreInterface):
    """
    Google Sheets implementation of the ledger store.

    Sheet lookups go through the shared GoogleSheetsClient, which caches
    the authorized client and the open spreadsheet.
    """

    def __init__(self, client: GoogleSheetsClient):
        self._client = client

    @_read_retry
    def _list_sheet_names(self) -> list[str]:
        return [sheet.title for sheet in self._client.get_spreadsheet().worksheets()]

    @_read_retry
    def _read_range(self, sheet_name: str, range_expr: str) -> Grid:
        values = self._client.get_worksheet(sheet_name).get(range_expr)
        return [list(row) for row in values]

    def _append_row(self, sheet_name: str, row: list[Cell]) -> None:
        self._client.get_worksheet(sheet_name).append_row(
            row,
            value_input_option=ValueInputOption.user_entered,
            table_range="A1",
        )

    def _update_range(self, sheet_name: str, range_expr: str, values: Grid) -> None:
        self._client.get_worksheet(sheet_name).update(
            values=values,
            range_name=range_expr,
            value_input_option=ValueInputOption.user_entered,
        )

    async def _call(self, description: str, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except StorageError:
            raise
        except gspread.exceptions.APIError as e:
            raise BackendUnavailableError(f"Failed to {description}: {e}")
        except Exception as e:
            raise StorageError(f"Failed to {description}: {e}")

    async def list_sheet_names(self) -> list[str]:
        return await self._call("list sheets", self._list_sheet_names)

    async def read_range(self, sheet_name: str, range_expr: str) -> Grid:
        return await self._call(
            f"read {sheet_name}!{range_expr}", self._read_range, sheet_name, range_expr
        )

    async def append_row(self, sheet_name: str, row: list[Cell]) -> None:
        await self._call(f"append to {sheet_name}", self._append_row, sheet_name, row)

    async def update_range(self, sheet_name: str, range_expr: str, values: Grid) -> None:
        await self._call(
            f"update {sheet_name}!{range_expr}",
            self._update_range,
            sheet_name,
            range_expr,
            values,
        )
