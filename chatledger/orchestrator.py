"""
Main Orchestrator for Chat Ledger

This module ties together all the components and defines the
end-to-end flow for one chat message:

    text -> tokens -> operation kind -> fields -> sheet
         -> (sale: match-or-append | expense: append | outflow: first empty slot)
         -> write -> reply

DESIGN DECISION: The orchestrator enforces the boundaries:
- Empty and unrecognised messages never reach the ledger and get no reply
- Each recognised message is read-decide-written under a per-sheet lock,
  so two messages for the same sheet cannot both claim the same row
- Any failure while writing becomes one generic reply; nothing is retried
"""

import asyncio
from datetime import date
from typing import Callable, Optional
from uuid import UUID

import structlog

from chatledger.audit import AuditLogger, create_correlation_id
from chatledger.config import LedgerSettings, get_settings
from chatledger.interpreter import EmptyMessageError, FieldExtractor, classify, tokenize
from chatledger.ledger import (
    FlowColumn,
    LedgerLocator,
    SALES_HEADER,
    SalesColumn,
    block_range,
    build_expense_row,
    build_flow_row,
    build_sale_row,
    column_letter,
    data_index_to_row_number,
    find_matching_sale,
    first_empty_slot,
    split_header,
    to_cell,
)
from chatledger.models.command import (
    CommandOutcome,
    ExpenseFields,
    FlowFields,
    Operation,
    OperationKind,
    SaleFields,
    SheetCoordinate,
    WriteAction,
)
from chatledger.services.storage import (
    BoundedLedgerStore,
    GoogleSheetsClient,
    GoogleSheetsLedgerStore,
    InMemoryLedgerStore,
    LedgerStoreInterface,
)


FAILURE_REPLY = "❌ Error interno al procesar."

logger = structlog.get_logger(__name__)


def format_amount(amount) -> str:
    """Amount as echoed in replies: 850, 2800.5, or empty."""
    return str(to_cell(amount))


class SheetLocks:
    """
    One asyncio.Lock per sheet name.

    Held across read-decide-write so concurrent messages targeting the
    same sheet are applied one after the other.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}

    def for_sheet(self, sheet_name: str) -> asyncio.Lock:
        key = sheet_name.upper()
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]


class LedgerCommandFlow:
    """
    Orchestrates the chat message -> ledger write flow.

    Flow:
    1. Tokenize → empty messages are dropped
    2. Classify → unrecognised messages are dropped silently
    3. Extract fields (best effort, never fails on bad numbers)
    4. Locate the sheet
    5. Sales: update the advance of a matching row or append a new row
       Expenses: append a row
       Outflows: fill the first empty row of the billed/unbilled band
    6. Reply with a confirmation, or a generic error
    """

    def __init__(
        self,
        store: LedgerStoreInterface,
        ledger_settings: LedgerSettings,
        audit_logger: Optional[AuditLogger] = None,
        today: Callable[[], date] = date.today,
    ):
        self._store = store
        self._settings = ledger_settings
        self._audit_logger = audit_logger or AuditLogger()
        self._today = today
        self._extractor = FieldExtractor(ledger_settings.missing_client_name)
        self._locator = LedgerLocator(ledger_settings, store, today=today)
        self._locks = SheetLocks()

    @property
    def locator(self) -> LedgerLocator:
        return self._locator

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def interpret(self, text: str) -> Operation:
        """
        Turn message text into an Operation. Pure, no ledger access.

        Raises:
            EmptyMessageError: If the message is blank
        """
        command = tokenize(text)
        kind, remaining = classify(command)
        return self._extractor.extract(kind, remaining)

    async def handle_message(
        self,
        text: str,
        sender: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[str]:
        """
        Handle one inbound chat message.

        Returns:
            The reply to send, or None when the message must be ignored
            (blank or not a ledger command).
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            operation = self.interpret(text)
        except EmptyMessageError:
            return None

        if not operation.is_recognized:
            await self._audit_logger.log_message_ignored(
                sender=sender,
                reason="unrecognized command",
                correlation_id=correlation_id,
            )
            return None

        await self._audit_logger.log_message_received(
            sender=sender,
            text=text,
            correlation_id=correlation_id,
        )

        try:
            outcome = await self.apply(operation, correlation_id)
        except Exception as e:
            logger.exception(
                "ledger_update_failed",
                operation=operation.kind.value,
                correlation_id=str(correlation_id),
            )
            await self._audit_logger.log_backend_error(
                error_type=type(e).__name__,
                error_message=str(e),
                sender=sender,
                correlation_id=correlation_id,
            )
            return FAILURE_REPLY

        return outcome.reply

    async def apply(
        self,
        operation: Operation,
        correlation_id: Optional[UUID] = None,
    ) -> CommandOutcome:
        """
        Apply a recognised operation to the ledger.

        Raises:
            ValueError: For UNRECOGNIZED operations
            StorageError: If the store fails
        """
        correlation_id = correlation_id or create_correlation_id()
        fields = operation.fields

        if isinstance(fields, SaleFields):
            return await self._record_sale(fields, correlation_id)
        if isinstance(fields, ExpenseFields):
            return await self._record_expense(fields, correlation_id)
        if isinstance(fields, FlowFields):
            return await self._record_flow(operation.kind, fields, correlation_id)
        raise ValueError(f"Operation {operation.kind.value} cannot be applied")

    async def _record_sale(self, fields: SaleFields, correlation_id: UUID) -> CommandOutcome:
        sheet_name = await self._locator.resolve(OperationKind.RECORD_SALE)

        async with self._locks.for_sheet(sheet_name):
            grid = await self._store.read_range(
                sheet_name,
                block_range(1, self._settings.sales_last_row, 1, len(SalesColumn)),
            )
            _, data_rows = split_header(grid)
            match = find_matching_sale(data_rows, fields.client, fields.description)

            if match is not None:
                advance_column = column_letter(SalesColumn.ADVANCE)
                coordinate = SheetCoordinate(
                    sheet_name=sheet_name,
                    row_number=data_index_to_row_number(match),
                    start_column=advance_column,
                    end_column=advance_column,
                )
                await self._store.update_range(
                    sheet_name,
                    coordinate.a1_range,
                    [[to_cell(fields.advance_amount)]],
                )
            else:
                row = build_sale_row(fields, self._today(), self._settings.date_format)
                await self._store.append_row(sheet_name, row)

        if match is not None:
            await self._audit_logger.log_sale_advance_updated(
                sheet_name=sheet_name,
                row_number=coordinate.row_number,
                client=fields.client,
                advance=format_amount(fields.advance_amount),
                correlation_id=correlation_id,
            )
            return CommandOutcome(
                kind=OperationKind.RECORD_SALE,
                action=WriteAction.ROW_UPDATED,
                sheet_name=sheet_name,
                row_number=coordinate.row_number,
                reply=f"✅ Anticipo actualizado para {fields.client}.",
            )

        await self._audit_logger.log_sale_inserted(
            sheet_name=sheet_name,
            client=fields.client,
            description=fields.description,
            correlation_id=correlation_id,
        )
        return CommandOutcome(
            kind=OperationKind.RECORD_SALE,
            action=WriteAction.ROW_APPENDED,
            sheet_name=sheet_name,
            reply=f"✅ Venta registrada: {fields.client} - {fields.description}",
        )

    async def _record_expense(self, fields: ExpenseFields, correlation_id: UUID) -> CommandOutcome:
        sheet_name = await self._locator.resolve(OperationKind.RECORD_PERSONAL_EXPENSE)
        row = build_expense_row(fields, self._today(), self._settings.date_format)

        async with self._locks.for_sheet(sheet_name):
            await self._store.append_row(sheet_name, row)

        amount = format_amount(fields.amount)
        await self._audit_logger.log_expense_appended(
            sheet_name=sheet_name,
            concept=fields.concept,
            amount=amount,
            correlation_id=correlation_id,
        )
        return CommandOutcome(
            kind=OperationKind.RECORD_PERSONAL_EXPENSE,
            action=WriteAction.ROW_APPENDED,
            sheet_name=sheet_name,
            reply=f"✅ Gasto personal agregado: {fields.concept} ${amount}",
        )

    async def _record_flow(
        self,
        kind: OperationKind,
        fields: FlowFields,
        correlation_id: UUID,
    ) -> CommandOutcome:
        sheet_name = await self._locator.resolve(kind)
        start_row = (
            self._settings.billed_start_row
            if fields.billed
            else self._settings.unbilled_start_row
        )

        async with self._locks.for_sheet(sheet_name):
            grid = await self._store.read_range(
                sheet_name,
                block_range(
                    start_row,
                    self._settings.flow_last_row,
                    FlowColumn.CONCEPT,
                    FlowColumn.AMOUNT,
                ),
            )
            coordinate = SheetCoordinate(
                sheet_name=sheet_name,
                row_number=first_empty_slot(grid, start_row, column_count=len(FlowColumn)),
                start_column=column_letter(FlowColumn.CONCEPT),
                end_column=column_letter(FlowColumn.AMOUNT),
            )
            await self._store.update_range(
                sheet_name,
                coordinate.a1_range,
                [build_flow_row(fields)],
            )

        amount = format_amount(fields.amount)
        label = "facturado" if fields.billed else "sin facturar"
        await self._audit_logger.log_outflow_written(
            sheet_name=sheet_name,
            row_number=coordinate.row_number,
            billed=fields.billed,
            concept=fields.concept,
            amount=amount,
            correlation_id=correlation_id,
        )
        return CommandOutcome(
            kind=kind,
            action=WriteAction.SLOT_FILLED,
            sheet_name=sheet_name,
            row_number=coordinate.row_number,
            reply=f"✅ Egreso ({label}) agregado: {fields.concept} ${amount}",
        )


def create_demo_store(ledger_settings: LedgerSettings, today: Callable[[], date] = date.today) -> InMemoryLedgerStore:
    """In-memory ledger with this month's sales sheet and its header row."""
    locator = LedgerLocator(ledger_settings, InMemoryLedgerStore(), today=today)
    return InMemoryLedgerStore(
        sheets={locator.month_sheet_name(): [list(SALES_HEADER)]},
        create_missing=True,
    )


def create_app_components(
    use_storage: bool = True,
) -> tuple[LedgerCommandFlow, Optional[GoogleSheetsClient], LedgerStoreInterface]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use Google Sheets. When False an
                     in-memory demo ledger is used instead.

    Returns:
        (command_flow, sheets_client, store)

    Raises:
        pydantic.ValidationError: If Google Sheets settings are missing
    """
    settings = get_settings()
    ledger_settings = settings.ledger
    app_settings = settings.app

    sheets_client = None
    audit_sheet_name = ""

    if use_storage:
        sheets_settings = settings.google_sheets
        sheets_client = GoogleSheetsClient(sheets_settings)
        inner: LedgerStoreInterface = GoogleSheetsLedgerStore(sheets_client)
        audit_sheet_name = sheets_settings.audit_sheet_name
    else:
        inner = create_demo_store(ledger_settings)

    store = BoundedLedgerStore(inner, app_settings.backend_timeout_seconds)
    audit_logger = AuditLogger(store, audit_sheet_name)

    command_flow = LedgerCommandFlow(
        store=store,
        ledger_settings=ledger_settings,
        audit_logger=audit_logger,
    )

    return command_flow, sheets_client, store
