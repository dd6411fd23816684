"""
Audit Logger

DESIGN DECISION: Every chat message that reaches the bot is logged.
This provides:
1. A trail from each chat message to the cell it changed
2. Debugging capability when the spreadsheet call fails
3. Optional persistence into an audit sheet next to the ledger

The audit logger:
- Is async to not block main flow
- Gracefully handles failures (doesn't crash the bot if logging fails)
- Supports correlation IDs to trace the events of one message
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from chatledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from chatledger.services.storage.interface import LedgerStoreInterface


def configure_logging(level: str = "INFO") -> None:
    """
    Configure stdlib logging and structlog (JSON lines on stderr).

    Safe to call more than once.
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (always)
    2. An audit sheet (when a store and sheet name are given)
    """

    def __init__(
        self,
        storage: Optional[LedgerStoreInterface] = None,
        sheet_name: str = "",
    ):
        """
        Initialize audit logger.

        Args:
            storage: Store used to persist events.
            sheet_name: Audit sheet title. Events are only logged locally
                        when either argument is missing.
        """
        self._storage = storage if sheet_name else None
        self._sheet_name = sheet_name
        self._logger = structlog.get_logger("chatledger.audit")

    async def log(self, event: AuditEvent, persist: bool = True) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to the audit sheet if configured,
        unless persist is False.

        Returns True if the sheet write succeeded (or no sheet configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage and persist:
            try:
                await self._storage.append_row(self._sheet_name, event.to_sheets_row())
                return True
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_message_received(
        self,
        sender: Optional[str],
        text: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.message_received(
            sender=sender,
            text=text,
            correlation_id=correlation_id,
        ))

    async def log_message_ignored(
        self,
        sender: Optional[str],
        reason: str,
        correlation_id: UUID,
    ) -> None:
        # Unrelated chat traffic never reaches the spreadsheet
        await self.log(AuditEventBuilder.message_ignored(
            sender=sender,
            reason=reason,
            correlation_id=correlation_id,
        ), persist=False)

    async def log_sale_inserted(
        self,
        sheet_name: str,
        client: str,
        description: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.sale_inserted(
            sheet_name=sheet_name,
            client=client,
            description=description,
            correlation_id=correlation_id,
        ))

    async def log_sale_advance_updated(
        self,
        sheet_name: str,
        row_number: int,
        client: str,
        advance: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.sale_advance_updated(
            sheet_name=sheet_name,
            row_number=row_number,
            client=client,
            advance=advance,
            correlation_id=correlation_id,
        ))

    async def log_expense_appended(
        self,
        sheet_name: str,
        concept: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.expense_appended(
            sheet_name=sheet_name,
            concept=concept,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_outflow_written(
        self,
        sheet_name: str,
        row_number: int,
        billed: bool,
        concept: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.outflow_written(
            sheet_name=sheet_name,
            row_number=row_number,
            billed=billed,
            concept=concept,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_backend_error(
        self,
        error_type: str,
        error_message: str,
        sender: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.backend_error(
            error_type=error_type,
            error_message=error_message,
            sender=sender,
            correlation_id=correlation_id,
        ))

    async def log_reply_failed(
        self,
        sender: Optional[str],
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.reply_failed(
            sender=sender,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this when a message arrives and pass it through every step.
    """
    return uuid4()
