"""
Audit Models for Chat Ledger

Every handled chat message leaves a trail of audit events:
1. Traceability of what each message wrote and where
2. Debugging information when the spreadsheet call fails
3. Ability to reconstruct the ledger's history from the chat

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "sender",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
]


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Inbound
    MESSAGE_RECEIVED = "message_received"
    MESSAGE_IGNORED = "message_ignored"

    # Ledger writes
    SALE_INSERTED = "sale_inserted"
    SALE_ADVANCE_UPDATED = "sale_advance_updated"
    EXPENSE_APPENDED = "expense_appended"
    OUTFLOW_WRITTEN = "outflow_written"

    # Failures
    BACKEND_ERROR = "backend_error"
    REPLY_FAILED = "reply_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Who sent the message
    sender: Optional[str] = Field(
        default=None,
        description="Chat identity of the sender"
    )

    # Correlation - one id per inbound message
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one message"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "sender": self.sender,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in the order of AUDIT_COLUMNS.
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.sender or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.message_received(sender, text, correlation_id)
        event = AuditEventBuilder.expense_appended(sheet, concept, amount, correlation_id)
    """

    @staticmethod
    def message_received(
        sender: Optional[str],
        text: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MESSAGE_RECEIVED,
            sender=sender,
            correlation_id=correlation_id,
            description="Chat message received",
            details={"text": text},
        )

    @staticmethod
    def message_ignored(
        sender: Optional[str],
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MESSAGE_IGNORED,
            severity=AuditSeverity.DEBUG,
            sender=sender,
            correlation_id=correlation_id,
            description=f"Message ignored: {reason}",
            details={"reason": reason},
        )

    @staticmethod
    def sale_inserted(
        sheet_name: str,
        client: str,
        description: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SALE_INSERTED,
            correlation_id=correlation_id,
            description=f"Sale appended to {sheet_name}: {client}",
            details={
                "sheet": sheet_name,
                "client": client,
                "sale_description": description,
            },
        )

    @staticmethod
    def sale_advance_updated(
        sheet_name: str,
        row_number: int,
        client: str,
        advance: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SALE_ADVANCE_UPDATED,
            correlation_id=correlation_id,
            description=f"Advance updated in {sheet_name} row {row_number}: {client}",
            details={
                "sheet": sheet_name,
                "row": row_number,
                "client": client,
                "advance": advance,
            },
        )

    @staticmethod
    def expense_appended(
        sheet_name: str,
        concept: str,
        amount: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_APPENDED,
            correlation_id=correlation_id,
            description=f"Expense appended to {sheet_name}: {concept} ${amount}",
            details={
                "sheet": sheet_name,
                "concept": concept,
                "amount": amount,
            },
        )

    @staticmethod
    def outflow_written(
        sheet_name: str,
        row_number: int,
        billed: bool,
        concept: str,
        amount: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OUTFLOW_WRITTEN,
            correlation_id=correlation_id,
            description=f"Outflow written to {sheet_name} row {row_number}",
            details={
                "sheet": sheet_name,
                "row": row_number,
                "billed": billed,
                "concept": concept,
                "amount": amount,
            },
        )

    @staticmethod
    def backend_error(
        error_type: str,
        error_message: str,
        sender: Optional[str] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKEND_ERROR,
            severity=AuditSeverity.ERROR,
            sender=sender,
            description=f"Ledger update failed: {error_type}",
            error_message=error_message,
            details={"error_type": error_type},
            correlation_id=correlation_id,
        )

    @staticmethod
    def reply_failed(
        sender: Optional[str],
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPLY_FAILED,
            severity=AuditSeverity.WARNING,
            sender=sender,
            description="Reply could not be delivered",
            error_message=error_message,
            correlation_id=correlation_id,
        )
