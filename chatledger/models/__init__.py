"""
Data Models Package

Pydantic models for messages, ledger operations and the audit trail.
"""

from chatledger.models.command import (
    ChatCommand,
    CommandOutcome,
    ExpenseFields,
    FlowFields,
    Operation,
    OperationFields,
    OperationKind,
    SaleFields,
    SheetCoordinate,
    WriteAction,
)
from chatledger.models.audit import (
    AUDIT_COLUMNS,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Command models
    "ChatCommand",
    "CommandOutcome",
    "ExpenseFields",
    "FlowFields",
    "Operation",
    "OperationFields",
    "OperationKind",
    "SaleFields",
    "SheetCoordinate",
    "WriteAction",
    # Audit models
    "AUDIT_COLUMNS",
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
