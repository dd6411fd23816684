"""
Command Models for Chat Ledger

These models describe a single chat message on its way to the ledger:
1. ChatCommand - the tokenized message
2. Operation - what the message asks for, with its typed fields
3. SheetCoordinate - where in the ledger a value lands
4. CommandOutcome - what was written, and the reply to send back

DESIGN DECISION: All of these are operation-scoped value objects.
Nothing here outlives the handling of one message; the spreadsheet is
the only durable state.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


# =============================================================================
# ENUMS
# =============================================================================

class OperationKind(str, Enum):
    """The fixed set of ledger operations a message can request."""
    RECORD_SALE = "record_sale"
    RECORD_PERSONAL_EXPENSE = "record_personal_expense"
    RECORD_BILLED_OUTFLOW = "record_billed_outflow"
    RECORD_UNBILLED_OUTFLOW = "record_unbilled_outflow"
    UNRECOGNIZED = "unrecognized"


class WriteAction(str, Enum):
    """How the ledger was touched."""
    ROW_APPENDED = "row_appended"
    ROW_UPDATED = "row_updated"
    SLOT_FILLED = "slot_filled"


# =============================================================================
# MESSAGE
# =============================================================================

class ChatCommand(BaseModel):
    """
    A tokenized chat message.

    Tokens keep their original casing for display; use ``lowered`` for
    matching.
    """
    model_config = ConfigDict(frozen=True)

    raw_text: str
    tokens: tuple[str, ...] = Field(..., min_length=1)

    @property
    def lowered(self) -> tuple[str, ...]:
        return tuple(token.lower() for token in self.tokens)


# =============================================================================
# OPERATION FIELDS
# =============================================================================

class SaleFields(BaseModel):
    """
    Fields of a sale message.

    ``client`` + ``description`` form the natural key used to find an
    earlier row for the same sale.
    """
    model_config = ConfigDict(frozen=True)

    client: str
    description: str = ""
    estimated_date: Optional[str] = None
    payment_amount: Optional[Decimal] = None
    sale_amount: Optional[Decimal] = None
    advance_amount: Optional[Decimal] = None


class ExpenseFields(BaseModel):
    """Fields of a personal expense message."""
    model_config = ConfigDict(frozen=True)

    amount: Optional[Decimal] = None
    concept: str = ""


class FlowFields(BaseModel):
    """Fields of a billed or unbilled outflow message."""
    model_config = ConfigDict(frozen=True)

    amount: Optional[Decimal] = None
    concept: str = ""
    billed: bool


OperationFields = Union[SaleFields, ExpenseFields, FlowFields]


class Operation(BaseModel):
    """
    A classified message with its extracted fields.

    ``fields`` is None only for UNRECOGNIZED operations.
    """
    model_config = ConfigDict(frozen=True)

    kind: OperationKind
    fields: Optional[OperationFields] = None

    @property
    def is_recognized(self) -> bool:
        return self.kind != OperationKind.UNRECOGNIZED


# =============================================================================
# LEDGER POSITION AND RESULT
# =============================================================================

class SheetCoordinate(BaseModel):
    """A single-row cell range inside a named sheet."""
    model_config = ConfigDict(frozen=True)

    sheet_name: str
    row_number: PositiveInt
    start_column: str = Field(..., pattern=r"^[A-Z]+$")
    end_column: str = Field(..., pattern=r"^[A-Z]+$")

    @property
    def a1_range(self) -> str:
        """Range expression relative to the sheet, e.g. ``A19:B19``."""
        return (
            f"{self.start_column}{self.row_number}:"
            f"{self.end_column}{self.row_number}"
        )


class CommandOutcome(BaseModel):
    """Result of applying one operation to the ledger."""
    model_config = ConfigDict(frozen=True)

    kind: OperationKind
    action: WriteAction
    sheet_name: str
    row_number: Optional[int] = None
    reply: str
