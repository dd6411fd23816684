"""
Field Extraction

Pulls typed fields out of the tokens left after classification.

Two primitives do all the work:
- keyword-anchored values: find a marker token, read the token after it
- free text: collect tokens until a marker token shows up

POLICY: best effort. A missing or garbled amount becomes None (an empty
cell in the ledger); it never aborts the message.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from chatledger.models.command import (
    ExpenseFields,
    FlowFields,
    Operation,
    OperationKind,
    SaleFields,
)


# Sale markers, each followed by its value
DATE_MARKER = "fecha"
PAYMENT_MARKER = "pago"
SALE_MARKER = "venta"
ADVANCE_MARKER = "anticipo"

SALE_STOP_KEYWORDS = frozenset({DATE_MARKER, PAYMENT_MARKER, SALE_MARKER, ADVANCE_MARKER})

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


def coerce_amount(token: Optional[str]) -> Optional[Decimal]:
    """
    Permissive numeric coercion.

    Everything except digits, '.' and '-' is dropped, then the leading
    decimal literal is read: "$2,800.50" -> 2800.50, "18nov" -> 18.
    Returns None when nothing numeric is left ("abc", "-", "").
    """
    if not token:
        return None
    cleaned = _NON_NUMERIC.sub("", token)
    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return None
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return None


def find_marker(tokens: Sequence[str], marker: str, start: int = 0) -> int:
    """Index of the first case-insensitive occurrence of marker, or -1."""
    marker = marker.lower()
    for index in range(start, len(tokens)):
        if tokens[index].lower() == marker:
            return index
    return -1


def value_after(tokens: Sequence[str], marker: str, start: int = 0) -> Optional[str]:
    """Token right after the first occurrence of marker, if any."""
    index = find_marker(tokens, marker, start)
    if index < 0 or index + 1 >= len(tokens):
        return None
    return tokens[index + 1]


def number_after(tokens: Sequence[str], marker: str, start: int = 0) -> Optional[Decimal]:
    return coerce_amount(value_after(tokens, marker, start))


def text_until(tokens: Sequence[str], start: int, stop_keywords: frozenset[str]) -> str:
    """Join tokens from start until a stop keyword (case-insensitive) or the end."""
    parts = []
    for token in tokens[start:]:
        if token.lower() in stop_keywords:
            break
        parts.append(token)
    return " ".join(parts)


class FieldExtractor:
    """
    Builds an Operation from a classified command's remaining tokens.

    The remaining tokens never include the command word(s), so markers
    are only ever matched against the message body.
    """

    def __init__(self, missing_client_name: str = "SIN NOMBRE"):
        self._missing_client_name = missing_client_name

    def extract(self, kind: OperationKind, tokens: Sequence[str]) -> Operation:
        if kind == OperationKind.RECORD_SALE:
            return Operation(kind=kind, fields=self.extract_sale(tokens))
        if kind == OperationKind.RECORD_PERSONAL_EXPENSE:
            return Operation(kind=kind, fields=self.extract_expense(tokens))
        if kind in (
            OperationKind.RECORD_BILLED_OUTFLOW,
            OperationKind.RECORD_UNBILLED_OUTFLOW,
        ):
            return Operation(
                kind=kind,
                fields=self.extract_flow(
                    tokens,
                    billed=kind == OperationKind.RECORD_BILLED_OUTFLOW,
                ),
            )
        return Operation(kind=OperationKind.UNRECOGNIZED)

    def extract_sale(self, tokens: Sequence[str]) -> SaleFields:
        """
        Sale layout: <client> <description...> [fecha X] [pago N] [venta N] [anticipo N]

        Markers are searched after the client token.
        """
        client = tokens[0] if tokens else self._missing_client_name
        return SaleFields(
            client=client,
            description=text_until(tokens, 1, SALE_STOP_KEYWORDS),
            estimated_date=value_after(tokens, DATE_MARKER, start=1),
            payment_amount=number_after(tokens, PAYMENT_MARKER, start=1),
            sale_amount=number_after(tokens, SALE_MARKER, start=1),
            advance_amount=number_after(tokens, ADVANCE_MARKER, start=1),
        )

    def extract_expense(self, tokens: Sequence[str]) -> ExpenseFields:
        """Expense layout: <amount> <concept...>"""
        amount, concept = _amount_and_concept(tokens)
        return ExpenseFields(amount=amount, concept=concept)

    def extract_flow(self, tokens: Sequence[str], billed: bool) -> FlowFields:
        """Outflow layout: <amount> <concept...> (same as expenses)"""
        amount, concept = _amount_and_concept(tokens)
        return FlowFields(amount=amount, concept=concept, billed=billed)


def _amount_and_concept(tokens: Sequence[str]) -> tuple[Optional[Decimal], str]:
    amount = coerce_amount(tokens[0]) if tokens else None
    return amount, " ".join(tokens[1:])
