"""
Sheet Column Layouts

One explicit column map per sheet type, 1-based like the spreadsheet.
Row builders turn operation fields into cell values in layout order.
"""

from datetime import date
from decimal import Decimal
from enum import IntEnum
from typing import Optional, Union

from chatledger.models.command import ExpenseFields, FlowFields, SaleFields


class SalesColumn(IntEnum):
    """Monthly sales sheet (``OCTUBRE 2026``), header in row 1."""
    FOLIO = 1
    DATE = 2
    CLIENT = 3
    COLONY = 4
    PHONE = 5
    DESCRIPTION = 6
    ESTIMATED_DATE = 7
    PAYMENT = 8
    SALE = 9
    PROFIT = 10
    ADVANCE = 11
    REMAINDER = 12


class ExpenseColumn(IntEnum):
    """Personal expenses sheet (``GASTOS OCT 26``)."""
    DATE = 1
    CONCEPT = 2
    AMOUNT = 3


class FlowColumn(IntEnum):
    """Outflow bands of the income/outflow sheet (``ING-EGR OCT 26``)."""
    CONCEPT = 1
    AMOUNT = 2


SALES_HEADER_ROWS = 1


def to_cell(value: Optional[Union[Decimal, str]]) -> Union[int, float, str]:
    """
    Cell value for an optional field.

    Missing values become an empty cell; integral amounts are written
    as ints so the sheet shows 2800 rather than 2800.0.
    """
    if value is None:
        return ""
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    return value


def build_sale_row(fields: SaleFields, on: date, date_format: str) -> list:
    """Full sales row; columns the chat never fills stay empty."""
    row: list = [""] * len(SalesColumn)
    row[SalesColumn.DATE - 1] = on.strftime(date_format)
    row[SalesColumn.CLIENT - 1] = fields.client
    row[SalesColumn.DESCRIPTION - 1] = fields.description
    row[SalesColumn.ESTIMATED_DATE - 1] = to_cell(fields.estimated_date)
    row[SalesColumn.PAYMENT - 1] = to_cell(fields.payment_amount)
    row[SalesColumn.SALE - 1] = to_cell(fields.sale_amount)
    row[SalesColumn.ADVANCE - 1] = to_cell(fields.advance_amount)
    return row


def build_expense_row(fields: ExpenseFields, on: date, date_format: str) -> list:
    return [on.strftime(date_format), fields.concept, to_cell(fields.amount)]


def build_flow_row(fields: FlowFields) -> list:
    return [fields.concept, to_cell(fields.amount)]


SALES_HEADER = [
    "Folio",
    "Fecha",
    "Cliente",
    "Colonia",
    "Teléfono",
    "Descripción",
    "Fecha estimada",
    "Pago",
    "Venta",
    "Ganancia",
    "Anticipos o pagos",
    "Resta",
]
