"""Tests for tokenizing, classifying and field extraction."""

import pytest
from decimal import Decimal

from chatledger.interpreter import (
    EmptyMessageError,
    FieldExtractor,
    classify,
    coerce_amount,
    tokenize,
)
from chatledger.models.command import (
    ExpenseFields,
    FlowFields,
    OperationKind,
    SaleFields,
)


def interpret(text: str):
    kind, remaining = classify(tokenize(text))
    return FieldExtractor().extract(kind, remaining)


class TestTokenizer:
    """Tests for tokenize."""

    def test_splits_on_whitespace_runs(self):
        command = tokenize("  Venta   Carlos\tpersianas \n blackout ")
        assert command.tokens == ("Venta", "Carlos", "persianas", "blackout")
        assert command.raw_text == "Venta   Carlos\tpersianas \n blackout"

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    def test_empty_message(self, text):
        with pytest.raises(EmptyMessageError):
            tokenize(text)


class TestClassifier:
    """Tests for classify."""

    @pytest.mark.parametrize(
        "text, kind",
        [
            ("venta Ana cortina", OperationKind.RECORD_SALE),
            ("VENTA Ana cortina", OperationKind.RECORD_SALE),
            ("Sale Ana cortina", OperationKind.RECORD_SALE),
            ("Gastos 850 gasolina", OperationKind.RECORD_PERSONAL_EXPENSE),
            ("facturado 1200 renta", OperationKind.RECORD_BILLED_OUTFLOW),
            ("Sin Facturar 500 papeleria", OperationKind.RECORD_UNBILLED_OUTFLOW),
            ("sin", OperationKind.UNRECOGNIZED),
            ("sin nada", OperationKind.UNRECOGNIZED),
            ("hola que tal", OperationKind.UNRECOGNIZED),
            ("ventas 100", OperationKind.UNRECOGNIZED),
        ],
    )
    def test_keyword_table(self, text, kind):
        assert classify(tokenize(text))[0] == kind

    def test_single_word_command_drops_one_token(self):
        _, remaining = classify(tokenize("facturado 1200 renta local"))
        assert remaining == ("1200", "renta", "local")

    def test_two_word_command_drops_two_tokens(self):
        _, remaining = classify(tokenize("sin facturar 500 papeleria"))
        assert remaining == ("500", "papeleria")


class TestCoerceAmount:
    """Tests for permissive numeric coercion."""

    def test_strips_currency_noise(self):
        assert coerce_amount("$2,800.50") == Decimal("2800.50")

    def test_plain_integer(self):
        assert coerce_amount("850") == Decimal("850")

    def test_negative(self):
        assert coerce_amount("-120") == Decimal("-120")

    def test_leading_number_is_kept(self):
        assert coerce_amount("18nov") == Decimal("18")
        assert coerce_amount("1.2.3") == Decimal("1.2")

    def test_zero_is_a_value(self):
        assert coerce_amount("0") == Decimal("0")

    @pytest.mark.parametrize("token", ["abc", "-", ".", "", None, "$"])
    def test_non_numeric_is_absent(self, token):
        assert coerce_amount(token) is None


class TestSaleExtraction:
    """Tests for sale field extraction."""

    def test_full_sale(self):
        operation = interpret(
            "venta Carlos persianas blackout fecha 18 pago 2800 venta 5200 anticipo 2000"
        )
        assert operation.kind == OperationKind.RECORD_SALE
        assert operation.fields == SaleFields(
            client="Carlos",
            description="persianas blackout",
            estimated_date="18",
            payment_amount=Decimal("2800"),
            sale_amount=Decimal("5200"),
            advance_amount=Decimal("2000"),
        )

    def test_markers_are_case_insensitive(self):
        fields = interpret("Venta Ana cortina roller ANTICIPO $1,500").fields
        assert fields.description == "cortina roller"
        assert fields.advance_amount == Decimal("1500")

    def test_missing_client_gets_placeholder(self):
        fields = interpret("venta").fields
        assert fields.client == "SIN NOMBRE"
        assert fields.description == ""

    def test_custom_placeholder(self):
        kind, remaining = classify(tokenize("venta"))
        fields = FieldExtractor(missing_client_name="ANON").extract(kind, remaining).fields
        assert fields.client == "ANON"

    def test_marker_without_value(self):
        fields = interpret("venta Ana cortina anticipo").fields
        assert fields.description == "cortina"
        assert fields.advance_amount is None

    def test_bad_number_is_absent_not_zero(self):
        fields = interpret("venta Ana cortina pago abc venta 900").fields
        assert fields.payment_amount is None
        assert fields.sale_amount == Decimal("900")

    def test_first_marker_occurrence_wins(self):
        fields = interpret("venta Ana cortina pago 100 pago 200").fields
        assert fields.payment_amount == Decimal("100")

    def test_estimated_date_is_kept_as_text(self):
        fields = interpret("venta Ana cortina fecha 18/nov").fields
        assert fields.estimated_date == "18/nov"


class TestExpenseAndFlowExtraction:
    """Tests for expense and outflow extraction."""

    def test_expense(self):
        operation = interpret("gastos 850 gasolina semana")
        assert operation.fields == ExpenseFields(
            amount=Decimal("850"),
            concept="gasolina semana",
        )

    def test_expense_without_amount(self):
        operation = interpret("gastos")
        assert operation.fields == ExpenseFields(amount=None, concept="")

    def test_expense_with_bad_amount(self):
        operation = interpret("gastos mucho gasolina")
        assert operation.fields.amount is None
        assert operation.fields.concept == "gasolina"

    def test_billed_outflow(self):
        operation = interpret("facturado 1200 renta")
        assert operation.fields == FlowFields(
            amount=Decimal("1200"),
            concept="renta",
            billed=True,
        )

    def test_unbilled_outflow_reads_amount_after_both_words(self):
        operation = interpret("sin facturar 500 papeleria oficina")
        assert operation.kind == OperationKind.RECORD_UNBILLED_OUTFLOW
        assert operation.fields == FlowFields(
            amount=Decimal("500"),
            concept="papeleria oficina",
            billed=False,
        )

    def test_unrecognized_has_no_fields(self):
        operation = interpret("buenos dias")
        assert operation.kind == OperationKind.UNRECOGNIZED
        assert operation.fields is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
