"""Tests for addressing, layouts, sheet location, row matching and slot scanning."""

import asyncio
import pytest
from datetime import date
from decimal import Decimal

from chatledger.config import LedgerSettings
from chatledger.ledger import (
    LedgerLocator,
    SalesColumn,
    block_range,
    build_expense_row,
    build_flow_row,
    build_sale_row,
    cell_range,
    column_index,
    column_letter,
    data_index_to_row_number,
    find_matching_sale,
    first_empty_slot,
    parse_range,
    select_sheet,
    split_header,
    to_cell,
)
from chatledger.models.command import (
    ExpenseFields,
    FlowFields,
    OperationKind,
    SaleFields,
)
from chatledger.services.storage import InMemoryLedgerStore


TODAY = date(2026, 10, 18)


class TestCellAddressing:
    """Tests for column letters and range expressions."""

    @pytest.mark.parametrize(
        "index, letters",
        [(1, "A"), (2, "B"), (11, "K"), (26, "Z"), (27, "AA"), (52, "AZ"),
         (53, "BA"), (702, "ZZ"), (703, "AAA")],
    )
    def test_known_columns(self, index, letters):
        assert column_letter(index) == letters
        assert column_index(letters) == index

    def test_round_trip(self):
        for index in range(1, 5000):
            assert column_index(column_letter(index)) == index

    @pytest.mark.parametrize("index", [0, -1])
    def test_rejects_non_positive(self, index):
        with pytest.raises(ValueError):
            column_letter(index)

    def test_column_index_rejects_garbage(self):
        with pytest.raises(ValueError):
            column_index("A1")

    def test_cell_range(self):
        assert cell_range(19, 1, 2) == "A19:B19"
        assert cell_range(5, 11) == "K5:K5"

    def test_block_range(self):
        assert block_range(16, 1000, 1, 2) == "A16:B1000"
        assert block_range(1, 10000, 1, 12) == "A1:L10000"

    def test_parse_range(self):
        assert parse_range("A16:B1000") == (16, 1, 1000, 2)
        assert parse_range("K5") == (5, 11, 5, 11)
        assert parse_range("b3:a1") == (1, 1, 3, 2)

    def test_parse_range_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_range("Sheet!A1:B2")


class TestLayouts:
    """Tests for row builders."""

    def test_to_cell(self):
        assert to_cell(None) == ""
        assert to_cell(Decimal("2800")) == 2800
        assert isinstance(to_cell(Decimal("2800.00")), int)
        assert to_cell(Decimal("2800.50")) == 2800.5
        assert to_cell("18") == "18"

    def test_sale_row(self):
        fields = SaleFields(
            client="Carlos",
            description="persianas blackout",
            estimated_date="18",
            payment_amount=Decimal("2800"),
            sale_amount=Decimal("5200"),
            advance_amount=Decimal("2000"),
        )
        assert build_sale_row(fields, TODAY, "%d/%m/%Y") == [
            "", "18/10/2026", "Carlos", "", "", "persianas blackout",
            "18", 2800, 5200, "", 2000, "",
        ]

    def test_sale_row_blank_optionals(self):
        row = build_sale_row(SaleFields(client="Ana"), TODAY, "%d/%m/%Y")
        assert len(row) == len(SalesColumn) == 12
        assert row[SalesColumn.ADVANCE - 1] == ""

    def test_expense_row(self):
        fields = ExpenseFields(amount=Decimal("850"), concept="gasolina semana")
        assert build_expense_row(fields, TODAY, "%d/%m/%Y") == [
            "18/10/2026", "gasolina semana", 850,
        ]

    def test_flow_row(self):
        fields = FlowFields(amount=None, concept="renta", billed=True)
        assert build_flow_row(fields) == ["renta", ""]


class TestSelectSheet:
    """Tests for the prefix resolution policy."""

    def test_exact_dated_name_wins_over_listing_order(self):
        names = ["VENTAS", "ING-EGR SEP 26", "ING-EGR OCT 26"]
        assert select_sheet(names, "ING-EGR", "ING-EGR OCT 26") == "ING-EGR OCT 26"

    def test_exact_match_ignores_case_and_spacing(self):
        names = ["ing-egr  oct 26", "ING-EGR SEP 26"]
        assert select_sheet(names, "ING-EGR", "ING-EGR OCT 26") == "ing-egr  oct 26"

    def test_first_prefix_match_otherwise(self):
        names = ["OCTUBRE 2026", "Gastos personales", "GASTOS 2025"]
        assert select_sheet(names, "GASTOS", "GASTOS OCT 26") == "Gastos personales"

    def test_no_match(self):
        assert select_sheet(["OCTUBRE 2026"], "GASTOS", "GASTOS OCT 26") is None


class TestLedgerLocator:
    """Tests for LedgerLocator."""

    def make_locator(self, names=(), on=TODAY):
        store = InMemoryLedgerStore(sheets={name: [] for name in names})
        return LedgerLocator(LedgerSettings(), store, today=lambda: on)

    def test_month_sheet_name(self):
        assert self.make_locator().month_sheet_name() == "OCTUBRE 2026"
        assert self.make_locator(on=date(2027, 1, 3)).month_sheet_name() == "ENERO 2027"

    def test_dated_sheet_name(self):
        locator = self.make_locator(on=date(2030, 9, 1))
        assert locator.dated_sheet_name("GASTOS") == "GASTOS SEP 30"
        assert locator.dated_sheet_name("ING-EGR", on=date(2009, 12, 1)) == "ING-EGR DIC 09"

    def test_resolve_sale_needs_no_listing(self):
        locator = self.make_locator()
        assert asyncio.run(locator.resolve(OperationKind.RECORD_SALE)) == "OCTUBRE 2026"

    def test_resolve_expense_by_prefix(self):
        locator = self.make_locator(names=["OCTUBRE 2026", "GASTOS NOV 25"])
        name = asyncio.run(locator.resolve(OperationKind.RECORD_PERSONAL_EXPENSE))
        assert name == "GASTOS NOV 25"

    def test_resolve_expense_fallback(self):
        locator = self.make_locator(names=["OCTUBRE 2026"])
        name = asyncio.run(locator.resolve(OperationKind.RECORD_PERSONAL_EXPENSE))
        assert name == "GASTOS OCT 26"

    def test_resolve_outflows_share_a_sheet(self):
        locator = self.make_locator(names=["ING-EGR SEP 26", "ING-EGR OCT 26"])
        billed = asyncio.run(locator.resolve(OperationKind.RECORD_BILLED_OUTFLOW))
        unbilled = asyncio.run(locator.resolve(OperationKind.RECORD_UNBILLED_OUTFLOW))
        assert billed == unbilled == "ING-EGR OCT 26"

    def test_resolve_unrecognized(self):
        with pytest.raises(ValueError):
            asyncio.run(self.make_locator().resolve(OperationKind.UNRECOGNIZED))

    def test_custom_month_names(self):
        settings = LedgerSettings(
            month_names="JANUARY,FEBRUARY,MARCH,APRIL,MAY,JUNE,JULY,"
                        "AUGUST,SEPTEMBER,OCTOBER,NOVEMBER,DECEMBER"
        )
        locator = LedgerLocator(settings, InMemoryLedgerStore(), today=lambda: TODAY)
        assert locator.month_sheet_name() == "OCTOBER 2026"
        assert locator.dated_sheet_name("GASTOS") == "GASTOS OCT 26"

    def test_month_names_must_be_twelve(self):
        with pytest.raises(ValueError):
            LedgerSettings(month_names="ENERO,FEBRERO")


class TestFindMatchingSale:
    """Tests for the natural-key row matcher."""

    ROWS = [
        ["1", "01/10/2026", "Ana", "", "", "cortina roller", "", "", "", "", "500"],
        ["2", "02/10/2026", " carlos ", "", "", " Persianas Blackout ", "18"],
        ["3", "03/10/2026", "Carlos", "", "", "persianas blackout"],
    ]

    def test_match_is_trimmed_and_case_insensitive(self):
        assert find_matching_sale(self.ROWS, "Carlos", "persianas blackout") == 1

    def test_first_match_wins(self):
        assert find_matching_sale(self.ROWS, "CARLOS", "PERSIANAS BLACKOUT") == 1

    def test_client_and_description_both_required(self):
        assert find_matching_sale(self.ROWS, "Ana", "persianas blackout") is None
        assert find_matching_sale(self.ROWS, "Luis", "cortina roller") is None

    def test_empty_description_never_matches(self):
        rows = [["", "", "Ana", "", "", ""]]
        assert find_matching_sale(rows, "Ana", "") is None
        assert find_matching_sale(rows, "Ana", "   ") is None

    def test_short_rows(self):
        assert find_matching_sale([[], ["1"]], "Ana", "cortina") is None

    def test_split_header_and_row_numbers(self):
        header, data = split_header([["Folio", "Fecha"], ["1"], ["2"]])
        assert header == ["Folio", "Fecha"]
        assert data == [["1"], ["2"]]
        assert data_index_to_row_number(0) == 2
        assert data_index_to_row_number(1) == 3

    def test_split_header_empty_grid(self):
        assert split_header([]) == ([], [])


class TestFirstEmptySlot:
    """Tests for the outflow band slot scanner."""

    def test_first_gap(self):
        grid = [["a", "1"], ["b", "2"], ["c", "3"], [], ["x", "5"]]
        assert first_empty_slot(grid, 37) == 40

    def test_whitespace_counts_as_empty(self):
        grid = [["a", "1"], [" ", "  "], ["c", "3"]]
        assert first_empty_slot(grid, 16) == 17

    def test_half_filled_row_is_occupied(self):
        grid = [["a", "1"], ["", "2"], ["c"], ["", ""]]
        assert first_empty_slot(grid, 16) == 19

    def test_full_window_appends_after_it(self):
        grid = [["a", "1"], ["b", "2"], ["c", "3"]]
        assert first_empty_slot(grid, 37) == 40

    def test_empty_band(self):
        assert first_empty_slot([], 16) == 16


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
