"""Tests for header resolution and the invoice row classifier.

Tests cover:
1. The digits-only identifier predicate
2. Cell text rendering used by the predicate and the join key
3. Header column resolution and configuration errors
4. Partitioning of the reference invoices sheet (holes, empty IDs, numeric IDs)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from payables_splitter.exceptions import ConfigurationError
from payables_splitter.splitter import (
    classify_invoices,
    format_number,
    header_names,
    is_digits_only,
    partition_invoices,
    resolve_columns,
)
from payables_splitter.splitter.cells import cell_text
from payables_splitter.workbook import open_source_workbook

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    import xlrd

# =============================================================================
# Predicate
# =============================================================================


class TestIsDigitsOnly:
    """Tests for the identifier predicate."""

    @pytest.mark.parametrize("text", ["12345", "0", "000123"])
    def test_digits_are_numeric(self, text: str) -> None:
        """Strings made only of digits belong to P1."""
        assert is_digits_only(text) is True

    @pytest.mark.parametrize("text", ["AB123", "123A", "12.5", "-12", " 12", "12 ", "1,000"])
    def test_mixed_text_is_not_numeric(self, text: str) -> None:
        """Any non-digit character sends the row to P2."""
        assert is_digits_only(text) is False

    def test_empty_string_is_not_numeric(self) -> None:
        """Empty identifiers are not digits-only."""
        assert is_digits_only("") is False


class TestCellText:
    """Tests for the text form of cells."""

    def test_integral_number_drops_decimal(self) -> None:
        assert format_number(12345.0) == "12345"

    def test_fractional_number_kept(self) -> None:
        assert format_number(12.5) == "12.5"

    def test_missing_cell_is_empty(self) -> None:
        assert cell_text(None) == ""

    def test_sheet_cells(self, payables_book: xlrd.book.Book) -> None:
        """Text, number and boolean cells render as displayed."""
        invoices = payables_book.sheet_by_name("Invoices")
        vendors = payables_book.sheet_by_name("Vendors")

        assert cell_text(invoices.cell(1, 0)) == "12345"
        assert cell_text(invoices.cell(4, 0)) == "67890"
        assert cell_text(invoices.cell(2, 3)) == "250.5"
        assert cell_text(vendors.cell(1, 1)) == "TRUE"
        assert cell_text(vendors.cell(2, 1)) == "FALSE"


# =============================================================================
# Column resolution
# =============================================================================


class TestResolveColumns:
    """Tests for one-time header resolution."""

    def test_header_names(self, payables_book: xlrd.book.Book) -> None:
        invoices = payables_book.sheet_by_name("Invoices")
        assert header_names(invoices) == ["IDINVC", "VENDOR", "CNTITEM", "AMOUNT"]

    def test_resolves_indexes(self, payables_book: xlrd.book.Book) -> None:
        """Columns are located by exact header text."""
        columns = resolve_columns(payables_book.sheet_by_name("Invoices"), ["IDINVC", "CNTITEM"])

        assert columns["IDINVC"] == 0
        assert columns["CNTITEM"] == 2
        assert "AMOUNT" not in columns
        assert columns.sheet_name == "Invoices"

    def test_missing_column_raises(self, payables_book: xlrd.book.Book) -> None:
        """A missing header is a configuration error."""
        details = payables_book.sheet_by_name("Invoice_Details")
        with pytest.raises(ConfigurationError, match="IDINVC"):
            resolve_columns(details, ["IDINVC"])

    def test_empty_sheet_raises(self, payables_book: xlrd.book.Book) -> None:
        """A sheet without a header row cannot be resolved."""
        with pytest.raises(ConfigurationError, match="no header row"):
            resolve_columns(payables_book.sheet_by_name("Empty"), ["CNTITEM"])

    def test_header_match_is_exact(self, make_xls: Callable[..., Path]) -> None:
        """Near-miss header text does not match."""
        path = make_xls({"Invoices": [["idinvc", "CNTITEM "], ["1", "1"]]})
        sheet = open_source_workbook(path).sheet_by_name("Invoices")

        with pytest.raises(ConfigurationError):
            resolve_columns(sheet, ["IDINVC"])
        with pytest.raises(ConfigurationError):
            resolve_columns(sheet, ["CNTITEM"])

    def test_configuration_error_is_value_error(self) -> None:
        assert issubclass(ConfigurationError, ValueError)


# =============================================================================
# Partitioning
# =============================================================================


class TestClassifyInvoices:
    """Tests for classify_invoices / partition_invoices."""

    @pytest.fixture
    def invoices(self, payables_book: xlrd.book.Book) -> xlrd.sheet.Sheet:
        return payables_book.sheet_by_name("Invoices")

    def test_numeric_partition(self, invoices: xlrd.sheet.Sheet) -> None:
        """Digits-only identifiers (text or numeric cells) land in P1."""
        columns = resolve_columns(invoices, ["IDINVC", "CNTITEM"])
        p1 = classify_invoices(invoices, columns, numeric_only=True)

        assert p1.label == "P1"
        assert p1.rows == [0, 1, 4]
        assert p1.join_keys == {"1", "5"}
        assert p1.data_row_count == 2

    def test_other_partition(self, invoices: xlrd.sheet.Sheet) -> None:
        """Alphanumeric and empty identifiers land in P2."""
        columns = resolve_columns(invoices, ["IDINVC", "CNTITEM"])
        p2 = classify_invoices(invoices, columns, numeric_only=False)

        assert p2.label == "P2"
        assert p2.rows == [0, 2, 3, 6]
        assert p2.join_keys == {"2", "3"}

    def test_header_always_first(self, invoices: xlrd.sheet.Sheet) -> None:
        columns = resolve_columns(invoices, ["IDINVC", "CNTITEM"])
        for partition in partition_invoices(invoices, columns):
            assert partition.rows[0] == 0

    def test_partitions_disjoint_and_exhaustive(self, invoices: xlrd.sheet.Sheet) -> None:
        """Every non-hole data row is in exactly one partition."""
        columns = resolve_columns(invoices, ["IDINVC", "CNTITEM"])
        p1, p2 = partition_invoices(invoices, columns)

        data_p1 = set(p1.rows[1:])
        data_p2 = set(p2.rows[1:])
        present = {r for r in range(1, invoices.nrows) if invoices.row_len(r) > 0}

        assert data_p1.isdisjoint(data_p2)
        assert data_p1 | data_p2 == present
        assert 5 not in present  # hole

    def test_join_keys_match_partition_rows(self, invoices: xlrd.sheet.Sheet) -> None:
        """Join keys are exactly the CNTITEM texts of the partition's data rows."""
        columns = resolve_columns(invoices, ["IDINVC", "CNTITEM"])
        for partition in partition_invoices(invoices, columns):
            expected = {cell_text(invoices.cell(r, 2)) for r in partition.rows[1:]}
            assert partition.join_keys == expected

    def test_short_row_missing_id_goes_to_p2(self, make_xls: Callable[..., Path]) -> None:
        """A row ending before the IDINVC column counts as an empty identifier."""
        path = make_xls({"Invoices": [["CNTITEM", "IDINVC"], ["7"], ["8", "42"]]})
        sheet = open_source_workbook(path).sheet_by_name("Invoices")
        columns = resolve_columns(sheet, ["IDINVC", "CNTITEM"])

        p1, p2 = partition_invoices(sheet, columns)

        assert p1.rows == [0, 2]
        assert p2.rows == [0, 1]
        assert p2.join_keys == {"7"}

    def test_fractional_numeric_id_goes_to_p2(self, make_xls: Callable[..., Path]) -> None:
        path = make_xls({"Invoices": [["IDINVC", "CNTITEM"], [12.5, "1"]]})
        sheet = open_source_workbook(path).sheet_by_name("Invoices")
        columns = resolve_columns(sheet, ["IDINVC", "CNTITEM"])

        p1, p2 = partition_invoices(sheet, columns)

        assert p1.data_row_count == 0
        assert p2.rows == [0, 1]

    def test_source_not_mutated(self, invoices: xlrd.sheet.Sheet) -> None:
        before = [[c.value for c in invoices.row(r)] for r in range(invoices.nrows)]
        columns = resolve_columns(invoices, ["IDINVC", "CNTITEM"])
        partition_invoices(invoices, columns)
        after = [[c.value for c in invoices.row(r)] for r in range(invoices.nrows)]

        assert before == after
