"""Tests for the detail sheet join filter."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from payables_splitter.exceptions import ConfigurationError
from payables_splitter.splitter import filter_details, partition_invoices, resolve_columns
from payables_splitter.workbook import open_source_workbook

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    import xlrd


class TestFilterDetails:
    """Tests for filter_details."""

    @pytest.fixture
    def details(self, payables_book: xlrd.book.Book) -> xlrd.sheet.Sheet:
        return payables_book.sheet_by_name("Invoice_Details")

    def test_keeps_matching_rows_in_order(self, details: xlrd.sheet.Sheet) -> None:
        """Matching rows keep their source order after the header."""
        columns = resolve_columns(details, ["CNTITEM"])

        assert filter_details(details, columns, {"1", "5"}) == [0, 1, 4, 5]
        assert filter_details(details, columns, {"2"}) == [0, 2]

    def test_empty_key_set_keeps_header_only(self, details: xlrd.sheet.Sheet) -> None:
        columns = resolve_columns(details, ["CNTITEM"])
        assert filter_details(details, columns, set()) == [0]

    def test_unmatched_detail_in_neither_partition(self, payables_book: xlrd.book.Book) -> None:
        """CNTITEM 4 has no invoice, so neither partition carries it."""
        invoices = payables_book.sheet_by_name("Invoices")
        details = payables_book.sheet_by_name("Invoice_Details")
        p1, p2 = partition_invoices(invoices, resolve_columns(invoices, ["IDINVC", "CNTITEM"]))
        columns = resolve_columns(details, ["CNTITEM"])

        rows_p1 = filter_details(details, columns, p1.join_keys)
        rows_p2 = filter_details(details, columns, p2.join_keys)

        assert 3 not in rows_p1
        assert 3 not in rows_p2

    def test_numeric_join_keys_match_text(self, make_xls: Callable[..., Path]) -> None:
        """A numeric CNTITEM cell matches the same key stored as text elsewhere."""
        path = make_xls({"Invoice_Details": [["CNTITEM"], [1], ["1"], [1.5]]})
        details = open_source_workbook(path).sheet_by_name("Invoice_Details")
        columns = resolve_columns(details, ["CNTITEM"])

        assert filter_details(details, columns, {"1"}) == [0, 1, 2]
        assert filter_details(details, columns, {"1.5"}) == [0, 3]

    def test_skips_holes(self, make_xls: Callable[..., Path]) -> None:
        path = make_xls({"Invoice_Details": [["CNTITEM"], None, ["1"]]})
        details = open_source_workbook(path).sheet_by_name("Invoice_Details")
        columns = resolve_columns(details, ["CNTITEM"])

        assert filter_details(details, columns, {"1", ""}) == [0, 2]

    def test_missing_join_header_raises(self, make_xls: Callable[..., Path]) -> None:
        path = make_xls({"Invoice_Details": [["LINE"], [1]]})
        details = open_source_workbook(path).sheet_by_name("Invoice_Details")

        with pytest.raises(ConfigurationError, match="CNTITEM"):
            resolve_columns(details, ["CNTITEM"])
