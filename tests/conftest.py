"""Pytest configuration for payables_splitter tests.

This module provides:
- A factory fixture writing small ``.xls`` workbooks with xlwt
- The reference payables workbook used by the split scenarios
- A helper reading sheets back as plain value grids
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
import xlrd
import xlwt

from payables_splitter.workbook import open_source_workbook

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

# Rows are lists of cell values; ``None`` as a row leaves a hole, ``None`` as a
# value leaves the cell unwritten; ``(value, style)`` applies an xlwt style.
SheetRows = list[list[Any] | None]

INVOICE_HEADER = ["IDINVC", "VENDOR", "CNTITEM", "AMOUNT"]
DETAIL_HEADER = ["CNTITEM", "LINE", "DESCRIPTION"]


def write_xls(path: Path, sheets: dict[str, SheetRows]) -> Path:
    """Write ``sheets`` to ``path`` as a legacy ``.xls`` workbook."""
    workbook = xlwt.Workbook(encoding="utf-8")
    for name, rows in sheets.items():
        sheet = workbook.add_sheet(name)
        for rowx, row in enumerate(rows):
            if row is None:
                continue
            for colx, value in enumerate(row):
                if value is None:
                    continue
                if isinstance(value, tuple):
                    sheet.write(rowx, colx, value[0], value[1])
                else:
                    sheet.write(rowx, colx, value)
    workbook.save(str(path))
    return path


def read_values(path: Path, sheet_name: str) -> list[list[Any]]:
    """Read a sheet back as rows of cell values (ragged, blanks included)."""
    book = xlrd.open_workbook(str(path), formatting_info=True, ragged_rows=True)
    sheet = book.sheet_by_name(sheet_name)
    return [[cell.value for cell in sheet.row(rowx)] for rowx in range(sheet.nrows)]


def payables_sheets() -> dict[str, SheetRows]:
    """Reference payables workbook.

    Invoices: "12345" -> P1 (CNTITEM 1), "AB123" -> P2 (CNTITEM 2), "" -> P2
    (CNTITEM 3), numeric 67890 -> P1 (CNTITEM 5), plus a hole at row 5.
    Invoice_Details: CNTITEM 1, 2, 4, 1, 5 so "4" matches no invoice.
    """
    return {
        "Summary": [["Report", "Payables"], ["Generated", 45123.0]],
        "Invoices": [
            INVOICE_HEADER,
            ["12345", "ACME", "1", 100.0],
            ["AB123", "Globex", "2", 250.5],
            ["", "Initech", "3", 75.0],
            [67890, "Umbrella", "5", 12.0],
            None,
            ["9X", "Hooli", "2", 8.0],
        ],
        "Invoice_Details": [
            DETAIL_HEADER,
            ["1", 1, "Widgets"],
            ["2", 1, "Gadgets"],
            ["4", 1, "Orphan"],
            ["1", 2, "Sprockets"],
            ["5", 1, "Bolts"],
        ],
        "Vendors": [["VENDOR", "ACTIVE"], ["ACME", True], ["Globex", False]],
        "Empty": [],
    }


@pytest.fixture
def make_xls(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a workbook under ``tmp_path``."""

    def _make(sheets: dict[str, SheetRows], name: str = "source.xls") -> Path:
        return write_xls(tmp_path / name, sheets)

    return _make


@pytest.fixture
def payables_path(make_xls: Callable[..., Path]) -> Path:
    """Reference payables workbook on disk."""
    return make_xls(payables_sheets(), name="payables.xls")


@pytest.fixture
def payables_book(payables_path: Path) -> xlrd.book.Book:
    """Reference payables workbook loaded the way the splitter loads it."""
    return open_source_workbook(payables_path)
