"""Workbook assembler - rebuild a split workbook from a loaded source.

Output layout
-------------
1. ``Invoices``: the partition's invoice rows (header first), packed from row 0.
2. ``Invoice_Details``: the partition's detail rows, packed the same way.
3. Every other source sheet, in source order, copied in full at the same row
   positions.

Cell values keep their type: text, numbers, dates (as serial numbers with a
date format), booleans. Error cells are written as their error text and any
other cell type falls back to its text form. The reader only exposes cached
formula results, so formula cells are copied as values.

In formatting mode the assembler additionally copies column widths, custom row
heights and per-cell styles through a :class:`StyleCache` owned by the
assembler. One assembler builds one workbook.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import xlrd
import xlwt

from payables_splitter.config import setup_logging
from payables_splitter.splitter.cells import cell_text, is_hole
from payables_splitter.workbook.styles import StyleCache

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from xlrd.book import Book
    from xlrd.sheet import Cell, Sheet

logger = setup_logging(__name__)

INVOICE_SHEET = "Invoices"
DETAIL_SHEET = "Invoice_Details"
DEFAULT_DATE_FORMAT = "yyyy-mm-dd"


class WorkbookAssembler:
    """Build one destination workbook from a source workbook.

    Parameters
    ----------
    source : xlrd.book.Book
        Loaded source workbook (``ragged_rows=True``; ``formatting_info=True``
        when ``preserve_formatting`` is set).
    preserve_formatting : bool, optional
        Copy styles, column widths and row heights.
    invoice_sheet : str, optional
        Name of the filtered invoice sheet.
    detail_sheet : str, optional
        Name of the filtered detail sheet.
    """

    def __init__(
        self,
        source: Book,
        preserve_formatting: bool = True,
        invoice_sheet: str = INVOICE_SHEET,
        detail_sheet: str = DETAIL_SHEET,
    ) -> None:
        self.source = source
        self.preserve_formatting = preserve_formatting and bool(source.formatting_info)
        self.invoice_sheet = invoice_sheet
        self.detail_sheet = detail_sheet
        self.styles = StyleCache(source)
        self._date_style = xlwt.easyxf(num_format_str=DEFAULT_DATE_FORMAT)
        self._built = False

        self.workbook = xlwt.Workbook(encoding="utf-8")
        self.workbook.dates_1904 = source.datemode == 1

    def build(self, invoice_rows: Sequence[int], detail_rows: Sequence[int]) -> xlwt.Workbook:
        """Assemble the destination workbook.

        Parameters
        ----------
        invoice_rows : Sequence[int]
            Source row indexes for the invoice sheet, header first.
        detail_rows : Sequence[int]
            Source row indexes for the detail sheet, header first.

        Returns
        -------
        xlwt.Workbook
            New workbook with the filtered sheets followed by all other sheets.

        Raises
        ------
        RuntimeError
            If called twice on the same assembler.
        """
        if self._built:
            msg = "WorkbookAssembler.build() may only be called once per destination workbook"
            raise RuntimeError(msg)
        self._built = True

        self.copy_rows(self.invoice_sheet, invoice_rows)
        self.copy_rows(self.detail_sheet, detail_rows)

        for sheet in self.source.sheets():
            if sheet.name in (self.invoice_sheet, self.detail_sheet):
                continue
            self.copy_sheet(sheet)

        logger.debug(
            "Assembled workbook: %d sheets, %d shared styles",
            self.source.nsheets,
            len(self.styles),
        )
        return self.workbook

    def copy_rows(self, name: str, rows: Sequence[int]) -> xlwt.Worksheet:
        """Create sheet ``name`` holding the given source rows, packed from row 0."""
        src = self.source.sheet_by_name(name)
        dest = self.workbook.add_sheet(name)

        if self.preserve_formatting and rows:
            self._copy_column_widths(src, dest, rows[0])

        for dest_rowx, src_rowx in enumerate(rows):
            self._copy_row(src, dest, src_rowx, dest_rowx)

        logger.debug("Copied %d rows into '%s'", len(rows), name)
        return dest

    def copy_sheet(self, src: Sheet) -> xlwt.Worksheet:
        """Copy a whole sheet, keeping every row at its original position."""
        dest = self.workbook.add_sheet(src.name)
        present = [rowx for rowx in range(src.nrows) if not is_hole(src, rowx)]

        # Empty sheets have no first row to take widths from
        if self.preserve_formatting and present:
            self._copy_column_widths(src, dest, present[0])

        for rowx in present:
            self._copy_row(src, dest, rowx, rowx)

        logger.debug("Copied sheet '%s' (%d rows)", src.name, len(present))
        return dest

    def _copy_column_widths(self, src: Sheet, dest: xlwt.Worksheet, header_rowx: int) -> None:
        for colx in range(src.row_len(header_rowx)):
            info = src.colinfo_map.get(colx)
            if info is None:
                continue
            dest.col(colx).width = info.width
            dest.col(colx).hidden = bool(info.hidden)

    def _copy_row(self, src: Sheet, dest: xlwt.Worksheet, src_rowx: int, dest_rowx: int) -> None:
        dest_row = dest.row(dest_rowx)

        if self.preserve_formatting:
            info = src.rowinfo_map.get(src_rowx)
            if info is not None and info.height_mismatch:
                dest_row.height = info.height
                dest_row.height_mismatch = True

        for colx, cell in enumerate(src.row(src_rowx)):
            self._copy_cell(cell, dest_row, colx)

    def _copy_cell(self, cell: Cell, dest_row: xlwt.Row, colx: int) -> None:
        if cell.ctype == xlrd.XL_CELL_EMPTY:
            return
        if cell.ctype == xlrd.XL_CELL_BLANK and not self.preserve_formatting:
            return

        value = self._cell_value(cell)
        style = self._cell_style(cell)
        if style is None:
            dest_row.write(colx, value)
        else:
            dest_row.write(colx, value, style)

    def _cell_value(self, cell: Cell) -> Any:
        ctype = cell.ctype
        if ctype == xlrd.XL_CELL_TEXT:
            return cell.value
        if ctype in (xlrd.XL_CELL_NUMBER, xlrd.XL_CELL_DATE):
            return float(cell.value)
        if ctype == xlrd.XL_CELL_BOOLEAN:
            return bool(cell.value)
        if ctype == xlrd.XL_CELL_BLANK:
            return None
        return cell_text(cell, self.source.datemode)

    def _cell_style(self, cell: Cell) -> xlwt.XFStyle | None:
        if self.preserve_formatting and cell.xf_index is not None:
            return self.styles.style_for(cell.xf_index)
        if cell.ctype == xlrd.XL_CELL_DATE:
            return self._date_style
        return None


def assemble_workbook(
    source: Book,
    invoice_rows: Sequence[int],
    detail_rows: Sequence[int],
    preserve_formatting: bool = True,
    invoice_sheet: str = INVOICE_SHEET,
    detail_sheet: str = DETAIL_SHEET,
) -> xlwt.Workbook:
    """Build one split workbook with a fresh assembler and style cache."""
    assembler = WorkbookAssembler(
        source,
        preserve_formatting=preserve_formatting,
        invoice_sheet=invoice_sheet,
        detail_sheet=detail_sheet,
    )
    return assembler.build(invoice_rows, detail_rows)


def other_sheet_names(book: Book, excluded: Iterable[str] = (INVOICE_SHEET, DETAIL_SHEET)) -> list[str]:
    """Names of the sheets copied verbatim, in source order."""
    skip = set(excluded)
    return [name for name in book.sheet_names() if name not in skip]
