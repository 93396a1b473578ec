"""Text rendering of xlrd cells.

Both the identifier predicate and the join key compare cell *text*, so numeric
identifiers read back as floats must render the way a spreadsheet shows them
(``12345.0`` becomes ``"12345"``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import xlrd

if TYPE_CHECKING:
    from xlrd.sheet import Cell, Sheet

BOOLEAN_TEXT = {0: "FALSE", 1: "TRUE"}


def format_number(value: float) -> str:
    """Render a numeric cell value without a spurious ``.0`` suffix.

    Examples
    --------
    >>> format_number(12345.0)
    '12345'
    >>> format_number(19.5)
    '19.5'
    """
    if value == int(value):
        return str(int(value))
    return repr(value)


def cell_text(cell: Cell | None, datemode: int = 0) -> str:
    """Return the textual representation of a cell.

    Parameters
    ----------
    cell : Cell | None
        Cell from ``xlrd``; ``None`` for a position beyond the row's length.
    datemode : int, optional
        Workbook date mode (``book.datemode``) used to render date cells.

    Returns
    -------
    str
        Text for text cells, trimmed numbers, ``TRUE``/``FALSE``, Excel error
        text such as ``#DIV/0!``, ISO dates, and ``""`` for empty cells.
    """
    if cell is None:
        return ""

    ctype = cell.ctype
    if ctype == xlrd.XL_CELL_TEXT:
        return str(cell.value)
    if ctype == xlrd.XL_CELL_NUMBER:
        return format_number(cell.value)
    if ctype == xlrd.XL_CELL_BOOLEAN:
        return BOOLEAN_TEXT.get(int(cell.value), str(cell.value))
    if ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value, f"#ERR{cell.value}")
    if ctype == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate_as_datetime(cell.value, datemode).isoformat()
        except xlrd.xldate.XLDateError:
            return format_number(cell.value)
    if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return ""
    return str(cell.value)


def row_cell(sheet: Sheet, rowx: int, colx: int) -> Cell | None:
    """Return the cell at ``(rowx, colx)`` or ``None`` when the row is shorter."""
    if colx >= sheet.row_len(rowx):
        return None
    return sheet.cell(rowx, colx)


def is_hole(sheet: Sheet, rowx: int) -> bool:
    """Whether a row index carries no stored cells (ragged sheets only)."""
    return sheet.row_len(rowx) == 0
