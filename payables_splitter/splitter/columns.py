"""Header resolution: map header text to column indexes once per sheet."""

from __future__ import annotations

from typing import TYPE_CHECKING

from payables_splitter.exceptions import ConfigurationError
from payables_splitter.splitter.cells import cell_text, is_hole
from payables_splitter.splitter.types import ColumnMap

if TYPE_CHECKING:
    from collections.abc import Iterable

    from xlrd.sheet import Sheet

HEADER_ROW = 0


def header_names(sheet: Sheet) -> list[str]:
    """Return the header row's cell texts in column order.

    Raises
    ------
    ConfigurationError
        If the sheet has no header row.
    """
    if sheet.nrows == 0 or is_hole(sheet, HEADER_ROW):
        msg = f"Sheet '{sheet.name}' has no header row"
        raise ConfigurationError(msg)

    return [cell_text(cell) for cell in sheet.row(HEADER_ROW)]


def resolve_columns(sheet: Sheet, names: Iterable[str]) -> ColumnMap:
    """Locate each named column by exact header text.

    The first column whose header equals a name wins, matching a left-to-right
    header scan.

    Parameters
    ----------
    sheet : Sheet
        Sheet whose row 0 is the header row.
    names : Iterable[str]
        Header texts that must be present.

    Returns
    -------
    ColumnMap
        Stable name -> index mapping for the sheet.

    Raises
    ------
    ConfigurationError
        If the header row is absent or any requested name is missing.
    """
    headers = header_names(sheet)

    indexes: dict[str, int] = {}
    for name in names:
        if name not in headers:
            msg = f"Column '{name}' not found in header row of sheet '{sheet.name}'"
            raise ConfigurationError(msg)
        indexes[name] = headers.index(name)

    return ColumnMap(sheet_name=sheet.name, indexes=indexes)
